from typing import NewType

EntryId = NewType("EntryId", int)
ExchangeId = NewType("ExchangeId", int)
TaxAccountId = NewType("TaxAccountId", int)
IdentifiedPropertyId = NewType("IdentifiedPropertyId", int)
ImprovementId = NewType("ImprovementId", int)
ProfileId = NewType("ProfileId", str)
