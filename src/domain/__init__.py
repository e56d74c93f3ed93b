"""Domain models and pure calculations for the exchange ledger.

This package contains in-memory (Pydantic) models describing ledger entries,
identified replacement properties and tax accounts, plus the aggregation and
1031 identification rule functions that operate on them. They are independent
from persistence models so that business logic and testing can evolve without
DB coupling.
"""

__all__ = [
    "base_types",
    "exchange",
    "exchange_rules",
    "identified_property",
    "ledger",
    "tax_account",
    "year_to_date",
]
