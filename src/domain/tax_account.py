from __future__ import annotations

from pydantic import BaseModel

from .base_types import ProfileId, TaxAccountId

SPOUSAL_ACCOUNT_PREFIX = "INV-"
NAME_PART_LENGTH = 3
NAME_PAD_CHAR = "X"
SEQUENCE_WIDTH = 3


class TaxAccount(BaseModel):
    id: TaxAccountId
    name: str
    account_number: str | None = None
    is_spousal: bool = False
    primary_profile_id: ProfileId | None = None
    spouse_profile_id: ProfileId | None = None


def build_spousal_account_number(primary_last_name: str | None, spouse_last_name: str | None, sequence: int) -> str:
    """Format the account number of a joint (spousal) tax account.

    ``sequence`` is the number of spousal accounts at creation time. Reading
    that count and storing the resulting number is a read-then-write pair;
    callers must serialise it (see ``TaxAccountRepository.create_spousal``).
    """
    if sequence < 0:
        raise ValueError(f"sequence must be >= 0, got {sequence}")
    return (
        f"{SPOUSAL_ACCOUNT_PREFIX}{_name_part(primary_last_name)}{_name_part(spouse_last_name)}"
        f"{sequence:0{SEQUENCE_WIDTH}d}"
    )


def _name_part(last_name: str | None) -> str:
    if not last_name:
        return NAME_PAD_CHAR * NAME_PART_LENGTH
    return last_name[:NAME_PART_LENGTH].upper().ljust(NAME_PART_LENGTH, NAME_PAD_CHAR)
