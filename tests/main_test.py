import logging
from pathlib import Path
from typing import Any

import pytest

from config import config
from db.db import init_db
from db.repositories import AccountingEntryRepository
from domain.base_types import ExchangeId
from main import main


@pytest.fixture()
def ledger_csv(tmp_path: Path) -> Path:
    csv_path = tmp_path / "entries.csv"
    csv_path.write_text("date,credit,debit,entry_type,to_exchange_id\n2024-01-05,500000,,sale_proceeds,1\n")
    return csv_path


def _stored_entries(db_file: Path) -> int:
    return len(AccountingEntryRepository(init_db(db_file=db_file)).list_for_exchange(ExchangeId(1)))


def test_main_configures_logging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, ledger_csv: Path) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    main(["--db", str(tmp_path / "ledger.db"), "import-entries", "--csv", str(ledger_csv)])

    assert len(calls) == 1
    assert calls[0]["level"] == config().log_level


def test_import_reset_starts_from_empty_database(tmp_path: Path, ledger_csv: Path) -> None:
    db_file = tmp_path / "ledger.db"

    main(["--db", str(db_file), "import-entries", "--csv", str(ledger_csv)])
    main(["--db", str(db_file), "import-entries", "--csv", str(ledger_csv)])
    assert _stored_entries(db_file) == 2

    main(["--db", str(db_file), "import-entries", "--csv", str(ledger_csv), "--reset"])
    assert _stored_entries(db_file) == 1
