"""Importer for the legacy spreadsheet export.

Expected columns:

    Description,Type,Amount,Status,Paid By,Received By,Notes

Rows carry partner *names* and free-form status labels, e.g.

    Justdial,Expense,"20,626",Paid,Karan + Prabee,Justdial,Split per equity
    Payment from Ankur,Receivable,37000,"Partial (₹15,000 Paid)",Ankur,Business Account,

Names are resolved against the partners already in the database. Each row
gets an id derived from its content, so importing the same file twice adds
nothing the second time. Identical rows within one file are told apart by
their occurrence count, so a repeated entry is still imported once per row.
"""

import csv
from collections import Counter
from pathlib import Path

import structlog

from ..core.exceptions import ValidationError
from ..core.models import Partner, Transaction
from ..core.parsing import parse_amount, parse_status, resolve_payers, resolve_recipient
from ..data.repositories.partners_repo import PartnersRepository
from ..data.repositories.transactions_repo import TransactionsRepository
from .base import BaseImporter, ImportResult

log = structlog.get_logger(__name__)

COLUMNS = ("Description", "Type", "Amount", "Status", "Paid By", "Received By", "Notes")
REQUIRED_COLUMNS = ("Description", "Type", "Amount")


class LegacyCsvImporter(BaseImporter):
    SOURCE_PREFIX = "legacy"

    def _run_import(self, csv_path: Path) -> ImportResult:
        partners = PartnersRepository().list_all()
        tx_repo = TransactionsRepository()
        result = ImportResult(source=Path(csv_path).name)
        seen: Counter = Counter()

        with open(csv_path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise ValidationError(f"Missing column(s): {', '.join(missing)}")
            for lineno, row in enumerate(reader, 2):
                self._process_row(row, lineno, partners, tx_repo, result, seen)
        return result

    def _process_row(
        self,
        row: dict,
        lineno: int,
        partners: list[Partner],
        tx_repo: TransactionsRepository,
        result: ImportResult,
        seen: Counter,
    ) -> None:
        cells = {c: (row.get(c) or "").strip() for c in COLUMNS}
        key = "|".join(cells.values())
        seen[key] += 1
        # first occurrence keeps the plain content hash
        tx_id = self._make_source_id(key if seen[key] == 1 else f"{key}#{seen[key]}")
        if tx_repo.get_by_id(tx_id) is not None:
            result.transactions_skipped += 1
            return

        status = parse_status(cells["Status"])
        payers = resolve_payers(cells["Paid By"], partners)
        try:
            tx = Transaction(
                id=tx_id,
                description=cells["Description"],
                amount=parse_amount(cells["Amount"]),
                transaction_type=cells["Type"],
                status=status.status,
                amount_settled=status.amount_settled,
                paid_by=payers.ids,
                received_by=resolve_recipient(cells["Received By"], partners),
                notes=cells["Notes"],
            )
        except ValidationError as e:
            log.warning("legacy_row_rejected", line=lineno, reason=str(e))
            result.rows_rejected += 1
            result.warnings.append(f"Line {lineno}: {e}, skipped")
            return

        if status.fallback:
            result.warnings.append(
                f"Line {lineno}: no settled amount in status {cells['Status']!r}, "
                f"full amount assumed"
            )
        for name in payers.unresolved:
            if name not in result.unresolved_names:
                result.unresolved_names.append(name)
            result.warnings.append(f"Line {lineno}: payer {name!r} is not a partner, ignored")

        tx_repo.create(tx)
        result.transactions_imported += 1
