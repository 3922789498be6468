"""Importer plumbing: the ImportResult record and the BaseImporter ABC."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from hashlib import sha256

import structlog

from ..data.database import get_db

log = structlog.get_logger(__name__)


@dataclass
class ImportResult:
    source: str
    transactions_imported: int = 0
    transactions_skipped: int = 0  # already imported earlier
    rows_rejected: int = 0
    unresolved_names: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False


class _DryRunAbort(Exception):
    """Raised at the end of a dry run to roll the import back."""

    def __init__(self, result: ImportResult):
        super().__init__(result.source)
        self.result = result


class BaseImporter(ABC):
    SOURCE_PREFIX: str  # "legacy", etc.

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(self, *args, **kwargs) -> ImportResult:
        """Import in one transaction. A dry run does all the work, then rolls it back."""
        try:
            with get_db().transaction():
                result = self._run_import(*args, **kwargs)
                result.dry_run = self.dry_run
                if self.dry_run:
                    raise _DryRunAbort(result)
        except _DryRunAbort as abort:
            result = abort.result
        log.info(
            "import_finished",
            importer=self.SOURCE_PREFIX,
            source=result.source,
            imported=result.transactions_imported,
            skipped=result.transactions_skipped,
            rejected=result.rows_rejected,
            dry_run=result.dry_run,
        )
        return result

    def _make_source_id(self, raw: str) -> str:
        """Stable id for an imported row, so re-imports can skip it."""
        return f"{self.SOURCE_PREFIX}-{sha256(raw.encode()).hexdigest()[:16]}"

    @abstractmethod
    def _run_import(self, *args, **kwargs) -> ImportResult: ...
