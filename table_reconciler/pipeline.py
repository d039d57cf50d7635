"""
Reconciliation Session.

The central entry point that wires every component together:

    Source text  →  TableParser  →  Differ  →  ReconciliationStore
                 →  (reviewer decisions)  →  PatchApplier  →  TableSerializer

One session owns one store.  Concurrent comparisons each construct their
own session; nothing is shared between them.

Usage
-----
>>> from table_reconciler.pipeline import ReconciliationSession
>>> from table_reconciler.schema import DiffStatus
>>>
>>> session = ReconciliationSession()
>>> diffs = session.compare("Name,City\\nBob,LA", "Name,City\\nBob,SF")
>>> session.set_status(1, 1, DiffStatus.ACCEPTED)
>>> print(session.export())
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from table_reconciler.config import PipelineConfig
from table_reconciler.differ import Differ
from table_reconciler.logging_setup import configure_logging, get_logger
from table_reconciler.patcher import PatchApplier
from table_reconciler.readers import read_source
from table_reconciler.schema import (
    Difference,
    DiffKey,
    DiffKind,
    DiffStats,
    DiffStatus,
    Table,
)
from table_reconciler.serializer import TableSerializer
from table_reconciler.store import ReconciliationStore
from table_reconciler.table_parser import TableParser

logger = get_logger("pipeline")


class ReconciliationSession:
    """Compare two tables, collect decisions, and build the corrected table.

    Parameters
    ----------
    config:
        All tuneable knobs.  Defaults match comma-separated text.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self._config = config or PipelineConfig()

        configure_logging(
            level=self._config.log_level,
            log_file=self._config.log_file,
        )

        self._parser = TableParser(self._config.parser)
        self._differ = Differ(self._config.diff, self._config.parser)
        self._store = ReconciliationStore()
        self._applier = PatchApplier(self._config.parser)
        self._serializer = TableSerializer(self._config.parser, self._config.output)

        self._original: Optional[Table] = None
        self._updated: Optional[Table] = None
        self._original_name: Optional[str] = None

    # ------------------------------------------------------------------ #
    # Comparison entry points
    # ------------------------------------------------------------------ #

    def compare(self, original_text: str, updated_text: str) -> List[Difference]:
        """Parse both texts, diff them, and replace the working set."""
        self._original = self._parser.parse(original_text)
        self._updated = self._parser.parse(updated_text)

        differences = self._differ.diff(self._original, self._updated)
        self._store.load(differences)
        return self._store.differences

    def compare_files(
        self,
        original_path: Union[str, Path],
        updated_path: Union[str, Path],
        original_name: Optional[str] = None,
    ) -> List[Difference]:
        """Read both files, then ``compare``.

        Both reads complete before parsing starts.  ``original_name``
        overrides the filename used for the corrected download, e.g. when
        the upload was saved under a temporary name.
        """
        original_text = read_source(original_path, self._config.parser)
        updated_text = read_source(updated_path, self._config.parser)
        if original_name is None:
            original_name = Path(original_path).name
        self._original_name = original_name

        logger.info(
            "Comparing '%s' against '%s'",
            Path(original_path).name,
            Path(updated_path).name,
        )
        return self.compare(original_text, updated_text)

    # ------------------------------------------------------------------ #
    # Decisions and views (delegated to the store)
    # ------------------------------------------------------------------ #

    def set_status(self, row: int, column_index: int, status: DiffStatus) -> bool:
        return self._store.set_status(row, column_index, status)

    def set_status_many(self, keys: Iterable[DiffKey], status: DiffStatus) -> int:
        return self._store.set_status_many(keys, status)

    def filter(
        self,
        kind: Optional[DiffKind] = None,
        status: Optional[DiffStatus] = None,
        search: str = "",
    ) -> List[Difference]:
        return self._store.filter(kind=kind, status=status, search=search)

    def stats(self) -> DiffStats:
        return self._store.stats()

    @property
    def differences(self) -> List[Difference]:
        return self._store.differences

    @property
    def can_apply(self) -> bool:
        return self._store.can_apply

    @property
    def original(self) -> Optional[Table]:
        return self._original

    @property
    def updated(self) -> Optional[Table]:
        return self._updated

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #

    def apply(self) -> Table:
        """Corrected table: the original with every accepted difference applied."""
        if self._original is None:
            logger.warning("apply() called before any comparison; returning empty table")
            return Table()
        return self._applier.apply(self._original, self._store.differences)

    def export(self) -> str:
        """Corrected table as delimited text; ``""`` before any comparison."""
        if self._original is None:
            return ""
        return self._serializer.serialize(self.apply())

    def corrected_filename(self) -> str:
        return self._serializer.corrected_filename(self._original_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self._original.headers) if self._original else [],
            "differences": [d.to_dict() for d in self._store.differences],
            "stats": self.stats().to_dict(),
        }
