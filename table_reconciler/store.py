"""
Reconciliation Store.

Holds the differ's output for one comparison session together with the
reviewer's decision on each entry.  Entries are addressed by their
``(row, column_index)`` identity pair, never by list position, because
display collaborators filter and reorder the list before a reviewer acts
on it.

The store never creates or destroys differences; ``load`` replaces the
whole working set and ``set_status`` only changes decisions.  Unknown
coordinates are ignored rather than raised, since a filtered view may hold
stale coordinates after a new comparison run.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from table_reconciler.logging_setup import get_logger
from table_reconciler.schema import (
    Difference,
    DiffKey,
    DiffKind,
    DiffStats,
    DiffStatus,
)

logger = get_logger("store")


class ReconciliationStore:
    """Per-session working set of differences and their decisions."""

    def __init__(self) -> None:
        self._differences: List[Difference] = []
        self._index: Dict[DiffKey, Difference] = {}

    def load(self, differences: Iterable[Difference]) -> None:
        """Replace the working set with a fresh comparison run."""
        self._differences = list(differences)
        self._index = {d.key: d for d in self._differences}
        logger.debug("Loaded %d difference(s)", len(self._differences))

    @property
    def differences(self) -> List[Difference]:
        """The full set, in differ order."""
        return list(self._differences)

    def __len__(self) -> int:
        return len(self._differences)

    def get(self, row: int, column_index: int) -> Optional[Difference]:
        return self._index.get((row, column_index))

    # ------------------------------------------------------------------ #
    # Decisions
    # ------------------------------------------------------------------ #

    def set_status(self, row: int, column_index: int, status: DiffStatus) -> bool:
        """Record a decision.  Returns False (and changes nothing) for an unknown key."""
        diff = self._index.get((row, column_index))
        if diff is None:
            logger.debug(
                "set_status: no difference at row=%d column_index=%d; ignored",
                row,
                column_index,
            )
            return False
        diff.status = status
        return True

    def set_status_many(self, keys: Iterable[DiffKey], status: DiffStatus) -> int:
        """Record the same decision for several keys; returns how many matched."""
        return sum(1 for row, col in keys if self.set_status(row, col, status))

    def accepted(self) -> List[Difference]:
        return [d for d in self._differences if d.status is DiffStatus.ACCEPTED]

    @property
    def can_apply(self) -> bool:
        return any(d.status is DiffStatus.ACCEPTED for d in self._differences)

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def filter(
        self,
        kind: Optional[DiffKind] = None,
        status: Optional[DiffStatus] = None,
        search: str = "",
    ) -> List[Difference]:
        """Return differences matching every given predicate.

        ``kind`` / ``status`` of ``None`` match anything.  A ``search`` that is
        not blank must appear, case-insensitively, in the column name, the
        original value or the new value.
        """
        query = search.lower() if search.strip() else ""
        return [
            d for d in self._differences
            if (kind is None or d.kind is kind)
            and (status is None or d.status is status)
            and (not query or _matches(d, query))
        ]

    def stats(self) -> DiffStats:
        """Counts over the full set; kind and status counts each sum to ``total``."""
        stats = DiffStats(total=len(self._differences))
        for d in self._differences:
            if d.kind is DiffKind.ADDED:
                stats.added += 1
            elif d.kind is DiffKind.REMOVED:
                stats.removed += 1
            else:
                stats.modified += 1

            if d.status is DiffStatus.ACCEPTED:
                stats.accepted += 1
            elif d.status is DiffStatus.REJECTED:
                stats.rejected += 1
            else:
                stats.pending += 1
        return stats


def _matches(diff: Difference, query: str) -> bool:
    return (
        query in diff.column.lower()
        or query in diff.original_value.lower()
        or query in diff.new_value.lower()
    )
