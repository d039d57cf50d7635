"""
Data models for the reconciliation engine.

Defines the parsed ``Table``, the ``Difference`` records produced by the
differ, the closed kind / status enumerations, and the aggregate
``DiffStats`` handed to display collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DiffKind(str, Enum):
    """What happened to a cell or row between the original and the update."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class DiffStatus(str, Enum):
    """Reviewer decision recorded against a difference."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def parse_kind(value: Optional[str]) -> Optional[DiffKind]:
    """Map a filter value to a ``DiffKind``; ``None``, ``""`` or ``"all"`` mean any.

    Raises ``ValueError`` for anything else.
    """
    if value is None or value.strip().lower() in ("", "all"):
        return None
    return DiffKind(value.strip().lower())


def parse_status(value: Optional[str]) -> Optional[DiffStatus]:
    """Map a filter value to a ``DiffStatus``; ``None``, ``""`` or ``"all"`` mean any."""
    if value is None or value.strip().lower() in ("", "all"):
        return None
    return DiffStatus(value.strip().lower())


# Column index carried by whole-row differences
WHOLE_ROW = -1

DiffKey = Tuple[int, int]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

@dataclass
class Table:
    """Ordered headers plus ordered rows of string cells.

    Row length is not tied to the header count; rows may be shorter or
    longer than ``headers``.
    """

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers and not self.rows

    def copy(self) -> Table:
        """Copy with independent header and row lists."""
        return Table(
            headers=list(self.headers),
            rows=[list(r) for r in self.rows],
        )


# ---------------------------------------------------------------------------
# Differences
# ---------------------------------------------------------------------------

@dataclass
class Difference:
    """One discrepancy between two tables, scoped to a cell or a whole row.

    ``(row, column_index)`` identifies the difference; list position does
    not, since display collaborators filter and reorder the list.
    """

    row: int  # 1-based position in the union of both row sequences
    column: str
    column_index: int  # 0-based, or WHOLE_ROW
    original_value: str
    new_value: str
    kind: DiffKind
    status: DiffStatus = DiffStatus.PENDING

    @property
    def key(self) -> DiffKey:
        return (self.row, self.column_index)

    @property
    def is_whole_row(self) -> bool:
        return self.column_index == WHOLE_ROW

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "column": self.column,
            "column_index": self.column_index,
            "original_value": self.original_value,
            "new_value": self.new_value,
            "kind": self.kind.value,
            "status": self.status.value,
        }


@dataclass
class DiffStats:
    """Aggregate counts over the full (unfiltered) difference set."""

    total: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    accepted: int = 0
    rejected: int = 0
    pending: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "added": self.added,
            "removed": self.removed,
            "modified": self.modified,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "pending": self.pending,
        }
