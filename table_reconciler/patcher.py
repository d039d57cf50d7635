"""
Patch Applier.

Builds a corrected table from a base table and the accepted differences.

Whole-row insertions and removals shift row positions, so accepted
differences are applied in a fixed order rather than the order a reviewer
accepted them in:

1. cell edits (added / removed / modified cells), by row position;
2. whole-row removals, in **descending** row position, so that a removal
   never shifts a row still waiting to be removed;
3. whole-row additions, in ascending row position, appended to the end.

A row that is both removed and edited keeps only the removal.  The base
table is never mutated and nothing here raises: coordinates outside the
working copy are skipped.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from table_reconciler.config import ParserConfig
from table_reconciler.logging_setup import get_logger
from table_reconciler.schema import (
    Difference,
    DiffKind,
    DiffStatus,
    Table,
)

logger = get_logger("patcher")


class PatchApplier:
    """Apply accepted differences to a base table.

    Parameters
    ----------
    parser_config:
        Supplies the delimiter used to split whole-row added values.
    """

    def __init__(self, parser_config: Optional[ParserConfig] = None) -> None:
        self._delimiter = (parser_config or ParserConfig()).delimiter

    def apply(self, base: Table, differences: Iterable[Difference]) -> Table:
        """Return a new table with every accepted difference applied."""
        accepted = [d for d in differences if d.status is DiffStatus.ACCEPTED]
        rows: List[List[str]] = [list(r) for r in base.rows]

        removals = sorted(
            (d for d in accepted if d.is_whole_row and d.kind is DiffKind.REMOVED),
            key=lambda d: d.row,
            reverse=True,
        )
        additions = sorted(
            (d for d in accepted if d.is_whole_row and d.kind is DiffKind.ADDED),
            key=lambda d: d.row,
        )
        removed_rows = {d.row for d in removals}
        cell_edits = sorted(
            (d for d in accepted if not d.is_whole_row),
            key=lambda d: d.key,
        )

        # --- Step 1: cell edits ---------------------------------------
        applied_cells = 0
        for diff in cell_edits:
            if diff.row in removed_rows:
                logger.info(
                    "Row %d is being removed; discarding cell edit on '%s'",
                    diff.row,
                    diff.column,
                )
                continue
            if self._write_cell(rows, diff):
                applied_cells += 1

        # --- Step 2: row removals, bottom-up --------------------------
        applied_removals = 0
        for diff in removals:
            if 1 <= diff.row <= len(rows):
                del rows[diff.row - 1]
                applied_removals += 1
            else:
                logger.debug("Row removal at %d out of range; skipped", diff.row)

        # --- Step 3: row additions, appended --------------------------
        for diff in additions:
            rows.append(diff.new_value.split(self._delimiter))

        logger.info(
            "Patch applied: cells=%d, rows_removed=%d, rows_added=%d",
            applied_cells,
            applied_removals,
            len(additions),
        )
        return Table(headers=list(base.headers), rows=rows)

    @staticmethod
    def _write_cell(rows: List[List[str]], diff: Difference) -> bool:
        if not 1 <= diff.row <= len(rows) or diff.column_index < 0:
            logger.debug(
                "Cell edit at row=%d column_index=%d out of range; skipped",
                diff.row,
                diff.column_index,
            )
            return False

        target = rows[diff.row - 1]
        if diff.column_index >= len(target):
            target.extend([""] * (diff.column_index + 1 - len(target)))
        target[diff.column_index] = diff.new_value
        return True
