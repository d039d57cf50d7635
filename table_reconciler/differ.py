"""
Positional Differ.

Compares an original table ``A`` with an updated table ``B`` row by row and
column by column.  There is no key-based matching and no line-level LCS:
row ``i`` of ``A`` is only ever compared with row ``i`` of ``B``.

Output ordering
---------------
Differences are emitted by ascending row position.  A row present in only
one table yields a single whole-row difference (``column_index == -1``)
and no cell differences.  Rows present in both yield cell differences in
ascending column order.

Classification
--------------
For differing cell values ``v1`` (original) and ``v2`` (updated):

* ``v1`` empty, ``v2`` not → ``ADDED``
* ``v1`` not empty, ``v2`` empty → ``REMOVED``
* otherwise → ``MODIFIED``

Equal values are skipped before classification, so empty → empty never
reaches it.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from table_reconciler.config import DiffConfig, ParserConfig
from table_reconciler.logging_setup import get_logger
from table_reconciler.schema import (
    WHOLE_ROW,
    Difference,
    DiffKind,
    Table,
)

logger = get_logger("differ")


def classify(original: str, new: str) -> DiffKind:
    """Classify a cell change.  Callers must filter out ``original == new``."""
    if not original and new:
        return DiffKind.ADDED
    if original and not new:
        return DiffKind.REMOVED
    return DiffKind.MODIFIED


def _cell(row: Sequence[str], index: int) -> str:
    return row[index] if index < len(row) else ""


class Differ:
    """Produce the ordered difference list for two parsed tables.

    Parameters
    ----------
    config:
        Labels for whole-row differences and synthesised column names.
    parser_config:
        Supplies the delimiter used to join whole-row values.
    """

    def __init__(
        self,
        config: Optional[DiffConfig] = None,
        parser_config: Optional[ParserConfig] = None,
    ) -> None:
        self._config = config or DiffConfig()
        self._delimiter = (parser_config or ParserConfig()).delimiter

    def diff(self, original: Table, updated: Table) -> List[Difference]:
        """Return every difference between ``original`` and ``updated``."""
        differences: List[Difference] = []
        max_rows = max(len(original.rows), len(updated.rows))

        for index in range(max_rows):
            position = index + 1
            row_a = original.rows[index] if index < len(original.rows) else None
            row_b = updated.rows[index] if index < len(updated.rows) else None

            if row_a is None:
                differences.append(self._whole_row(
                    position, "", self._delimiter.join(row_b), DiffKind.ADDED,
                ))
                continue

            if row_b is None:
                differences.append(self._whole_row(
                    position, self._delimiter.join(row_a), "", DiffKind.REMOVED,
                ))
                continue

            differences.extend(
                self._diff_cells(position, row_a, row_b, original, updated)
            )

        logger.info(
            "Diff complete: rows=%d (original=%d, updated=%d), differences=%d",
            max_rows,
            len(original.rows),
            len(updated.rows),
            len(differences),
        )
        return differences

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _whole_row(
        self, position: int, original_value: str, new_value: str, kind: DiffKind
    ) -> Difference:
        logger.debug("Row %d: whole-row %s", position, kind.value)
        return Difference(
            row=position,
            column=self._config.whole_row_label,
            column_index=WHOLE_ROW,
            original_value=original_value,
            new_value=new_value,
            kind=kind,
        )

    def _diff_cells(
        self,
        position: int,
        row_a: Sequence[str],
        row_b: Sequence[str],
        original: Table,
        updated: Table,
    ) -> List[Difference]:
        found: List[Difference] = []
        for col in range(max(len(row_a), len(row_b))):
            v1 = _cell(row_a, col)
            v2 = _cell(row_b, col)
            if v1 == v2:
                continue
            found.append(Difference(
                row=position,
                column=self.column_name(col, original, updated),
                column_index=col,
                original_value=v1,
                new_value=v2,
                kind=classify(v1, v2),
            ))
        return found

    def column_name(self, index: int, original: Table, updated: Table) -> str:
        """Resolve a column name: original header, then updated header, then synthesised.

        Empty header strings count as missing.
        """
        name = _cell(original.headers, index) or _cell(updated.headers, index)
        if name:
            return name
        return self._config.column_name_template.format(number=index + 1)
