"""
Table Serializer.

Writes a ``Table`` back out as delimited text for the download
collaborator, and names the corrected artifact.

Cells are joined as-is.  Nothing is re-quoted, so a cell that contains the
delimiter will not survive a parse → serialize → parse round trip, the same
limitation the parser has.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Optional

from table_reconciler.config import OutputConfig, ParserConfig
from table_reconciler.schema import Table


class TableSerializer:
    """``Table`` → delimited text."""

    def __init__(
        self,
        parser_config: Optional[ParserConfig] = None,
        output_config: Optional[OutputConfig] = None,
    ) -> None:
        self._delimiter = (parser_config or ParserConfig()).delimiter
        self._output = output_config or OutputConfig()

    def serialize(self, table: Table) -> str:
        """Headers on line one, then one line per row, newline-separated."""
        lines = [self._delimiter.join(table.headers)]
        lines.extend(self._delimiter.join(row) for row in table.rows)
        return "\n".join(lines)

    def corrected_filename(self, original_name: Optional[str]) -> str:
        """Download name for the corrected table, e.g. ``corrected_orders.csv``.

        Workbook uploads are written back as text, so ``.xlsx`` becomes ``.csv``.
        """
        name = PurePath(original_name).name if original_name else ""
        if not name:
            name = self._output.fallback_filename
        elif PurePath(name).suffix.lower() == ".xlsx":
            name = PurePath(name).with_suffix(".csv").name
        return f"{self._output.corrected_prefix}{name}"
