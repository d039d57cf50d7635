"""
Table Parser.

Turns raw delimited text into a ``Table``.

Rules
-----
1. Split on ``\n``; drop lines that are blank after trimming.
2. The first surviving line holds the headers.
3. Every header and cell is whitespace-trimmed, then every literal quote
   character is removed.

There is no quoted-field or escaped-delimiter support: ``"a,b"`` yields
two cells.  Column counts are not validated.  Parsing never raises; empty
input produces an empty table.
"""

from __future__ import annotations

from typing import List, Optional

from table_reconciler.config import ParserConfig
from table_reconciler.logging_setup import get_logger
from table_reconciler.schema import Table

logger = get_logger("table_parser")


class TableParser:
    """Delimited-text → ``Table`` parser.

    Parameters
    ----------
    config:
        Delimiter and quote character.  Defaults to comma / double quote.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self._config = config or ParserConfig()

    def parse(self, text: str) -> Table:
        """Parse ``text`` into headers plus rows.

        Only ``\\n`` ends a line; a trailing ``\\r`` is removed by trimming, and
        form feeds or Unicode line separators stay inside their cell.
        """
        lines = [line for line in text.split("\n") if line.strip()]
        if not lines:
            logger.debug("parse: no non-blank lines; returning empty table")
            return Table()

        headers = self.split_line(lines[0])
        rows = [self.split_line(line) for line in lines[1:]]

        logger.debug(
            "parse: %d header(s), %d row(s)", len(headers), len(rows)
        )
        return Table(headers=headers, rows=rows)

    def split_line(self, line: str) -> List[str]:
        """Split one line into trimmed, quote-stripped cells."""
        quote = self._config.quote_char
        return [
            cell.strip().replace(quote, "") if quote else cell.strip()
            for cell in line.split(self._config.delimiter)
        ]
