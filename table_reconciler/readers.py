"""
Source readers.

The file-read side of the engine: turns an uploaded ``.csv`` / ``.txt`` /
``.xlsx`` file into the UTF-8 delimited text the parser consumes.  This is
the only place where I/O errors are raised; the comparison core itself
never touches the filesystem.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

import openpyxl

from table_reconciler.config import ParserConfig
from table_reconciler.logging_setup import get_logger

logger = get_logger("readers")

TEXT_EXTENSIONS = {"csv", "txt"}
EXCEL_EXTENSIONS = {"xlsx"}
ALLOWED_EXTENSIONS = TEXT_EXTENSIONS | EXCEL_EXTENSIONS


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def read_source(
    source: Union[str, Path],
    config: Optional[ParserConfig] = None,
) -> str:
    """Read ``source`` and return its contents as delimited text.

    Raises
    ------
    ValueError
        The extension is not one of ``ALLOWED_EXTENSIONS``.
    OSError
        The file cannot be opened or read.
    """
    path = Path(source)
    ext = path.suffix.lower().lstrip(".")

    if ext in TEXT_EXTENSIONS:
        # utf-8-sig drops a leading BOM written by spreadsheet exports
        text = path.read_text(encoding="utf-8-sig")
        logger.debug("Read %d character(s) from %s", len(text), path.name)
        return text

    if ext in EXCEL_EXTENSIONS:
        return read_excel(path, config)

    raise ValueError(f"Unsupported file type: {path.suffix or path.name}")


def read_excel(path: Union[str, Path], config: Optional[ParserConfig] = None) -> str:
    """Flatten the active worksheet of an ``.xlsx`` file into delimited text.

    Each worksheet row becomes one line; empty cells become empty strings.
    Cell values containing the delimiter are written unchanged and will
    split on parse.
    """
    delimiter = (config or ParserConfig()).delimiter
    wb = openpyxl.load_workbook(path, data_only=True)
    try:
        ws = wb.active
        lines = [
            delimiter.join(_cell_text(v) for v in row)
            for row in ws.iter_rows(values_only=True)
        ]
        logger.info(
            "Read sheet '%s' from %s: %d line(s)",
            ws.title,
            Path(path).name,
            len(lines),
        )
    finally:
        wb.close()
    return "\n".join(lines)


def _cell_text(value: Any) -> str:
    """Render a worksheet value the way it would appear in a CSV export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
