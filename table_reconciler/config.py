"""
Configuration module for Table Reconciler.

Delimiters, labels, naming rules and logging knobs live here.
Nothing is hard-coded in the comparison modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ParserConfig:
    """Controls how raw delimited text is split into cells."""

    # Field delimiter.  Also used to join / split whole-row values and
    # when serialising the corrected table.
    delimiter: str = ","

    # Literal character removed from every header and cell.  There is no
    # quoted-field support: a delimiter inside quotes still splits.
    quote_char: str = '"'


@dataclass(frozen=True)
class DiffConfig:
    """Controls how differences are labelled."""

    # Column label carried by whole-row differences (column_index == -1)
    whole_row_label: str = "Entire Row"

    # Name synthesised when neither table has a header for a column.
    # ``{number}`` is the 1-based column position.
    column_name_template: str = "Column {number}"


@dataclass(frozen=True)
class OutputConfig:
    """Controls the naming of the corrected download artifact."""

    corrected_prefix: str = "corrected_"

    # Used when the original upload has no usable filename
    fallback_filename: str = "file.csv"


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration aggregating all sub-configs."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Logging level for the reconciliation audit trail
    log_level: int = logging.INFO

    # Optional log file written alongside the console handler
    log_file: Optional[str] = None
