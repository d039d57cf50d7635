"""
Centralised logging for Table Reconciler.

Modules obtain their logger via ``get_logger("<module>")``.  Each
``ReconciliationSession`` calls ``configure_logging`` on construction; the
handlers are installed once per process, later calls only adjust the level
so that a quieter session (e.g. the web app) can turn the audit trail down.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional


ROOT_NAMESPACE = "table_reconciler"

LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handlers_installed = False


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the ``table_reconciler`` logger tree and return its root.

    Parameters
    ----------
    level:
        Minimum severity to emit.  Applied on every call.
    log_file:
        If provided on the first call, a ``FileHandler`` is added
        alongside the console handler.
    """
    global _handlers_installed  # noqa: PLW0603

    root = logging.getLogger(ROOT_NAMESPACE)
    root.setLevel(level)

    if not _handlers_installed:
        root.propagate = False
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)

        if log_file:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            root.addHandler(fh)

        _handlers_installed = True

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``table_reconciler`` namespace."""
    return logging.getLogger(f"{ROOT_NAMESPACE}.{name}")
