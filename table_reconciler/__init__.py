"""
Table Reconciler: positional comparison and correction of delimited tables.

Parses two delimited-text tables, lists every cell- and row-level
difference between them by position, records an accept / reject decision
per difference, and builds a corrected copy of the original table from the
accepted ones.

Row identity is position only.  There is no key-based matching.
"""

__version__ = "1.0.0"

from table_reconciler.pipeline import ReconciliationSession  # noqa: F401
