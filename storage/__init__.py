"""Storage layer: dbm-backed tables and scan cursors."""

from storage.cursor import ScanCursor
from storage.table import Table, backing_files

__all__ = [
    "Table",
    "ScanCursor",
    "backing_files",
]
