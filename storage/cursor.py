"""Caller-owned substring scan over the catalog table.

A ScanCursor is a lazy, single-pass iterator. It walks the table keys in
engine order, fetches each record and yields the ones whose catalog field
contains the search text. Each cursor owns its position, so any number of
scans can be in flight against the same store.
"""

import logging
from collections.abc import Iterator
from typing import Self

from models.records import CatalogRecord
from storage.table import Table

logger = logging.getLogger(__name__)


class ScanCursor:
    """Iterator over catalog records whose ``catalog`` contains ``substring``.

    Undecodable values are logged and skipped, unlike CatalogStore.get_catalog_entry
    which raises EngineFailure for them.
    """

    def __init__(self, table: Table, substring: str):
        self.table = table
        self.substring = substring
        self._keys: Iterator[bytes] | None = table.iter_keys()
        self.matched = 0

    @property
    def exhausted(self) -> bool:
        return self._keys is None

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> CatalogRecord:
        if self._keys is None:
            raise StopIteration

        for key in self._keys:
            value = self.table.fetch(key)
            if value is None:
                # Removed since the key was listed
                continue
            try:
                record = CatalogRecord.from_bytes(value)
            except ValueError as e:
                logger.warning(f"Skipping undecodable catalog record in {self.table.path.name}: {e}")
                continue
            if self.substring in record.catalog:
                self.matched += 1
                logger.debug(f"Scan for {self.substring!r} matched {record.catalog!r}")
                return record

        self._keys = None
        logger.debug(f"Scan for {self.substring!r} exhausted after {self.matched} matches")
        raise StopIteration

    def next_match(self) -> CatalogRecord | None:
        """Advance to the next match, or return None once exhausted."""
        return next(self, None)
