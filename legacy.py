"""Empty-sentinel access to the catalog store.

Every failure (store not open, invalid argument, missing key, engine
error) collapses into an empty record or False, matching the classic
cd_access C functions. Callers tell "found" apart from "not found"
only by checking ``record.is_empty``.

The module-level functions share one process-wide store configured from
CDCAT_* environment variables.
"""

import logging

from config import StoreConfig
from db import CatalogStore
from exceptions import CatalogStoreError
from models.keys import validate_catalog
from models.records import CatalogRecord, TrackRecord
from storage.cursor import ScanCursor

logger = logging.getLogger(__name__)


class LegacyCatalogAccess:
    """Wraps a CatalogStore with boolean and empty-record results.

    Search keeps a single shared cursor. The first search call on an
    instance always starts a fresh scan, whatever ``first_call`` says.
    """

    def __init__(self, store: CatalogStore):
        self.store = store
        self._cursor: ScanCursor | None = None
        self._first_search = True

    def database_initialize(self, new_database: bool = False) -> bool:
        self._cursor = None
        try:
            self.store.open(reset=new_database)
        except CatalogStoreError:
            return False
        return True

    def database_close(self) -> None:
        self._cursor = None
        try:
            self.store.close()
        except CatalogStoreError as e:
            logger.warning(f"Error while closing catalog store: {e}")

    def get_catalog_entry(self, catalog: str) -> CatalogRecord:
        try:
            return self.store.get_catalog_entry(catalog)
        except CatalogStoreError as e:
            logger.debug(f"get_catalog_entry({catalog!r}) failed: {e!r}")
            return CatalogRecord.empty()

    def get_track_entry(self, catalog: str, track_no: int) -> TrackRecord:
        try:
            return self.store.get_track_entry(catalog, track_no)
        except CatalogStoreError as e:
            logger.debug(f"get_track_entry({catalog!r}, {track_no}) failed: {e!r}")
            return TrackRecord.empty()

    def add_catalog_entry(self, record: CatalogRecord) -> bool:
        try:
            self.store.add_catalog_entry(record)
        except CatalogStoreError as e:
            logger.debug(f"add_catalog_entry failed: {e!r}")
            return False
        return True

    def add_track_entry(self, record: TrackRecord) -> bool:
        try:
            self.store.add_track_entry(record)
        except CatalogStoreError as e:
            logger.debug(f"add_track_entry failed: {e!r}")
            return False
        return True

    def delete_catalog_entry(self, catalog: str) -> bool:
        try:
            self.store.delete_catalog_entry(catalog)
        except CatalogStoreError as e:
            logger.debug(f"delete_catalog_entry({catalog!r}) failed: {e!r}")
            return False
        return True

    def delete_track_entry(self, catalog: str, track_no: int) -> bool:
        try:
            self.store.delete_track_entry(catalog, track_no)
        except CatalogStoreError as e:
            logger.debug(f"delete_track_entry({catalog!r}, {track_no}) failed: {e!r}")
            return False
        return True

    def search_catalog_entry(self, substring: str, first_call: bool) -> tuple[CatalogRecord, bool]:
        """Return the next catalog record whose catalog contains substring.

        Pass first_call=True to start from the beginning of the table, False
        to resume after the previous match. The flag is handed back as the
        second element; it is False after any call that reached the scan.
        An empty record means no further match.
        """
        try:
            if not self.store.is_open:
                return CatalogRecord.empty(), first_call
            validate_catalog(substring)

            if self._first_search:
                if not first_call:
                    logger.debug("First search call: forcing a fresh scan")
                self._first_search = False
                first_call = True

            if first_call:
                self._cursor = self.store.scan_catalog(substring)
                first_call = False
            elif self._cursor is None:
                return CatalogRecord.empty(), first_call
            else:
                # Resuming uses the new substring against the existing position
                self._cursor.substring = substring

            record = self._cursor.next_match()
        except CatalogStoreError as e:
            logger.debug(f"search_catalog_entry({substring!r}) failed: {e!r}")
            return CatalogRecord.empty(), first_call

        if record is None:
            return CatalogRecord.empty(), first_call
        return record, first_call


_default: LegacyCatalogAccess | None = None


def default_access() -> LegacyCatalogAccess:
    """The process-wide adapter used by the module-level functions."""
    global _default
    if _default is None:
        _default = LegacyCatalogAccess(CatalogStore(StoreConfig.from_env()))
    return _default


def database_initialize(new_database: bool = False) -> bool:
    return default_access().database_initialize(new_database)


def database_close() -> None:
    default_access().database_close()


def get_catalog_entry(catalog: str) -> CatalogRecord:
    return default_access().get_catalog_entry(catalog)


def get_track_entry(catalog: str, track_no: int) -> TrackRecord:
    return default_access().get_track_entry(catalog, track_no)


def add_catalog_entry(record: CatalogRecord) -> bool:
    return default_access().add_catalog_entry(record)


def add_track_entry(record: TrackRecord) -> bool:
    return default_access().add_track_entry(record)


def delete_catalog_entry(catalog: str) -> bool:
    return default_access().delete_catalog_entry(catalog)


def delete_track_entry(catalog: str, track_no: int) -> bool:
    return default_access().delete_track_entry(catalog, track_no)


def search_catalog_entry(substring: str, first_call: bool) -> tuple[CatalogRecord, bool]:
    return default_access().search_catalog_entry(substring, first_call)
