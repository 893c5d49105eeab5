import logging
from typing import Self

from config import StoreConfig
from exceptions import EngineFailure, InvalidArgument, KeyNotFound, StoreNotOpen
from models.keys import catalog_key, track_key, validate_catalog
from models.records import CatalogRecord, TrackRecord
from storage.cursor import ScanCursor
from storage.table import Table

logger = logging.getLogger(__name__)


def _decode(record_type: type[CatalogRecord] | type[TrackRecord], value: bytes):
    try:
        return record_type.from_bytes(value)
    except ValueError as e:
        raise EngineFailure(f"Corrupt {record_type.__name__} value: {e}") from e


class CatalogStore:
    """CD catalog kept in two dbm tables: catalogs, and tracks keyed by (catalog, track_no).

    Both tables are open or both are closed; no other state is observable.
    Record operations raise StoreNotOpen, InvalidArgument, KeyNotFound or
    EngineFailure rather than returning sentinels.
    """

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig()
        self._catalogs: Table | None = None
        self._tracks: Table | None = None

    @property
    def is_open(self) -> bool:
        return self._catalogs is not None and self._tracks is not None

    def open(self, reset: bool = False) -> None:
        """
        Open both tables, creating them if absent. An already open store is
        closed first. With reset=True all existing data is irrecoverably deleted.
        On failure neither table is left open and EngineFailure is raised.
        """
        self.close()

        cfg = self.config
        catalogs = tracks = None
        try:
            catalogs = Table(cfg.catalog_path, backend=cfg.backend, mode=cfg.file_mode, reset=reset)
            tracks = Table(cfg.track_path, backend=cfg.backend, mode=cfg.file_mode, reset=reset)
        except EngineFailure:
            logger.error("Unable to create database", exc_info=True)
            for table in (catalogs, tracks):
                if table is not None:
                    table.close()
            raise

        self._catalogs, self._tracks = catalogs, tracks
        logger.info(f"Opened catalog store in {cfg.data_dir} (reset={reset})")

    def close(self) -> None:
        """Release both tables. Safe to call when already closed or never opened."""
        if self._catalogs is None and self._tracks is None:
            return
        catalogs, tracks = self._catalogs, self._tracks
        self._catalogs = self._tracks = None
        try:
            if catalogs is not None:
                catalogs.close()
        finally:
            if tracks is not None:
                tracks.close()
        logger.info(f"Closed catalog store in {self.config.data_dir}")

    def _require_open(self) -> tuple[Table, Table]:
        if not self.is_open:
            raise StoreNotOpen("Catalog store is not open")
        return self._catalogs, self._tracks

    def get_catalog_entry(self, catalog: str) -> CatalogRecord:
        """Retrieve the catalog record for catalog. If key doesn't exist, a KeyNotFound exception will be raised"""
        catalogs, _ = self._require_open()
        value = catalogs.fetch(catalog_key(catalog, self.config.key_format))
        if value is None:
            raise KeyNotFound(catalog)
        return _decode(CatalogRecord, value)

    def get_track_entry(self, catalog: str, track_no: int) -> TrackRecord:
        """Retrieve a single track. If key doesn't exist, a KeyNotFound exception will be raised"""
        _, tracks = self._require_open()
        value = tracks.fetch(track_key(catalog, track_no, self.config.key_format))
        if value is None:
            raise KeyNotFound((catalog, track_no))
        return _decode(TrackRecord, value)

    def add_catalog_entry(self, record: CatalogRecord) -> None:
        """Store record under its catalog key, replacing any existing entry."""
        catalogs, _ = self._require_open()
        if record is None:
            raise InvalidArgument("record must not be None")
        key = catalog_key(record.catalog, self.config.key_format)
        catalogs.store(key, record.to_bytes())

    def add_track_entry(self, record: TrackRecord) -> None:
        """Store record under its (catalog, track_no) key, replacing any existing entry."""
        _, tracks = self._require_open()
        if record is None:
            raise InvalidArgument("record must not be None")
        key = track_key(record.catalog, record.track_no, self.config.key_format)
        tracks.store(key, record.to_bytes())

    def delete_catalog_entry(self, catalog: str) -> None:
        """Removes the catalog record. Tracks are left in place.
        If key does not exist, a KeyNotFound exception will be raised"""
        catalogs, _ = self._require_open()
        if not catalogs.delete(catalog_key(catalog, self.config.key_format)):
            raise KeyNotFound(catalog)

    def delete_track_entry(self, catalog: str, track_no: int) -> None:
        """Removes a single track. If key does not exist, a KeyNotFound exception will be raised"""
        _, tracks = self._require_open()
        if not tracks.delete(track_key(catalog, track_no, self.config.key_format)):
            raise KeyNotFound((catalog, track_no))

    def scan_catalog(self, substring: str) -> ScanCursor:
        """Begin a scan for catalog records whose catalog field contains substring.

        The returned cursor is owned by the caller and yields matches lazily.
        Records added mid-scan may or may not be seen.
        """
        catalogs, _ = self._require_open()
        validate_catalog(substring)
        return ScanCursor(catalogs, substring)

    def sync(self) -> None:
        for table in self._require_open():
            table.sync()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
