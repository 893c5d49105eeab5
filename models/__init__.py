"""Pydantic models and key builders for the catalog tables."""

from models.keys import CATALOG_KEY_SIZE, TRACK_KEY_SIZE, KeyFormat, catalog_key, track_key
from models.records import CATALOG_LEN, CatalogRecord, RecordKind, TrackRecord

__all__ = [
    "CatalogRecord",
    "TrackRecord",
    "RecordKind",
    "KeyFormat",
    "catalog_key",
    "track_key",
    "CATALOG_LEN",
    "CATALOG_KEY_SIZE",
    "TRACK_KEY_SIZE",
]
