"""Catalog and track record models.

Records are stored as fixed-layout values with an explicit kind/version
prefix so the on-disk bytes never depend on in-memory structure layout.

Struct format reference (https://docs.python.org/3/library/struct.html):
    <   = little-endian byte order
    B   = unsigned char (1 byte)
    I   = unsigned int (4 bytes)
    Ns  = N-byte string, NUL-padded
"""

import struct
from enum import IntEnum
from typing import ClassVar, Self

from pydantic import BaseModel, Field, field_validator

# Field bounds in bytes, excluding the terminating NUL
CATALOG_LEN = 30
TITLE_LEN = 70
CATEGORY_LEN = 30
ARTIST_LEN = 70
TRACK_TEXT_LEN = 70

RECORD_FORMAT_VERSION = 1

# CatalogRecord format: [kind:1][version:1][catalog:31][title:71][category:31][artist:71]
CATALOG_RECORD_FMT = f"<BB{CATALOG_LEN + 1}s{TITLE_LEN + 1}s{CATEGORY_LEN + 1}s{ARTIST_LEN + 1}s"
CATALOG_RECORD_SIZE = struct.calcsize(CATALOG_RECORD_FMT)  # 206

# TrackRecord format: [kind:1][version:1][catalog:31][track_no:4][track_text:71]
TRACK_RECORD_FMT = f"<BB{CATALOG_LEN + 1}sI{TRACK_TEXT_LEN + 1}s"
TRACK_RECORD_SIZE = struct.calcsize(TRACK_RECORD_FMT)  # 108

MAX_TRACK_NO = 2**31 - 1


class RecordKind(IntEnum):
    """Record type identifiers stored in the first byte of every value."""

    CATALOG = 1
    TRACK = 2


def _encode_field(value: str, width: int) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) >= width:
        raise ValueError(f"Field too long: {len(raw)} bytes does not fit in {width}")
    return raw


def _decode_field(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("utf-8")


def _check_header(data: bytes, size: int, kind: RecordKind) -> None:
    if len(data) < size:
        raise ValueError(f"Data too short: expected at least {size} bytes, got {len(data)}")
    if data[0] != kind:
        raise ValueError(f"Invalid record kind: expected {kind.value}, got {data[0]}")
    if data[1] != RECORD_FORMAT_VERSION:
        raise ValueError(f"Unsupported record version: {data[1]}")


def _check_text(v: str, limit: int, name: str) -> str:
    if "\x00" in v:
        raise ValueError(f"{name} must not contain NUL characters")
    if len(v.encode("utf-8")) > limit:
        raise ValueError(f"{name} exceeds {limit} bytes")
    return v


class CatalogRecord(BaseModel):
    """A single CD in the catalog.

    The ``catalog`` field is the key. Its bound is enforced by the key
    builders rather than here, so that over-length identifiers reach the
    store and are rejected there as an invalid argument.

    Layout (206 bytes):
        offset  size  field
        ------  ----  -----
        0       1     kind (RecordKind.CATALOG)
        1       1     version
        2       31    catalog
        33      71    title
        104     31    category
        135     71    artist
    """

    SIZE: ClassVar[int] = CATALOG_RECORD_SIZE

    catalog: str = ""
    title: str = ""
    category: str = ""
    artist: str = ""

    @field_validator("catalog")
    @classmethod
    def validate_catalog(cls, v: str) -> str:
        if "\x00" in v:
            raise ValueError("catalog must not contain NUL characters")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_text(v, TITLE_LEN, "title")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _check_text(v, CATEGORY_LEN, "category")

    @field_validator("artist")
    @classmethod
    def validate_artist(cls, v: str) -> str:
        return _check_text(v, ARTIST_LEN, "artist")

    @classmethod
    def empty(cls) -> Self:
        """The zero-valued record returned for a failed lookup."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.catalog == ""

    def to_bytes(self) -> bytes:
        """Serialize to bytes. See class docstring for layout."""
        return struct.pack(
            CATALOG_RECORD_FMT,
            RecordKind.CATALOG,
            RECORD_FORMAT_VERSION,
            _encode_field(self.catalog, CATALOG_LEN + 1),
            _encode_field(self.title, TITLE_LEN + 1),
            _encode_field(self.category, CATEGORY_LEN + 1),
            _encode_field(self.artist, ARTIST_LEN + 1),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Deserialize from bytes."""
        _check_header(data, CATALOG_RECORD_SIZE, RecordKind.CATALOG)
        _, _, catalog, title, category, artist = struct.unpack(CATALOG_RECORD_FMT, data[:CATALOG_RECORD_SIZE])
        return cls(
            catalog=_decode_field(catalog),
            title=_decode_field(title),
            category=_decode_field(category),
            artist=_decode_field(artist),
        )


class TrackRecord(BaseModel):
    """A single track belonging to a catalog entry.

    Layout (108 bytes):
        offset  size  field
        ------  ----  -----
        0       1     kind (RecordKind.TRACK)
        1       1     version
        2       31    catalog
        33      4     track_no
        37      71    track_text
    """

    SIZE: ClassVar[int] = TRACK_RECORD_SIZE

    catalog: str = ""
    track_no: int = Field(default=0, ge=0, le=MAX_TRACK_NO)
    track_text: str = ""

    @field_validator("catalog")
    @classmethod
    def validate_catalog(cls, v: str) -> str:
        if "\x00" in v:
            raise ValueError("catalog must not contain NUL characters")
        return v

    @field_validator("track_text")
    @classmethod
    def validate_track_text(cls, v: str) -> str:
        return _check_text(v, TRACK_TEXT_LEN, "track_text")

    @classmethod
    def empty(cls) -> Self:
        """The zero-valued record returned for a failed lookup."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.catalog == ""

    def to_bytes(self) -> bytes:
        """Serialize to bytes. See class docstring for layout."""
        return struct.pack(
            TRACK_RECORD_FMT,
            RecordKind.TRACK,
            RECORD_FORMAT_VERSION,
            _encode_field(self.catalog, CATALOG_LEN + 1),
            self.track_no,
            _encode_field(self.track_text, TRACK_TEXT_LEN + 1),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Deserialize from bytes."""
        _check_header(data, TRACK_RECORD_SIZE, RecordKind.TRACK)
        _, _, catalog, track_no, track_text = struct.unpack(TRACK_RECORD_FMT, data[:TRACK_RECORD_SIZE])
        return cls(catalog=_decode_field(catalog), track_no=track_no, track_text=_decode_field(track_text))
