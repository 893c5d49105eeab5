"""Key builders for the catalog and track tables.

FIXED keys reproduce the legacy ndbm on-disk layout bit for bit: the key is
the whole NUL-padded buffer, trailing zeros included.

    catalog key: [catalog][\\0 ...]                  (CATALOG_LEN + 1 bytes)
    track key:   ["<catalog> <track_no>"][\\0 ...]   (CATALOG_LEN + 10 bytes)

COMPACT keys carry the same text without padding.
"""

from enum import StrEnum

from exceptions import InvalidArgument
from models.records import CATALOG_LEN, MAX_TRACK_NO

CATALOG_KEY_SIZE = CATALOG_LEN + 1
TRACK_KEY_SIZE = CATALOG_LEN + 10


class KeyFormat(StrEnum):
    FIXED = "fixed"
    COMPACT = "compact"


def validate_catalog(catalog: str | None) -> bytes:
    """Return the encoded catalog identifier, rejecting None and over-length values."""
    if catalog is None:
        raise InvalidArgument("catalog must not be None")
    if "\x00" in catalog:
        raise InvalidArgument("catalog must not contain NUL characters")
    raw = catalog.encode("utf-8")
    if len(raw) >= CATALOG_LEN:
        raise InvalidArgument(f"catalog must be shorter than {CATALOG_LEN} bytes, got {len(raw)}")
    return raw


def catalog_key(catalog: str | None, key_format: KeyFormat = KeyFormat.FIXED) -> bytes:
    raw = validate_catalog(catalog)
    if key_format is KeyFormat.COMPACT:
        return raw
    return raw.ljust(CATALOG_KEY_SIZE, b"\x00")


def track_key(catalog: str | None, track_no: int, key_format: KeyFormat = KeyFormat.FIXED) -> bytes:
    raw = validate_catalog(catalog)
    if not isinstance(track_no, int) or track_no < 0 or track_no > MAX_TRACK_NO:
        raise InvalidArgument(f"track_no must be between 0 and {MAX_TRACK_NO}, got {track_no!r}")

    # Same decimal text for bools as TrackRecord stores (True -> 1)
    text = raw + b" " + str(int(track_no)).encode("ascii")
    if key_format is KeyFormat.COMPACT:
        return text
    # Leave room for at least one terminating NUL
    if len(text) >= TRACK_KEY_SIZE:
        raise InvalidArgument(f"Track key too long: {len(text)} bytes")
    return text.ljust(TRACK_KEY_SIZE, b"\x00")
