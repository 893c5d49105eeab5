"""Unit tests for record models and key builders."""

import struct

import pytest
from pydantic import ValidationError

from exceptions import InvalidArgument
from models import (
    CATALOG_KEY_SIZE,
    TRACK_KEY_SIZE,
    CatalogRecord,
    KeyFormat,
    RecordKind,
    TrackRecord,
    catalog_key,
    track_key,
)
from models.records import CATALOG_RECORD_SIZE, RECORD_FORMAT_VERSION, TRACK_RECORD_SIZE


class TestCatalogRecord:
    """Tests for CatalogRecord model."""

    def test_round_trip(self):
        record = CatalogRecord(catalog="CD123", title="Kind of Blue", category="Jazz", artist="Miles Davis")
        data = record.to_bytes()
        restored = CatalogRecord.from_bytes(data)

        assert restored == record

    def test_fixed_size(self):
        assert len(CatalogRecord(catalog="A").to_bytes()) == CATALOG_RECORD_SIZE == 206
        assert len(CatalogRecord(catalog="A", title="t" * 70).to_bytes()) == CATALOG_RECORD_SIZE

    def test_layout_prefix_and_padding(self):
        data = CatalogRecord(catalog="CD1", title="T").to_bytes()

        assert data[0] == RecordKind.CATALOG
        assert data[1] == RECORD_FORMAT_VERSION
        assert data[2:33] == b"CD1".ljust(31, b"\x00")
        assert data[33:104] == b"T".ljust(71, b"\x00")

    def test_round_trip_unicode(self):
        record = CatalogRecord(catalog="CDé1", title="世界", artist="Björk")
        assert CatalogRecord.from_bytes(record.to_bytes()) == record

    def test_empty_record(self):
        empty = CatalogRecord.empty()
        assert empty.is_empty
        assert empty.title == ""
        assert not CatalogRecord(catalog="X").is_empty

    def test_title_too_long(self):
        with pytest.raises(ValidationError, match="title exceeds 70 bytes"):
            CatalogRecord(catalog="CD1", title="t" * 71)

    def test_multibyte_counts_bytes(self):
        # 24 two-byte characters = 48 bytes > 30
        with pytest.raises(ValidationError, match="category exceeds"):
            CatalogRecord(catalog="CD1", category="é" * 24)

    def test_nul_rejected(self):
        with pytest.raises(ValidationError, match="NUL"):
            CatalogRecord(catalog="CD\x001")
        with pytest.raises(ValidationError, match="NUL"):
            CatalogRecord(catalog="CD1", artist="a\x00b")

    def test_long_catalog_cannot_serialize(self):
        record = CatalogRecord(catalog="C" * 31)
        with pytest.raises(ValueError, match="Field too long"):
            record.to_bytes()

    def test_from_bytes_too_short(self):
        with pytest.raises(ValueError, match="Data too short"):
            CatalogRecord.from_bytes(b"\x01\x01" + b"\x00" * 10)

    def test_from_bytes_wrong_kind(self):
        data = TrackRecord(catalog="CD1", track_no=1).to_bytes().ljust(CATALOG_RECORD_SIZE, b"\x00")
        with pytest.raises(ValueError, match="Invalid record kind"):
            CatalogRecord.from_bytes(data)

    def test_from_bytes_unknown_version(self):
        data = bytearray(CatalogRecord(catalog="CD1").to_bytes())
        data[1] = 99
        with pytest.raises(ValueError, match="Unsupported record version"):
            CatalogRecord.from_bytes(bytes(data))


class TestTrackRecord:
    """Tests for TrackRecord model."""

    def test_round_trip(self):
        record = TrackRecord(catalog="CD123", track_no=7, track_text="So What")
        restored = TrackRecord.from_bytes(record.to_bytes())

        assert restored == record

    def test_fixed_size(self):
        assert len(TrackRecord(catalog="CD1", track_no=1).to_bytes()) == TRACK_RECORD_SIZE == 108

    def test_track_no_encoding(self):
        data = TrackRecord(catalog="CD1", track_no=258).to_bytes()
        assert data[0] == RecordKind.TRACK
        assert struct.unpack("<I", data[33:37]) == (258,)

    def test_negative_track_no_rejected(self):
        with pytest.raises(ValidationError):
            TrackRecord(catalog="CD1", track_no=-1)

    def test_track_text_too_long(self):
        with pytest.raises(ValidationError, match="track_text exceeds"):
            TrackRecord(catalog="CD1", track_no=1, track_text="x" * 71)

    def test_empty_record(self):
        assert TrackRecord.empty().is_empty
        assert TrackRecord.empty().track_no == 0


class TestKeys:
    """Tests for catalog and track key builders."""

    def test_fixed_catalog_key(self):
        key = catalog_key("CD123")
        assert key == b"CD123" + b"\x00" * 26
        assert len(key) == CATALOG_KEY_SIZE == 31

    def test_fixed_track_key(self):
        key = track_key("CD123", 4)
        assert key == b"CD123 4".ljust(40, b"\x00")
        assert len(key) == TRACK_KEY_SIZE == 40

    def test_compact_keys(self):
        assert catalog_key("CD123", KeyFormat.COMPACT) == b"CD123"
        assert track_key("CD123", 12, KeyFormat.COMPACT) == b"CD123 12"

    def test_empty_catalog_allowed(self):
        assert catalog_key("") == b"\x00" * 31

    def test_length_boundary(self):
        assert len(catalog_key("c" * 29)) == 31
        with pytest.raises(InvalidArgument, match="shorter than 30"):
            catalog_key("c" * 30)
        with pytest.raises(InvalidArgument):
            track_key("c" * 30, 1)

    def test_none_rejected(self):
        with pytest.raises(InvalidArgument, match="None"):
            catalog_key(None)
        with pytest.raises(InvalidArgument, match="None"):
            track_key(None, 1)

    def test_negative_track_no_rejected(self):
        with pytest.raises(InvalidArgument, match="track_no"):
            track_key("CD1", -1)

    def test_track_key_overflow(self):
        # 29 + 1 + 10 digits fills the buffer with no room for a NUL
        with pytest.raises(InvalidArgument, match="Track key too long"):
            track_key("c" * 29, 2**31 - 1)
        assert len(track_key("c" * 29, 99999999)) == 40

    def test_bool_track_no_formats_as_decimal(self):
        assert track_key("CD1", True) == track_key("CD1", 1)
        assert track_key("CD1", False, KeyFormat.COMPACT) == b"CD1 0"

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            catalog_key("c" * 40)
