"""Tests for bounds-checked field readers."""

import pytest

from ai2gnss.ai2.fields import (
    FieldTruncatedError,
    read_i16,
    read_i32,
    read_u8,
    read_u16,
    read_u32,
)


class TestReaders:
    def test_u8(self):
        assert read_u8(b"\x01\xfe", 1) == 0xFE

    def test_u16_little_endian(self):
        assert read_u16(b"\x00\xff\x02", 1) == 0x02FF

    def test_i16_negative(self):
        assert read_i16(b"\xf9\xff", 0) == -7

    def test_u32(self):
        assert read_u32(b"\x78\x56\x34\x12", 0) == 0x12345678

    def test_i32_negative(self):
        assert read_i32((-(2**30)).to_bytes(4, "little", signed=True), 0) == -(2**30)


class TestBounds:
    def test_field_past_end(self):
        with pytest.raises(FieldTruncatedError):
            read_u32(b"\x00\x00\x00", 0)

    def test_offset_past_end(self):
        with pytest.raises(FieldTruncatedError):
            read_u8(b"\x00", 1)

    def test_negative_offset(self):
        with pytest.raises(FieldTruncatedError):
            read_u16(b"\x00\x00\x00", -1)

    def test_is_value_error(self):
        with pytest.raises(ValueError, match="needs 2 bytes"):
            read_u16(b"\x00", 0)
