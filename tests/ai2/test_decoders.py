"""Unit tests for AI2 payload decoders."""

import logging
import struct

import pytest

from ai2gnss.ai2.decoders import (
    decode_async_event,
    decode_error,
    decode_frame,
    decode_measurement,
    decode_nmea,
    decode_position,
    decode_position_ext,
    decode_subpacket,
)
from ai2gnss.ai2.types import (
    AckReport,
    AsyncEvent,
    AsyncEventReport,
    ErrorReport,
    Frame,
    MeasurementReport,
    NmeaReport,
    PacketType,
    PositionReport,
    SubPacket,
    TruncatedReport,
    UnknownReport,
)


def _sv_record(sv_id: int) -> bytes:
    return bytes([sv_id]) + bytes(5)


def _position_payload(
    fcount: int, lat_raw: int, lon_raw: int, alt_raw: int, sv_ids: list[int]
) -> bytes:
    header = struct.pack("<IHiih", fcount, 0, lat_raw, lon_raw, alt_raw) + bytes(15)
    return header + b"".join(_sv_record(sv) for sv in sv_ids)


def _position_ext_payload(
    fcount: int, lat_raw: int, lon_raw: int, sv_ids: list[int]
) -> bytes:
    header = struct.pack("<IHii", fcount, 0, lat_raw, lon_raw) + bytes(47)
    return header + b"".join(_sv_record(sv) for sv in sv_ids)


def _measurement_record(sv_id: int, snr_raw: int, cno_raw: int) -> bytes:
    return struct.pack("<BHH", sv_id, snr_raw, cno_raw) + bytes(23)


class TestDecodePosition:
    def test_valid_position(self):
        payload = _position_payload(1234, 2**30, -(2**30), 20, [5, 12])
        assert len(payload) == 31 + 12
        report = decode_position(payload)

        assert isinstance(report, PositionReport)
        assert report.fcount == 1234
        assert report.latitude_degrees == pytest.approx(45.0)
        assert report.longitude_degrees == pytest.approx(-90.0)
        assert report.altitude_meters == pytest.approx(10.0)
        assert report.satellite_ids == [5, 12]
        assert report.extended is False

    def test_negative_altitude(self):
        report = decode_position(_position_payload(0, 0, 0, -7, []))
        assert report.altitude_meters == pytest.approx(-3.5)

    def test_header_only_has_no_satellites(self):
        report = decode_position(_position_payload(0, 0, 0, 0, []))
        assert report.satellite_ids == []

    def test_partial_satellite_record_ignored(self):
        payload = _position_payload(0, 0, 0, 0, [7]) + b"\x09\x00\x00"
        assert decode_position(payload).satellite_ids == [7]

    def test_short_payload_is_truncated(self, caplog):
        payload = _position_payload(0, 0, 0, 0, [])[:30]
        with caplog.at_level(logging.WARNING):
            report = decode_position(payload)
        assert report == TruncatedReport(PacketType.POSITION, 31, payload)
        assert "shorter than 31" in caplog.text


class TestDecodePositionExt:
    def test_valid_position_ext(self):
        payload = _position_ext_payload(99, -(2**30), 2**30, [3, 4, 30])
        assert len(payload) == 61 + 18
        report = decode_position_ext(payload)

        assert isinstance(report, PositionReport)
        assert report.fcount == 99
        assert report.latitude_degrees == pytest.approx(-45.0)
        assert report.longitude_degrees == pytest.approx(90.0)
        assert report.altitude_meters is None
        assert report.satellite_ids == [3, 4, 30]
        assert report.extended is True

    def test_short_payload_is_truncated(self):
        payload = _position_ext_payload(0, 0, 0, [])[:60]
        report = decode_position_ext(payload)
        assert isinstance(report, TruncatedReport)
        assert report.packet_type == PacketType.POSITION_EXT
        assert report.required_length == 61


class TestDecodeMeasurement:
    def test_valid_measurement(self):
        payload = struct.pack("<I", 500) + _measurement_record(5, 455, 380) + _measurement_record(
            17, 0, 100
        )
        report = decode_measurement(payload)

        assert isinstance(report, MeasurementReport)
        assert report.fcount == 500
        assert [sat.sv_id for sat in report.satellites] == [5, 17]
        assert report.satellites[0].snr == pytest.approx(45.5)
        assert report.satellites[0].cno == pytest.approx(38.0)
        assert report.satellites[1].cno == pytest.approx(10.0)
        assert report.excess_bytes == 0
        assert report.excess_data is False

    def test_no_satellites(self):
        report = decode_measurement(struct.pack("<I", 1))
        assert report.satellites == []

    def test_excess_data_is_reported(self, caplog):
        payload = (
            struct.pack("<I", 1)
            + b"".join(_measurement_record(sv, 10, 10) for sv in (1, 2, 3))
            + bytes(5)
        )
        with caplog.at_level(logging.WARNING):
            report = decode_measurement(payload)
        assert len(report.satellites) == 3
        assert report.excess_bytes == 5
        assert report.excess_data is True
        assert "excess data" in caplog.text

    def test_short_payload_is_truncated(self):
        report = decode_measurement(b"\x01\x02\x03")
        assert report == TruncatedReport(PacketType.MEASUREMENT, 4, b"\x01\x02\x03")


class TestDecodeNmea:
    def test_text_forwarded_verbatim(self):
        text = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47\r\n"
        report = decode_nmea(struct.pack("<I", 42) + text)
        assert report == NmeaReport(fcount=42, raw_text=text)

    def test_counter_only(self):
        assert decode_nmea(b"\x00\x00\x00\x00") == NmeaReport(fcount=0, raw_text=b"")

    def test_short_payload_never_fails(self):
        assert decode_nmea(b"\x01") == NmeaReport(fcount=None, raw_text=b"")


class TestDecodeAsyncEvent:
    @pytest.mark.parametrize(
        ("code", "event"),
        [(0x01, AsyncEvent.ENGINE_OFF), (0x07, AsyncEvent.ENGINE_IDLE)],
    )
    def test_known_events(self, code, event):
        assert decode_async_event(bytes([code])) == AsyncEventReport(event, code)

    def test_unknown_event_keeps_code(self):
        report = decode_async_event(b"\x42")
        assert report == AsyncEventReport(AsyncEvent.UNKNOWN, 0x42)

    def test_empty_payload_is_truncated(self):
        report = decode_async_event(b"")
        assert report == TruncatedReport(PacketType.ASYNC_EVENT, 1, b"")


class TestDecodeError:
    def test_invalid_checksum_code(self):
        report = decode_error(b"\xff\x02")
        assert report == ErrorReport(code=0x02FF, raw_bytes=b"\xff\x02")
        assert report.invalid_checksum is True

    def test_other_code(self):
        report = decode_error(b"\x01\x00")
        assert report.code == 1
        assert report.invalid_checksum is False

    def test_unexpected_length(self, caplog):
        with caplog.at_level(logging.WARNING):
            report = decode_error(b"\x01\x02\x03")
        assert report == ErrorReport(code=None, raw_bytes=b"\x01\x02\x03")
        assert "got error with len 3" in caplog.text


class TestDispatch:
    def test_unknown_type_keeps_full_payload(self):
        report = decode_subpacket(SubPacket(0x99, b"\xaa\xbb"))
        assert report == UnknownReport(packet_type=0x99, raw_bytes=b"\xaa\xbb")

    def test_known_type_dispatched(self):
        report = decode_subpacket(SubPacket(PacketType.ERROR, b"\xff\x02"))
        assert isinstance(report, ErrorReport)

    def test_frame_reports_in_wire_order(self):
        frame = Frame(
            0x01,
            [
                SubPacket(PacketType.ASYNC_EVENT, b"\x07"),
                SubPacket(0x99, b""),
                SubPacket(PacketType.ERROR, b"\xff\x02"),
            ],
        )
        reports = decode_frame(frame)
        assert [type(r) for r in reports] == [AsyncEventReport, UnknownReport, ErrorReport]

    def test_truncated_subpacket_does_not_abort_frame(self):
        frame = Frame(
            0x01,
            [
                SubPacket(PacketType.POSITION, b"\x00" * 10),
                SubPacket(PacketType.ASYNC_EVENT, b"\x01"),
            ],
        )
        reports = decode_frame(frame)
        assert isinstance(reports[0], TruncatedReport)
        assert reports[1] == AsyncEventReport(AsyncEvent.ENGINE_OFF, 1)

    def test_ack_frame(self):
        assert decode_frame(Frame(0x02)) == [AckReport(frame_class=0x02)]
