"""Tests for text rendering of reports."""

import io
import struct

import pytest

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
    SatelliteMeasurement,
    SubPacket,
    TruncatedReport,
    UnknownReport,
)
from ai2gnss.config import OutputMode
from ai2gnss.sink import ReportSink, format_raw_subpacket, format_report

_GSA = b"$GPGSA,A,3,,,,,,,,,,,,,,,*1E\r\n"


class TestFormatReport:
    def test_position(self):
        report = PositionReport(1234, 45.0, -90.0, 10.0, [5, 12])
        assert format_report(report) == (
            "position: fcount: 1234, lat: 45.000000 lon: -90.000000 altitude: 10.0 sv: 5 12\n"
        )

    def test_position_ext_has_no_altitude(self):
        report = PositionReport(7, 1.5, 2.25, None, [], extended=True)
        assert format_report(report) == "position: fcount: 7, lat: 1.500000 lon: 2.250000 sv:\n"

    def test_measurement(self):
        report = MeasurementReport(500, [SatelliteMeasurement(5, 45.5, 38.0)])
        assert format_report(report) == (
            "measurement: fcount: 500, sats: 1\nSV: 5 SNR: 45.5 CNo: 38.0\n"
        )

    def test_measurement_excess_data(self):
        report = MeasurementReport(1, [], excess_bytes=5)
        assert format_report(report) == (
            "measurement: fcount: 1, sats: 0\nmeasurement: excess data\n"
        )

    def test_nmea_header_only(self):
        assert format_report(NmeaReport(9, _GSA)) == "nmea: fcount: 9:\n"

    @pytest.mark.parametrize(
        ("report", "expected"),
        [
            (AsyncEventReport(AsyncEvent.ENGINE_IDLE, 0x07), "async event: engine idle\n"),
            (AsyncEventReport(AsyncEvent.ENGINE_OFF, 0x01), "async event: engine off\n"),
            (AsyncEventReport(AsyncEvent.UNKNOWN, 0x42), "async event: unknown 0x42\n"),
        ],
    )
    def test_async_event(self, report, expected):
        assert format_report(report) == expected

    def test_error_invalid_checksum(self):
        report = ErrorReport(0x02FF, b"\xff\x02")
        assert format_report(report) == "got error code 0x02ff (invalid checksum)\n"

    def test_error_without_code(self):
        assert format_report(ErrorReport(None, b"\x01\x02\x03")) == "got error with len 3\n"

    def test_unknown(self):
        report = UnknownReport(0x99, b"\xaa\xbb")
        assert format_report(report) == "unknown packet type 99 len: 2 data: aa bb\n"

    def test_truncated(self):
        report = TruncatedReport(PacketType.POSITION, 31, b"\x00\x01\x02")
        assert format_report(report) == "packet type 6 too short: 3 < 31\n"

    def test_ack(self):
        assert format_report(AckReport()) == "decoded ack\n"

    def test_not_a_report(self):
        with pytest.raises(TypeError, match="not a report"):
            format_report("position")  # type: ignore[arg-type]


class TestFormatRawSubpacket:
    def test_dump(self):
        assert format_raw_subpacket(1, SubPacket(0x99, b"\xaa\xbb")) == (
            "0x01, 0x99, {0xaa, 0xbb, }\n01, 99, aabb\n"
        )

    def test_empty_payload(self):
        assert format_raw_subpacket(0, SubPacket(0xF1, b"")) == "0x00, 0xf1, {}\n00, f1, \n"


class TestReportSink:
    def _sink(self, mode: OutputMode) -> tuple[ReportSink, io.StringIO, io.StringIO]:
        out, err = io.StringIO(), io.StringIO()
        return ReportSink(mode, out=out, err=err), out, err

    def test_text_mode_writes_to_out(self):
        sink, out, err = self._sink(OutputMode.TEXT)
        sink.emit_frame(Frame(0x01, [SubPacket(PacketType.ASYNC_EVENT, b"\x07")]))
        assert out.getvalue() == "packet type 80, payload: 1\nasync event: engine idle\n"
        assert err.getvalue() == ""

    def test_text_mode_prints_nmea_text(self):
        sink, out, _ = self._sink(OutputMode.TEXT)
        sink.emit(NmeaReport(9, _GSA))
        assert out.getvalue() == "nmea: fcount: 9:\n" + _GSA.decode()

    def test_nmea_bytes_forwarded_verbatim(self):
        raw = io.BytesIO()
        out = io.TextIOWrapper(raw, encoding="utf-8")
        text = b"$GPTXT,01,01,02,25\xb0C*00\r\n"
        ReportSink(OutputMode.NMEA, out=out, err=io.StringIO()).emit(NmeaReport(1, text))
        assert raw.getvalue() == text

    def test_text_mode_header_precedes_binary_passthrough(self):
        raw = io.BytesIO()
        out = io.TextIOWrapper(raw, encoding="utf-8")
        ReportSink(OutputMode.TEXT, out=out).emit(NmeaReport(1, _GSA))
        assert raw.getvalue() == b"nmea: fcount: 1:\n" + _GSA

    def test_nmea_mode_keeps_out_clean(self):
        sink, out, err = self._sink(OutputMode.NMEA)
        payload = struct.pack("<I", 9) + _GSA
        sink.emit_frame(Frame(0x01, [SubPacket(PacketType.NMEA, payload)]))
        assert out.getvalue() == _GSA.decode()
        assert err.getvalue() == f"packet type d3, payload: {len(payload)}\nnmea: fcount: 9:\n"

    def test_raw_mode_does_not_decode(self):
        sink, out, _ = self._sink(OutputMode.RAW)
        sink.emit_frame(Frame(0x01, [SubPacket(0x06, b"\x01"), SubPacket(0x99, b"")]))
        assert out.getvalue() == (
            "0x01, 0x06, {0x01, }\n01, 06, 01\n0x01, 0x99, {}\n01, 99, \n"
        )

    def test_ack_frame(self):
        sink, out, _ = self._sink(OutputMode.TEXT)
        sink.emit_frame(Frame(0x02))
        assert out.getvalue() == "decoded ack\n"

    def test_truncated_subpacket_is_visible(self):
        sink, out, _ = self._sink(OutputMode.TEXT)
        sink.emit_frame(Frame(0x01, [SubPacket(PacketType.MEASUREMENT, b"\x01")]))
        assert "packet type 8 too short: 1 < 4" in out.getvalue()
