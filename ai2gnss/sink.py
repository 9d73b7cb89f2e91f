"""Text rendering of decoded AI2 reports.

Formatting lives here, outside the codec. The formatters are pure functions
returning strings; ``ReportSink`` decides which stream each string goes to
according to the configured ``OutputMode``:

    TEXT  report lines on ``out``
    NMEA  passthrough NMEA text on ``out``, every other line on ``err`` so
          ``out`` stays a clean NMEA stream
    RAW   each sub-packet dumped twice (C array and hex string) on ``out``,
          without decoding
"""

import sys
from collections.abc import Callable
from typing import TextIO

from ai2gnss.ai2.decoders import decode_subpacket
from ai2gnss.ai2.types import (
    AckReport,
    AsyncEvent,
    AsyncEventReport,
    ErrorReport,
    Frame,
    MeasurementReport,
    NmeaReport,
    PositionReport,
    Report,
    SubPacket,
    TruncatedReport,
    UnknownReport,
)
from ai2gnss.config import OutputMode

__all__ = ["ReportSink", "format_raw_subpacket", "format_report"]


def _format_position(report: PositionReport) -> str:
    line = (
        f"position: fcount: {report.fcount}, "
        f"lat: {report.latitude_degrees:f} lon: {report.longitude_degrees:f}"
    )
    if report.altitude_meters is not None:
        line += f" altitude: {report.altitude_meters:.1f}"
    sv = "".join(f" {sv_id}" for sv_id in report.satellite_ids)
    return f"{line} sv:{sv}\n"


def _format_measurement(report: MeasurementReport) -> str:
    lines = [f"measurement: fcount: {report.fcount}, sats: {len(report.satellites)}"]
    if report.excess_data:
        lines.append("measurement: excess data")
    lines.extend(
        f"SV: {sat.sv_id} SNR: {sat.snr:.1f} CNo: {sat.cno:.1f}"
        for sat in report.satellites
    )
    return "\n".join(lines) + "\n"


def _format_nmea(report: NmeaReport) -> str:
    return f"nmea: fcount: {report.fcount}:\n"


def _format_async_event(report: AsyncEventReport) -> str:
    if report.event is AsyncEvent.UNKNOWN:
        return f"async event: unknown 0x{report.code:02x}\n"
    return f"async event: {report.event.name.lower().replace('_', ' ')}\n"


def _format_error(report: ErrorReport) -> str:
    if report.code is None:
        return f"got error with len {len(report.raw_bytes)}\n"
    suffix = " (invalid checksum)" if report.invalid_checksum else ""
    return f"got error code 0x{report.code:04x}{suffix}\n"


def _format_unknown(report: UnknownReport) -> str:
    return (
        f"unknown packet type {report.packet_type:x} len: {len(report.raw_bytes)}"
        f" data: {report.raw_bytes.hex(' ')}\n"
    )


def _format_truncated(report: TruncatedReport) -> str:
    return (
        f"packet type {report.packet_type:x} too short: "
        f"{len(report.raw_bytes)} < {report.required_length}\n"
    )


def _format_ack(_report: AckReport) -> str:
    return "decoded ack\n"


_FORMATTERS: dict[type, Callable[..., str]] = {
    PositionReport: _format_position,
    MeasurementReport: _format_measurement,
    NmeaReport: _format_nmea,
    AsyncEventReport: _format_async_event,
    ErrorReport: _format_error,
    UnknownReport: _format_unknown,
    TruncatedReport: _format_truncated,
    AckReport: _format_ack,
}


def format_report(report: Report) -> str:
    """Render one report as newline-terminated text.

    The NMEA text itself is not included; ``ReportSink`` writes it
    separately so it can go to its own stream.

    Raises:
        TypeError: If *report* is not one of the report classes.
    """
    formatter = _FORMATTERS.get(type(report))
    if formatter is None:
        raise TypeError(f"not a report: {report!r}")
    return formatter(report)


def format_raw_subpacket(frame_class: int, subpacket: SubPacket) -> str:
    """Dump a sub-packet as a C initializer line and a compact hex line.

    Example:
        >>> print(format_raw_subpacket(1, SubPacket(0x99, b"\\xaa\\xbb")), end="")
        0x01, 0x99, {0xaa, 0xbb, }
        01, 99, aabb
    """
    array = "".join(f"0x{byte:02x}, " for byte in subpacket.payload)
    return (
        f"0x{frame_class:02x}, 0x{subpacket.packet_type:02x}, {{{array}}}\n"
        f"{frame_class:02x}, {subpacket.packet_type:02x}, {subpacket.payload.hex()}\n"
    )


class ReportSink:
    """Write frames and reports to text streams.

    Args:
        mode: Output mode selecting what goes where.
        out: Primary stream (default: ``sys.stdout``).
        err: Diagnostic stream used in NMEA mode (default: ``sys.stderr``).
    """

    def __init__(
        self,
        mode: OutputMode = OutputMode.TEXT,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._mode = mode
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr

    @property
    def _info(self) -> TextIO:
        return self._err if self._mode is OutputMode.NMEA else self._out

    def emit(self, report: Report) -> None:
        """Write one decoded report."""
        self._info.write(format_report(report))
        if isinstance(report, NmeaReport) and report.raw_text:
            self._write_passthrough(report.raw_text)
        self._out.flush()

    def _write_passthrough(self, raw_text: bytes) -> None:
        """Forward NMEA bytes verbatim when *out* has a binary buffer."""
        buffer = getattr(self._out, "buffer", None)
        if buffer is None:
            self._out.write(raw_text.decode("ascii", errors="replace"))
            return
        self._out.flush()
        buffer.write(raw_text)
        buffer.flush()

    def emit_frame(self, frame: Frame) -> None:
        """Write every sub-packet of *frame*, decoded unless in RAW mode."""
        if frame.is_ack:
            self._info.write(format_report(AckReport(frame_class=frame.frame_class)))
            return
        for subpacket in frame.subpackets:
            if self._mode is OutputMode.RAW:
                self._out.write(format_raw_subpacket(frame.frame_class, subpacket))
                continue
            self._info.write(
                f"packet type {subpacket.packet_type:x}, "
                f"payload: {len(subpacket.payload)}\n"
            )
            self.emit(decode_subpacket(subpacket))
        self._out.flush()
