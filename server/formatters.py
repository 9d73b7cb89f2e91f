"""JSON formatting of AI2 reports for WebSocket transmission."""

import json
from typing import Any

from ai2gnss.ai2.types import (
    AckReport,
    AsyncEventReport,
    ErrorReport,
    MeasurementReport,
    NmeaReport,
    PositionReport,
    Report,
    TruncatedReport,
    UnknownReport,
)
from ai2gnss.nmea import split_sentences, validate_checksum

__all__ = ["format_report_message"]


def _position(report: PositionReport) -> dict[str, Any]:
    return {
        "type": "position",
        "fcount": report.fcount,
        "lat": report.latitude_degrees,
        "lon": report.longitude_degrees,
        "alt": report.altitude_meters,
        "satellites": report.satellite_ids,
        "extended": report.extended,
    }


def _measurement(report: MeasurementReport) -> dict[str, Any]:
    return {
        "type": "measurement",
        "fcount": report.fcount,
        "satellites": [
            {"sv": sat.sv_id, "snr": sat.snr, "cno": sat.cno}
            for sat in report.satellites
        ],
        "excess_bytes": report.excess_bytes,
    }


def _nmea(report: NmeaReport) -> dict[str, Any]:
    return {
        "type": "nmea",
        "fcount": report.fcount,
        "sentences": [
            {"text": sentence, "checksum_valid": validate_checksum(sentence)}
            for sentence in split_sentences(report.raw_text)
        ],
    }


def _async_event(report: AsyncEventReport) -> dict[str, Any]:
    return {"type": "async_event", "event": report.event.name.lower(), "code": report.code}


def _error(report: ErrorReport) -> dict[str, Any]:
    return {
        "type": "error",
        "code": report.code,
        "invalid_checksum": report.invalid_checksum,
        "raw": report.raw_bytes.hex(),
    }


def _unknown(report: UnknownReport) -> dict[str, Any]:
    return {"type": "unknown", "packet_type": report.packet_type, "raw": report.raw_bytes.hex()}


def _truncated(report: TruncatedReport) -> dict[str, Any]:
    return {
        "type": "truncated",
        "packet_type": report.packet_type,
        "required_length": report.required_length,
        "raw": report.raw_bytes.hex(),
    }


def _ack(report: AckReport) -> dict[str, Any]:
    return {"type": "ack", "frame_class": report.frame_class}


_SERIALIZERS: dict[type, Any] = {
    PositionReport: _position,
    MeasurementReport: _measurement,
    NmeaReport: _nmea,
    AsyncEventReport: _async_event,
    ErrorReport: _error,
    UnknownReport: _unknown,
    TruncatedReport: _truncated,
    AckReport: _ack,
}


def format_report_message(report: Report) -> str:
    """Serialize a report into a JSON string with a ``type`` discriminator."""
    return json.dumps(_SERIALIZERS[type(report)](report))
