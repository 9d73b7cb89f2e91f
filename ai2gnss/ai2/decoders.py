"""Payload decoders for AI2 sub-packets.

Each decoder is a pure function ``(payload) -> Report``. They read fields
only through the bounds-checked readers in ``ai2gnss.ai2.fields`` and check
the fixed header length up front, so a short payload yields a
``TruncatedReport`` instead of an exception.

Payload layouts (offsets in bytes, all little-endian):

    Measurement (0x08)
        0   u32  fcount
        4   N x 28-byte satellite records:
              0  u8   sv
              1  u16  snr  (x10)
              3  u16  cno  (x10)
              5  23 bytes not decoded

    Position (0x06)
        0   u32  fcount
        4   u16  not decoded
        6   i32  latitude   (90 deg = 2**31)
        10  i32  longitude  (180 deg = 2**31)
        14  i16  altitude   (half meters)
        16  15 bytes not decoded
        31  N x 6-byte satellite records (u8 sv + 5 bytes)

    Position extended (0xD5)
        0   u32  fcount
        4   u16  not decoded
        6   i32  latitude
        10  i32  longitude
        14  47 bytes not decoded
        61  N x 6-byte satellite records

    NMEA (0xD3)
        0   u32  fcount
        4   NMEA text, forwarded verbatim

    Async event (0x80)
        0   u8   event code

    Error (0xF5)
        0   u16  error code (only when the payload is exactly 2 bytes)
"""

import logging
from collections.abc import Callable

from ai2gnss.ai2.fields import read_i16, read_i32, read_u8, read_u16, read_u32
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
    Report,
    SatelliteMeasurement,
    SubPacket,
    TruncatedReport,
    UnknownReport,
)

logger = logging.getLogger(__name__)

__all__ = [
    "decode_async_event",
    "decode_error",
    "decode_frame",
    "decode_measurement",
    "decode_nmea",
    "decode_position",
    "decode_position_ext",
    "decode_subpacket",
    "decode_unknown",
]

# --- layout constants ---------------------------------------------------------

_FCOUNT_SIZE = 4

_MEASUREMENT_RECORD_SIZE = 28

_POSITION_LAT_OFFSET = 6
_POSITION_LON_OFFSET = 10
_POSITION_ALT_OFFSET = 14
_POSITION_HEADER_SIZE = 31
_POSITION_EXT_HEADER_SIZE = 61
_POSITION_SV_RECORD_SIZE = 6

_ERROR_CODE_SIZE = 2

# --- unit conversions ---------------------------------------------------------

_LAT_SCALE = 90.0 / 2**31
_LON_SCALE = 180.0 / 2**31
_ALTITUDE_SCALE = 0.5
_SIGNAL_SCALE = 0.1

_ASYNC_EVENTS: dict[int, AsyncEvent] = {
    0x01: AsyncEvent.ENGINE_OFF,
    0x07: AsyncEvent.ENGINE_IDLE,
}


def _truncated(packet_type: int, required: int, payload: bytes) -> TruncatedReport:
    logger.warning(
        "packet type 0x%02x: payload of %d bytes shorter than %d, not decoded",
        packet_type,
        len(payload),
        required,
    )
    return TruncatedReport(
        packet_type=packet_type,
        required_length=required,
        raw_bytes=bytes(payload),
    )


def _satellite_ids(payload: bytes, header_size: int) -> list[int]:
    """Read the SV id of every complete 6-byte record after *header_size*."""
    count = (len(payload) - header_size) // _POSITION_SV_RECORD_SIZE
    return [
        read_u8(payload, header_size + i * _POSITION_SV_RECORD_SIZE)
        for i in range(count)
    ]


def _read_latitude(payload: bytes) -> float:
    return read_i32(payload, _POSITION_LAT_OFFSET) * _LAT_SCALE


def _read_longitude(payload: bytes) -> float:
    return read_i32(payload, _POSITION_LON_OFFSET) * _LON_SCALE


def decode_measurement(payload: bytes) -> Report:
    """Decode a measurement report into per-satellite SNR and C/N0.

    Only complete 28-byte records are decoded. Leftover bytes are counted
    in ``excess_bytes`` and logged as "excess data".

    Example:
        A payload of ``4 + 28 * 3 + 5`` bytes yields three satellites and
        ``excess_bytes == 5``.
    """
    if len(payload) < _FCOUNT_SIZE:
        return _truncated(PacketType.MEASUREMENT, _FCOUNT_SIZE, payload)

    records, excess = divmod(len(payload) - _FCOUNT_SIZE, _MEASUREMENT_RECORD_SIZE)
    if excess:
        logger.warning("measurement: excess data (%d trailing bytes)", excess)

    satellites = []
    for i in range(records):
        base = _FCOUNT_SIZE + i * _MEASUREMENT_RECORD_SIZE
        satellites.append(
            SatelliteMeasurement(
                sv_id=read_u8(payload, base),
                snr=read_u16(payload, base + 1) * _SIGNAL_SCALE,
                cno=read_u16(payload, base + 3) * _SIGNAL_SCALE,
            )
        )

    return MeasurementReport(
        fcount=read_u32(payload, 0),
        satellites=satellites,
        excess_bytes=excess,
    )


def decode_position(payload: bytes) -> Report:
    """Decode a position report with altitude."""
    if len(payload) < _POSITION_HEADER_SIZE:
        return _truncated(PacketType.POSITION, _POSITION_HEADER_SIZE, payload)

    return PositionReport(
        fcount=read_u32(payload, 0),
        latitude_degrees=_read_latitude(payload),
        longitude_degrees=_read_longitude(payload),
        altitude_meters=read_i16(payload, _POSITION_ALT_OFFSET) * _ALTITUDE_SCALE,
        satellite_ids=_satellite_ids(payload, _POSITION_HEADER_SIZE),
    )


def decode_position_ext(payload: bytes) -> Report:
    """Decode an extended position report; this layout has no altitude."""
    if len(payload) < _POSITION_EXT_HEADER_SIZE:
        return _truncated(PacketType.POSITION_EXT, _POSITION_EXT_HEADER_SIZE, payload)

    return PositionReport(
        fcount=read_u32(payload, 0),
        latitude_degrees=_read_latitude(payload),
        longitude_degrees=_read_longitude(payload),
        altitude_meters=None,
        satellite_ids=_satellite_ids(payload, _POSITION_EXT_HEADER_SIZE),
        extended=True,
    )


def decode_nmea(payload: bytes) -> Report:
    """Pass NMEA text through untouched. Never fails."""
    if len(payload) < _FCOUNT_SIZE:
        return NmeaReport(fcount=None, raw_text=b"")
    return NmeaReport(fcount=read_u32(payload, 0), raw_text=bytes(payload[_FCOUNT_SIZE:]))


def decode_async_event(payload: bytes) -> Report:
    if len(payload) < 1:
        return _truncated(PacketType.ASYNC_EVENT, 1, payload)
    code = read_u8(payload, 0)
    return AsyncEventReport(event=_ASYNC_EVENTS.get(code, AsyncEvent.UNKNOWN), code=code)


def decode_error(payload: bytes) -> Report:
    """Decode a receiver error; only 2-byte payloads carry a code."""
    if len(payload) != _ERROR_CODE_SIZE:
        logger.warning("got error with len %d", len(payload))
        return ErrorReport(code=None, raw_bytes=bytes(payload))
    return ErrorReport(code=read_u16(payload, 0), raw_bytes=bytes(payload))


def decode_unknown(packet_type: int, payload: bytes) -> Report:
    return UnknownReport(packet_type=packet_type, raw_bytes=bytes(payload))


_DECODERS: dict[int, Callable[[bytes], Report]] = {
    PacketType.MEASUREMENT: decode_measurement,
    PacketType.POSITION: decode_position,
    PacketType.POSITION_EXT: decode_position_ext,
    PacketType.NMEA: decode_nmea,
    PacketType.ASYNC_EVENT: decode_async_event,
    PacketType.ERROR: decode_error,
}


def decode_subpacket(subpacket: SubPacket) -> Report:
    """Dispatch one sub-packet to its decoder.

    Types without a decoder come back as ``UnknownReport`` holding the full
    payload.
    """
    logger.debug(
        "packet type %x, payload: %d", subpacket.packet_type, len(subpacket.payload)
    )
    decoder = _DECODERS.get(subpacket.packet_type)
    if decoder is None:
        return decode_unknown(subpacket.packet_type, subpacket.payload)
    return decoder(subpacket.payload)


def decode_frame(frame: Frame) -> list[Report]:
    """Decode every sub-packet of a validated frame, in wire order.

    An ack frame decodes to a single ``AckReport``.
    """
    if frame.is_ack:
        return [AckReport(frame_class=frame.frame_class)]
    return [decode_subpacket(subpacket) for subpacket in frame.subpackets]
