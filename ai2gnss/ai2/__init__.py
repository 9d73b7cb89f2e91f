"""AI2 binary protocol codec: framing, validation, decoding and encoding."""

from ai2gnss.ai2.checksum import sum16
from ai2gnss.ai2.decoders import decode_frame, decode_subpacket
from ai2gnss.ai2.encoder import encode_frame, encode_subpackets, escape
from ai2gnss.ai2.frame import parse_frame, split_subpackets
from ai2gnss.ai2.framer import ByteFramer, FramerState, FramerStats
from ai2gnss.ai2.stream import AI2StreamDecoder
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

__all__ = [
    "AI2StreamDecoder",
    "AckReport",
    "AsyncEvent",
    "AsyncEventReport",
    "ByteFramer",
    "ErrorReport",
    "Frame",
    "FramerState",
    "FramerStats",
    "MeasurementReport",
    "NmeaReport",
    "PacketType",
    "PositionReport",
    "Report",
    "SatelliteMeasurement",
    "SubPacket",
    "TruncatedReport",
    "UnknownReport",
    "decode_frame",
    "decode_subpacket",
    "encode_frame",
    "encode_subpackets",
    "escape",
    "parse_frame",
    "split_subpackets",
    "sum16",
]
