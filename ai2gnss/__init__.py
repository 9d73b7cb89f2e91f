"""ai2gnss: codec and reader for the TI AI2 GNSS receiver protocol."""

from ai2gnss.ai2 import (
    AI2StreamDecoder,
    AsyncEvent,
    Frame,
    PacketType,
    Report,
    decode_frame,
    encode_frame,
    parse_frame,
)
from ai2gnss.config import OutputMode, ReaderConfig
from ai2gnss.receiver import AI2Reader, FrameWorker, run_init_sequence
from ai2gnss.sink import ReportSink, format_report

__all__ = [
    "AI2Reader",
    "AI2StreamDecoder",
    "AsyncEvent",
    "Frame",
    "FrameWorker",
    "OutputMode",
    "PacketType",
    "ReaderConfig",
    "Report",
    "ReportSink",
    "decode_frame",
    "encode_frame",
    "format_report",
    "parse_frame",
    "run_init_sequence",
]
