"""Stream decoder combining the byte framer and the frame validator."""

from ai2gnss.ai2.decoders import decode_frame
from ai2gnss.ai2.frame import parse_frame
from ai2gnss.ai2.framer import ByteFramer, FramerStats
from ai2gnss.ai2.types import Frame, Report

__all__ = ["AI2StreamDecoder"]


class AI2StreamDecoder:
    """Decode an AI2 byte stream chunk by chunk.

    Holds the framer state between calls, so chunks may split frames at any
    byte. Frames that fail validation are dropped and the framer resyncs on
    the next start marker.

    Example::

        decoder = AI2StreamDecoder()
        for report in decoder.decode(chunk):
            sink.emit(report)
    """

    def __init__(self) -> None:
        self._framer = ByteFramer()
        self.rejected = 0

    @property
    def stats(self) -> FramerStats:
        return self._framer.stats

    def feed(self, data: bytes) -> list[Frame]:
        """Return every valid frame completed by *data*."""
        frames = []
        for buffer in self._framer.feed(data):
            frame = parse_frame(buffer)
            if frame is None:
                self.rejected += 1
                continue
            frames.append(frame)
        return frames

    def decode(self, data: bytes) -> list[Report]:
        """Return the reports of every valid frame completed by *data*."""
        return [report for frame in self.feed(data) for report in decode_frame(frame)]
