"""AI2Reader: streams decoded AI2 frames and reports from a receiver device.

Reading strategy:
    The device is polled in chunks with a short timeout. Every chunk is fed
    to an ``AI2StreamDecoder``, which keeps the framer state between chunks,
    so frames split across reads decode normally. Completed frames are
    queued and handed out one at a time; reports are derived from them
    on demand.

Writes go straight to the same channel. Reading and writing are
independent operations on the device, so a command writer may run in
another thread while the reader blocks.
"""

from collections import deque
from collections.abc import Iterator
from types import TracebackType

from ai2gnss.ai2.decoders import decode_frame
from ai2gnss.ai2.stream import AI2StreamDecoder
from ai2gnss.ai2.types import Frame, Report
from ai2gnss.receiver.channel import READ_TIMEOUT, FileChannel, SerialChannel, open_channel

__all__ = ["AI2Reader"]

_READ_SIZE = 256


class AI2Reader:
    """Context manager for reading AI2 frames from a receiver device.

    The device is opened in ``__enter__`` and closed in ``__exit__``. Two
    consumption patterns are supported:

    Continuous iteration over decoded reports::

        with AI2Reader("/dev/gnss0") as receiver:
            for report in receiver:
                process(report)

    Frame-level access (e.g. for raw dumps)::

        with AI2Reader("/dev/gnss0") as receiver:
            frame = receiver.read_frame()

    Args:
        device: Path of the receiver device.
        baudrate: Open the device as a serial port at this rate; None opens
            it as a character device.
        timeout: Read poll timeout in seconds.
    """

    def __init__(
        self,
        device: str,
        baudrate: int | None = None,
        timeout: float = READ_TIMEOUT,
    ) -> None:
        """Store device parameters; the channel is opened in ``__enter__``."""
        self._device = device
        self._baudrate = baudrate
        self._timeout = timeout
        self._channel: FileChannel | SerialChannel | None = None
        self._decoder = AI2StreamDecoder()
        self._frames: deque[Frame] = deque()
        self._reports: deque[Report] = deque()
        self._cancelled: bool = False

    def __enter__(self) -> "AI2Reader":
        """Open the device and reset decoder state.

        Raises:
            ChannelOpenError: If the device cannot be opened.
        """
        self._channel = open_channel(self._device, self._baudrate, self._timeout)
        self._decoder = AI2StreamDecoder()
        self._frames.clear()
        self._reports.clear()
        self._cancelled = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the device."""
        if self._channel is not None:
            self._channel.close()
            self._channel = None

    @property
    def decoder(self) -> AI2StreamDecoder:
        return self._decoder

    def cancel(self) -> None:
        """Stop pending and future reads.

        The next poll timeout (or the next chunk) makes ``read_frame()``
        raise ``EOFError``, so a reader thread exits within ``timeout``
        seconds.
        """
        self._cancelled = True

    def write(self, data: bytes) -> None:
        """Write encoded command bytes to the device.

        Raises:
            RuntimeError: If called outside a ``with`` block.
        """
        if self._channel is None:
            raise RuntimeError("AI2Reader must be used as a context manager.")
        self._channel.write(data)

    def _fill(self, channel: FileChannel | SerialChannel) -> None:
        """Read one chunk and queue the frames it completes.

        Raises:
            EOFError: If cancelled or the device stream ended.
        """
        if self._cancelled:
            raise EOFError("AI2 read cancelled.")
        chunk = channel.read(_READ_SIZE)
        if chunk is None:
            return
        if not chunk:
            raise EOFError("AI2 device stream ended.")
        self._frames.extend(self._decoder.feed(chunk))

    def read_frame(self) -> Frame:
        """Block until the next valid frame arrives and return it.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If the read is cancelled or the stream ends.
        """
        if self._channel is None:
            raise RuntimeError("AI2Reader must be used as a context manager.")
        while not self._frames:
            self._fill(self._channel)
        return self._frames.popleft()

    def frames(self) -> Iterator[Frame]:
        """Yield valid frames until an exception (e.g. ``EOFError``) ends it."""
        while True:
            yield self.read_frame()

    def read(self) -> Report:
        """Block until the next decoded report and return it.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If the read is cancelled or the stream ends.
        """
        while not self._reports:
            self._reports.extend(decode_frame(self.read_frame()))
        return self._reports.popleft()

    def __iter__(self) -> Iterator[Report]:
        """Yield reports indefinitely.

        Iteration continues until the caller breaks the loop or an exception
        propagates out (e.g. ``EOFError`` at end of stream). ``StopIteration``
        is never raised.
        """
        while True:
            yield self.read()
