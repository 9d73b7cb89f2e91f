"""Byte channels to the receiver device.

The codec only needs "read some bytes" and "write these bytes". Two
transports provide that:

* ``FileChannel``: a character device such as ``/dev/gnss0`` or
  ``/dev/tigps``, opened read/write with ``os.open`` and polled with
  ``select`` so reads can time out.
* ``SerialChannel``: a UART exposed as a tty, opened with pyserial at a
  given baud rate.

Both return ``None`` from ``read`` when the poll timeout expires without
data. The timeout bounds how long a reader takes to notice ``cancel()``.
"""

import logging
import os
import select

import serial

logger = logging.getLogger(__name__)

__all__ = ["READ_TIMEOUT", "ChannelOpenError", "FileChannel", "SerialChannel", "open_channel"]

READ_TIMEOUT = 2.0  # read poll timeout in seconds; bounds cancel() latency


class ChannelOpenError(ConnectionError):
    """Raised when the receiver device cannot be opened."""


class FileChannel:
    """Read/write access to a character device file descriptor."""

    def __init__(self, fd: int, timeout: float = READ_TIMEOUT) -> None:
        self._fd: int | None = fd
        self._timeout = timeout

    def read(self, size: int) -> bytes | None:
        """Return up to *size* bytes, ``None`` on timeout, ``b""`` at EOF.

        Raises:
            RuntimeError: If the channel has been closed.
        """
        if self._fd is None:
            raise RuntimeError("channel is closed.")
        ready, _, _ = select.select([self._fd], [], [], self._timeout)
        if not ready:
            return None
        return os.read(self._fd, size)

    def write(self, data: bytes) -> None:
        """Write all of *data*, looping over partial writes."""
        if self._fd is None:
            raise RuntimeError("channel is closed.")
        view = memoryview(data)
        while view:
            written = os.write(self._fd, view)
            view = view[written:]

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None


class SerialChannel:
    """Read/write access to a serial port through pyserial."""

    def __init__(self, port: serial.Serial) -> None:
        self._port = port

    def read(self, size: int) -> bytes | None:
        """Return up to *size* bytes, or ``None`` if the read timed out.

        A serial port has no end of stream; a vanished device surfaces as
        ``serial.SerialException`` (an ``OSError``).
        """
        data: bytes = self._port.read(min(size, self._port.in_waiting or 1))
        return data or None

    def write(self, data: bytes) -> None:
        self._port.write(data)
        self._port.flush()

    def close(self) -> None:
        if self._port.is_open:
            self._port.close()


def open_channel(
    path: str,
    baudrate: int | None = None,
    timeout: float = READ_TIMEOUT,
) -> FileChannel | SerialChannel:
    """Open the receiver device at *path*.

    Args:
        path: Device path.
        baudrate: Open as a serial port at this rate; None opens the path as
            a plain character device.
        timeout: Read poll timeout in seconds.

    Raises:
        ChannelOpenError: If the device cannot be opened. There is no retry.
    """
    if baudrate is not None:
        try:
            port = serial.Serial(port=path, baudrate=baudrate, timeout=timeout)
        except serial.SerialException as e:
            raise ChannelOpenError(f"Cannot open {path}: {e}") from e
        logger.info("Opened serial port %s at %d baud", path, baudrate)
        return SerialChannel(port)

    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as e:
        raise ChannelOpenError(f"Cannot open {path}: {e}") from e
    logger.info("Opened device %s", path)
    return FileChannel(fd, timeout)
