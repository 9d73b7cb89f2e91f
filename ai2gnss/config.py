"""Run configuration for the AI2 reader.

The configuration is built once at startup and passed explicitly to the
reader, the control-sequence driver and the report sink. It is frozen;
nothing in the codec changes it while running.
"""

from dataclasses import dataclass
from enum import Enum

from ai2gnss.receiver.control import COMMAND_DELAY

__all__ = ["MODE_ARGUMENTS", "OutputMode", "ReaderConfig"]


# Optional positional mode argument of the command line tool
_MODE_NMEA = "nmea"
_MODE_NOINIT = "noinit"
_MODE_NOPROCESS = "noprocess"
MODE_ARGUMENTS = (_MODE_NMEA, _MODE_NOINIT, _MODE_NOPROCESS)


class OutputMode(Enum):
    """How decoded data is rendered.

    TEXT: human-readable report lines on stdout.
    NMEA: NMEA passthrough text on stdout, everything else on stderr.
    RAW: sub-packets dumped as hex without decoding.
    """

    TEXT = "text"
    NMEA = "nmea"
    RAW = "raw"


@dataclass(frozen=True)
class ReaderConfig:
    """Immutable settings for one reader session.

    Attributes:
        device: Path of the receiver device (e.g. ``/dev/gnss0``).
        mode: Output rendering mode.
        send_init: Whether to write the bring-up command sequence.
        baudrate: Open the device as a serial port at this rate. None opens
            it as a plain character device.
        command_delay: Fixed pause in seconds after each bring-up command.
    """

    device: str
    mode: OutputMode = OutputMode.TEXT
    send_init: bool = True
    baudrate: int | None = None
    command_delay: float = COMMAND_DELAY

    @classmethod
    def from_mode_argument(
        cls,
        device: str,
        mode_argument: str | None = None,
        baudrate: int | None = None,
    ) -> "ReaderConfig":
        """Build a configuration from the tool's optional mode word.

        ``nmea`` switches to NMEA output and requests NMEA from the receiver,
        ``noinit`` skips the bring-up sequence, and ``noprocess`` dumps raw
        sub-packets without sending any command.

        Raises:
            ValueError: If *mode_argument* is not one of ``MODE_ARGUMENTS``.
        """
        if mode_argument is None:
            return cls(device=device, baudrate=baudrate)
        if mode_argument == _MODE_NMEA:
            return cls(device=device, mode=OutputMode.NMEA, baudrate=baudrate)
        if mode_argument == _MODE_NOINIT:
            return cls(device=device, send_init=False, baudrate=baudrate)
        if mode_argument == _MODE_NOPROCESS:
            return cls(
                device=device,
                mode=OutputMode.RAW,
                send_init=False,
                baudrate=baudrate,
            )
        raise ValueError(
            f"Unknown mode '{mode_argument}'. Valid: {list(MODE_ARGUMENTS)}"
        )
