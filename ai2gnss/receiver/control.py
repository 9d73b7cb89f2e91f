"""Receiver bring-up command sequences.

The receiver is started by writing a fixed list of AI2 commands with a
fixed pause after each one. There is no acknowledgement handshake: the pause
is what gives the receiver time to process a command before the next one
arrives, so the delay must be kept for device compatibility.

Apart from the receiver state command (0x02), the command payloads below are
opaque captures from a working bring-up and are sent as-is.
"""

import logging
import time
from collections.abc import Callable
from enum import IntEnum

from ai2gnss.ai2.encoder import encode_frame, encode_subpackets

logger = logging.getLogger(__name__)

__all__ = [
    "COMMAND_DELAY",
    "ReceiverState",
    "build_init_sequence",
    "build_nmea_enable",
    "build_nmea_output",
    "build_receiver_state",
    "run_init_sequence",
]

COMMAND_DELAY = 0.2  # seconds after each bring-up command

_CLASS_SESSION = 0x00
_CLASS_COMMAND = 0x01

_CMD_RECEIVER_STATE = 0x02
_CMD_NMEA_ENABLE = 0x22


class ReceiverState(IntEnum):
    """Payload of the receiver state command (0x02)."""

    OFF = 0x01
    IDLE = 0x02
    ON = 0x03


# (class, command, payload) sent before either mode
_PREAMBLE: tuple[tuple[int, int, bytes], ...] = (
    (_CLASS_SESSION, 0xF5, b"\x01"),
    (_CLASS_COMMAND, 0xF1, b"\x05"),
)

# Report-mode setup between receiver idle and receiver on
_REPORT_SETUP: tuple[tuple[int, int, bytes], ...] = (
    (_CLASS_COMMAND, 0xED, b"\x00"),
    (_CLASS_COMMAND, 0x06, bytes.fromhex("01 0e 00 00 00 00 01 00 00 00 00 00 00")),
)

# Sub-packets of the combined NMEA output configuration frame
_NMEA_OUTPUT: tuple[tuple[int, bytes], ...] = (
    (0x08, bytes.fromhex("00 01 3c 01 00 01 04 83 03 70 17 a0 0f 07 1e 07 1e 01 00 00 00 00 01 00")),
    (0x06, bytes.fromhex("01 00 00 00 00 ff 01 00 00 01 00 00 00")),
    (0x20, bytes.fromhex("00 00 00 00 57 02 00 00 01")),
    (0xE5, bytes.fromhex("3f 00 00 00")),
    (_CMD_RECEIVER_STATE, bytes([ReceiverState.ON])),
)


def build_receiver_state(state: ReceiverState) -> bytes:
    """Build the command switching the receiver engine off, idle or on."""
    return encode_frame(_CLASS_COMMAND, _CMD_RECEIVER_STATE, bytes([state]))


def build_nmea_output() -> bytes:
    """Build the single frame that configures NMEA output and turns the receiver on."""
    return encode_subpackets(_CLASS_COMMAND, _NMEA_OUTPUT)


def build_nmea_enable() -> bytes:
    return encode_frame(_CLASS_SESSION, _CMD_NMEA_ENABLE, b"\x01")


def build_init_sequence(nmea: bool = False) -> list[bytes]:
    """Return the bring-up frames in transmission order.

    Args:
        nmea: Request NMEA passthrough output instead of binary position and
            measurement reports.
    """
    frames = [encode_frame(*command) for command in _PREAMBLE]
    if nmea:
        frames.append(build_nmea_output())
        frames.append(build_nmea_enable())
        return frames

    frames.append(encode_frame(_CLASS_COMMAND, 0xF0))
    frames.append(build_receiver_state(ReceiverState.IDLE))
    frames.extend(encode_frame(*command) for command in _REPORT_SETUP)
    frames.append(build_receiver_state(ReceiverState.ON))
    return frames


def run_init_sequence(
    write: Callable[[bytes], None],
    nmea: bool = False,
    delay: float = COMMAND_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Write the bring-up sequence, pausing *delay* seconds after each frame.

    Args:
        write: Callable sending bytes to the device, e.g. ``AI2Reader.write``.
        nmea: Request NMEA passthrough output.
        delay: Fixed pause after each frame.
        sleep: Sleep function, replaceable in tests.
    """
    frames = build_init_sequence(nmea)
    for index, frame in enumerate(frames, start=1):
        logger.debug("init %d/%d: %s", index, len(frames), frame.hex(" "))
        write(frame)
        sleep(delay)
    logger.info("sent %d bring-up commands", len(frames))
