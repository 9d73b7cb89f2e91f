"""Background receiver loops run on executor threads."""

import asyncio
import logging

from ai2gnss.config import ReaderConfig
from ai2gnss.receiver.control import run_init_sequence
from ai2gnss.receiver.reader import AI2Reader
from server.broadcaster import ReportBroadcaster
from server.formatters import format_report_message

logger = logging.getLogger(__name__)

__all__ = ["run_init", "run_report_loop"]


def run_report_loop(
    loop: asyncio.AbstractEventLoop,
    reader: AI2Reader,
    broadcaster: ReportBroadcaster,
) -> None:
    """Read reports continuously and broadcast them on the event loop.

    The caller owns *reader* and must use it as an open context manager. The
    loop exits when ``reader.cancel()`` is called or the device stream ends,
    both of which make ``AI2Reader.read()`` raise ``EOFError``.

    Args:
        loop: Running asyncio event loop to broadcast messages on.
        reader: An open ``AI2Reader`` managed by the caller.
        broadcaster: Subscriber registry receiving each JSON message.
    """
    try:
        for report in reader:
            broadcaster.broadcast(format_report_message(report), loop)
    except EOFError as e:
        logger.info("report loop stopped: %s", e)


def run_init(reader: AI2Reader, config: ReaderConfig) -> None:
    """Send the bring-up sequence if the configuration asks for it."""
    if not config.send_init:
        return
    run_init_sequence(reader.write, delay=config.command_delay)
