"""Command line entry point: read and print reports from an AI2 receiver.

Usage::

    ai2gnss-read /dev/gnss0            # bring up receiver, print reports
    ai2gnss-read /dev/gnss0 nmea       # request NMEA, NMEA on stdout
    ai2gnss-read /dev/gnss0 noinit     # do not send bring-up commands
    ai2gnss-read /dev/gnss0 noprocess  # no commands, raw sub-packet dump

The reader runs on its own thread from the moment the device is open, so
replies to the bring-up commands are not missed. The main thread writes the
commands, then consumes frames until the device stream ends.
"""

import argparse
import logging
import sys

from ai2gnss.config import MODE_ARGUMENTS, OutputMode, ReaderConfig
from ai2gnss.receiver.channel import ChannelOpenError
from ai2gnss.receiver.control import run_init_sequence
from ai2gnss.receiver.reader import AI2Reader
from ai2gnss.receiver.worker import FrameWorker
from ai2gnss.sink import ReportSink

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai2gnss-read",
        description="Read positions and measurements from a TI AI2 GNSS receiver",
    )
    parser.add_argument("device", help="Receiver device, e.g. /dev/gnss0 or /dev/tigps")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=MODE_ARGUMENTS,
        help="nmea: NMEA output; noinit: skip bring-up; noprocess: raw dump",
    )
    parser.add_argument(
        "-b",
        "--baudrate",
        type=int,
        default=None,
        help="Open DEVICE as a serial port at this baud rate",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def run(reader: AI2Reader, config: ReaderConfig, sink: ReportSink) -> None:
    """Start the reader thread, send bring-up commands, and print frames."""
    worker = FrameWorker(reader)
    worker.start()
    try:
        if config.send_init:
            run_init_sequence(
                reader.write,
                nmea=config.mode is OutputMode.NMEA,
                delay=config.command_delay,
            )
        for frame in worker:
            sink.emit_frame(frame)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        worker.stop()
        worker.join()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ai2gnss-read command."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ReaderConfig.from_mode_argument(args.device, args.mode, args.baudrate)
    sink = ReportSink(config.mode)

    try:
        with AI2Reader(config.device, baudrate=config.baudrate) as reader:
            run(reader, config, sink)
    except ChannelOpenError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
