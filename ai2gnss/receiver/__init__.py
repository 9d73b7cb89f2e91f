"""Receiver collaborators: device channel, reader, worker thread, bring-up commands."""

from ai2gnss.receiver.channel import ChannelOpenError, open_channel
from ai2gnss.receiver.control import (
    ReceiverState,
    build_init_sequence,
    build_receiver_state,
    run_init_sequence,
)
from ai2gnss.receiver.reader import AI2Reader
from ai2gnss.receiver.worker import FrameWorker

__all__ = [
    "AI2Reader",
    "ChannelOpenError",
    "FrameWorker",
    "ReceiverState",
    "build_init_sequence",
    "build_receiver_state",
    "open_channel",
    "run_init_sequence",
]
