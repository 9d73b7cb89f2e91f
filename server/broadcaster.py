"""Fan-out of report messages to WebSocket subscriber queues."""

import asyncio

__all__ = ["ReportBroadcaster", "enqueue_dropping_oldest"]


def enqueue_dropping_oldest(queue: asyncio.Queue[str], message: str) -> None:
    """Put *message* on *queue*, discarding the oldest entry when full."""
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


class ReportBroadcaster:
    """Registry of subscriber queues fed from the reader thread.

    Subscribers are added and removed on the event loop; ``broadcast`` may
    be called from any thread and schedules the enqueue on the loop.
    """

    def __init__(self) -> None:
        self._queues: list[asyncio.Queue[str]] = []

    def __len__(self) -> int:
        return len(self._queues)

    def add(self, queue: asyncio.Queue[str]) -> None:
        self._queues.append(queue)

    def remove(self, queue: asyncio.Queue[str]) -> None:
        self._queues.remove(queue)

    def broadcast(self, message: str, loop: asyncio.AbstractEventLoop) -> None:
        """Dispatch *message* to every subscriber, thread-safely."""
        for queue in list(self._queues):
            loop.call_soon_threadsafe(enqueue_dropping_oldest, queue, message)
