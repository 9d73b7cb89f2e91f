"""Background reader thread handing frames to the consumer through a queue."""

import contextlib
import logging
import queue
import threading
from collections.abc import Iterator

from ai2gnss.ai2.types import Frame
from ai2gnss.receiver.reader import AI2Reader

logger = logging.getLogger(__name__)

__all__ = ["FrameWorker"]

_QUEUE_MAX_SIZE = 256
_PUT_TIMEOUT = 0.1  # seconds; bounds how long a full queue delays stop()


class FrameWorker:
    """Run ``reader.read_frame()`` on a dedicated thread.

    Frames are put on a bounded queue and consumed by iterating the worker.
    Iteration ends when the device stream ends or ``stop()`` is called. Any
    other exception raised by the reader is re-raised in the consuming
    thread once the queued frames are drained.

    Example::

        with AI2Reader(device) as receiver:
            worker = FrameWorker(receiver)
            worker.start()
            run_init_sequence(receiver.write)
            for frame in worker:
                sink.emit_frame(frame)
    """

    def __init__(self, reader: AI2Reader, maxsize: int = _QUEUE_MAX_SIZE) -> None:
        self._reader = reader
        self._queue: queue.Queue[Frame | None] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None
        self._stopped = threading.Event()

    def start(self) -> None:
        """Start the reader thread.

        Raises:
            RuntimeError: If the worker was already started.
        """
        if self._thread is not None:
            raise RuntimeError("FrameWorker already started.")
        self._thread = threading.Thread(
            target=self._run, name="ai2-reader", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the reader to stop; iteration ends after queued frames.

        Safe to call while the queue is full and nobody consumes it: the
        thread gives up pending puts, and the oldest queued frame makes room
        for the end marker if needed.
        """
        self._stopped.set()
        self._reader.cancel()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _put(self, item: Frame | None) -> bool:
        """Block on a full queue until there is room or ``stop()`` is called."""
        while not self._stopped.is_set():
            try:
                self._queue.put(item, timeout=_PUT_TIMEOUT)
            except queue.Full:
                continue
            return True
        return False

    def _put_end(self) -> None:
        if self._put(None):
            return
        while True:
            try:
                self._queue.put_nowait(None)
                return
            except queue.Full:
                with contextlib.suppress(queue.Empty):
                    self._queue.get_nowait()

    def _run(self) -> None:
        try:
            for frame in self._reader.frames():
                if not self._put(frame):
                    break
        except EOFError as e:
            logger.info("reader stopped: %s", e)
        except Exception as e:  # handed to the consumer thread
            self._error = e
        finally:
            self._put_end()

    def __iter__(self) -> Iterator[Frame]:
        """Yield frames until the reader thread finishes.

        Raises:
            Exception: Whatever unexpected error ended the reader thread.
        """
        while True:
            frame = self._queue.get()
            if frame is None:
                break
            yield frame
        if self._error is not None:
            raise self._error
