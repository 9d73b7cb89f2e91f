"""FastAPI WebSocket server streaming decoded AI2 reports.

Start with::

    AI2GNSS_DEVICE=/dev/gnss0 uvicorn server.main:app --host 0.0.0.0 --port 8000

WebSocket clients connect to ``ws://<host>:8000/ws`` and receive one JSON
message per decoded report, discriminated by its ``type`` field
(``position``, ``measurement``, ``nmea``, ``async_event``, ``error``,
``unknown``, ``truncated``, ``ack``).

Environment:
    AI2GNSS_DEVICE: receiver device path (default ``/dev/gnss0``).
    AI2GNSS_BAUDRATE: open the device as a serial port at this rate.
    AI2GNSS_NOINIT: if set, do not send the bring-up command sequence.
"""

import asyncio
import os
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from ai2gnss.config import ReaderConfig
from ai2gnss.receiver.reader import AI2Reader
from server.broadcaster import ReportBroadcaster
from server.sensors import run_init, run_report_loop

_DEVICE = "/dev/gnss0"
_QUEUE_MAX_SIZE = 10
_TIMEOUT_SECONDS = 5.0

_broadcaster = ReportBroadcaster()


def _config_from_env() -> ReaderConfig:
    baudrate = os.environ.get("AI2GNSS_BAUDRATE")
    return ReaderConfig(
        device=os.environ.get("AI2GNSS_DEVICE", _DEVICE),
        send_init="AI2GNSS_NOINIT" not in os.environ,
        baudrate=int(baudrate) if baudrate else None,
    )


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=_TIMEOUT_SECONDS)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        pass


@asynccontextmanager
async def _lifespan(_application: FastAPI) -> AsyncIterator[None]:
    config = _config_from_env()
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=2)
    with AI2Reader(config.device, baudrate=config.baudrate) as reader:
        loop.run_in_executor(executor, run_report_loop, loop, reader, _broadcaster)
        loop.run_in_executor(executor, run_init, reader, config)
        yield
        reader.cancel()
        executor.shutdown(wait=True)


app = FastAPI(lifespan=_lifespan)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream report JSON messages to a connected WebSocket client.

    Each client gets its own bounded queue (max ``_QUEUE_MAX_SIZE`` messages).
    The oldest message is dropped when the queue is full so a slow client
    does not stall the reader thread. The connection closes with code 1001,
    and the client should reconnect, if no report arrives within
    ``_TIMEOUT_SECONDS``.

    Args:
        websocket: The incoming WebSocket connection.
    """
    queue: asyncio.Queue[str] = asyncio.Queue(maxsize=_QUEUE_MAX_SIZE)
    # subscribe before accepting so no report is missed after the handshake
    _broadcaster.add(queue)
    try:
        await websocket.accept()
        await _send_messages_until_disconnect(queue, websocket)
    finally:
        _broadcaster.remove(queue)
