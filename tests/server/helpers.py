"""Reader stand-in and report factories for server tests."""

import queue
from collections.abc import Iterator

from ai2gnss.ai2.types import (
    AsyncEvent,
    AsyncEventReport,
    MeasurementReport,
    PositionReport,
    Report,
    SatelliteMeasurement,
)


class ControlledReader:
    """Replaces ``AI2Reader``; tests push reports, ``None`` ends the stream."""

    def __init__(self) -> None:
        self.message_queue: queue.Queue[Report | None] = queue.Queue()
        self.written: list[bytes] = []

    def __enter__(self) -> "ControlledReader":
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def cancel(self) -> None:
        self.message_queue.put(None)

    def write(self, data: bytes) -> None:
        self.written.append(data)

    def __iter__(self) -> Iterator[Report]:
        while True:
            item = self.message_queue.get()
            if item is None:
                raise EOFError("AI2 read cancelled.")
            yield item


def make_position(extended: bool = False) -> PositionReport:
    return PositionReport(
        fcount=1234,
        latitude_degrees=45.0,
        longitude_degrees=9.0,
        altitude_meters=None if extended else 100.5,
        satellite_ids=[5, 12],
        extended=extended,
    )


def make_measurement() -> MeasurementReport:
    return MeasurementReport(
        fcount=500,
        satellites=[SatelliteMeasurement(sv_id=5, snr=45.5, cno=38.0)],
    )


def make_engine_idle() -> AsyncEventReport:
    return AsyncEventReport(event=AsyncEvent.ENGINE_IDLE, code=0x07)
