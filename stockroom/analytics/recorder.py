"""
Analytics: metric recorders

A metric is a named number stamped with the second it was recorded.
MetricRecorder keeps them in memory for the life of the process;
DatabaseMetricRecorder appends them to the metrics table instead.
"""

import logging
import threading
import time
from typing import Callable, Protocol

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..errors import StorageFailure
from ..models import Metric

logger = logging.getLogger(__name__)


class Recorder(Protocol):
    async def track_metric(self, name: str, value: float) -> Metric: ...

    async def get_metrics(self) -> list[Metric]: ...


class MetricRecorder:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._metrics: list[Metric] = []

    async def track_metric(self, name: str, value: float) -> Metric:
        metric = Metric(name=name, value=value, time=int(self._clock()))
        with self._lock:
            self._metrics.append(metric)
        return metric

    async def get_metrics(self) -> list[Metric]:
        with self._lock:
            return list(self._metrics)


class DatabaseMetricRecorder:
    def __init__(
        self,
        sessions: sessionmaker,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sessions = sessions
        self._clock = clock

    async def track_metric(self, name: str, value: float) -> Metric:
        """Write one row. A failed write is logged and the metric returned anyway."""
        metric = Metric(name=name, value=value, time=int(self._clock()))
        async with self._sessions() as session:
            try:
                await session.execute(
                    text("INSERT INTO metrics (name, value, time) VALUES (:name, :value, :time)"),
                    metric.model_dump(),
                )
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Failed to record metric %s", name)
        return metric

    async def get_metrics(self) -> list[Metric]:
        async with self._sessions() as session:
            try:
                result = await session.execute(
                    text("SELECT name, value, time FROM metrics ORDER BY id"),
                )
                rows = result.fetchall()
            except SQLAlchemyError as exc:
                raise StorageFailure("could not fetch metrics") from exc
        return [Metric(name=row.name, value=row.value, time=row.time) for row in rows]


def build_recorder(backend: str, sessions: sessionmaker) -> Recorder:
    logger.info("Recording metrics in %s backend", backend)
    if backend == "memory":
        return MetricRecorder()
    if backend == "database":
        return DatabaseMetricRecorder(sessions)
    raise ValueError(f"unknown metrics backend: {backend!r}")
