import logging

import pytest
from sqlalchemy import text

from stockroom.analytics import DatabaseMetricRecorder, MetricRecorder, build_recorder
from stockroom.models import Metric

pytestmark = pytest.mark.anyio


class FakeClock:
    def __init__(self, start=1_700_000_000.7):
        self.now = start

    def __call__(self):
        return self.now


class TestMetricRecorder:
    async def test_empty(self):
        assert await MetricRecorder().get_metrics() == []

    async def test_metrics_come_back_in_insertion_order(self):
        clock = FakeClock()
        recorder = MetricRecorder(clock=clock)

        await recorder.track_metric("orders_created", 1)
        clock.now += 5
        await recorder.track_metric("order_total", 7.5)
        await recorder.track_metric("orders_created", 1)

        assert await recorder.get_metrics() == [
            Metric(name="orders_created", value=1.0, time=1_700_000_000),
            Metric(name="order_total", value=7.5, time=1_700_000_005),
            Metric(name="orders_created", value=1.0, time=1_700_000_005),
        ]

    async def test_returned_list_is_a_snapshot(self):
        recorder = MetricRecorder()
        await recorder.track_metric("a", 1)

        snapshot = await recorder.get_metrics()
        await recorder.track_metric("b", 2)

        assert [m.name for m in snapshot] == ["a"]

    async def test_any_value_is_accepted(self):
        recorder = MetricRecorder()

        metric = await recorder.track_metric("", -3.25)

        assert metric.value == -3.25


class TestDatabaseMetricRecorder:
    async def test_empty(self, sessions):
        assert await DatabaseMetricRecorder(sessions).get_metrics() == []

    async def test_metrics_are_persisted(self, sessions):
        clock = FakeClock(1_700_000_000)
        await DatabaseMetricRecorder(sessions, clock=clock).track_metric("order_total", 7.5)
        clock.now += 60
        await DatabaseMetricRecorder(sessions, clock=clock).track_metric("orders_created", 1)

        # a fresh recorder reads what the first one wrote
        assert await DatabaseMetricRecorder(sessions).get_metrics() == [
            Metric(name="order_total", value=7.5, time=1_700_000_000),
            Metric(name="orders_created", value=1.0, time=1_700_000_060),
        ]

    async def test_failed_write_is_logged_not_raised(self, engine, sessions, caplog):
        async with engine.begin() as conn:
            await conn.execute(text("DROP TABLE metrics"))
        recorder = DatabaseMetricRecorder(sessions, clock=FakeClock(1_700_000_000))

        with caplog.at_level(logging.ERROR, logger="stockroom.analytics.recorder"):
            metric = await recorder.track_metric("orders_created", 1)

        assert metric == Metric(name="orders_created", value=1.0, time=1_700_000_000)
        assert "Failed to record metric orders_created" in caplog.text


class TestBuildRecorder:
    sessions = object()

    def test_memory(self):
        assert isinstance(build_recorder("memory", self.sessions), MetricRecorder)

    def test_database(self):
        assert isinstance(build_recorder("database", self.sessions), DatabaseMetricRecorder)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_recorder("prometheus", self.sessions)
