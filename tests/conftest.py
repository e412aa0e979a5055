import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from stockroom import database, inventory
from stockroom.config import Settings
from stockroom.main import create_app
from stockroom.models import Product
from stockroom.publisher import EventPublisher


class RecordingRedis:
    """Stands in for redis.asyncio.Redis and keeps every published message."""

    def __init__(self):
        self.published = []

    async def publish(self, channel, message):
        self.published.append((channel, json.loads(message)))
        return 1

    def events(self, channel):
        return [m["event_type"] for c, m in self.published if c == channel]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database_path(tmp_path):
    return tmp_path / "stockroom.db"


@pytest.fixture
def database_url(database_path):
    return f"sqlite+aiosqlite:///{database_path}"


@pytest.fixture
async def engine(database_url, anyio_backend):
    engine = database.create_engine(database_url)
    await database.create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessions(engine):
    return database.session_factory(engine)


@pytest.fixture
async def session(sessions, anyio_backend):
    async with sessions() as session:
        yield session


@pytest.fixture
def redis():
    return RecordingRedis()


@pytest.fixture
def publisher(redis):
    return EventPublisher(redis)


@pytest.fixture
def add_product(session, publisher):
    async def _add(product_id="widget", name="Widget", stock=10, price="2.50"):
        return await inventory.add_product(
            session,
            publisher,
            Product(id=product_id, name=name, stock=stock, price=Decimal(price)),
        )

    return _add


@pytest.fixture
def client(database_url):
    app = create_app(Settings(database_url=database_url))
    with TestClient(app) as client:
        yield client
