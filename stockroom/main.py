"""
Stockroom: FastAPI entry point

Products, stock levels, orders and metrics behind one HTTP service.
Database engine, Redis client and metric recorder are created in the
lifespan and closed again on shutdown.

    uvicorn stockroom.main:app        # or the `stockroom` console script
"""

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from . import database, inventory, order, pages
from .analytics import Recorder, build_recorder
from .config import Settings, configure_logging
from .dependencies import decode_body, get_publisher, get_recorder, get_session
from .errors import DuplicateKey, InsufficientStock, NotFound, StockroomError, StorageFailure
from .models import Metric, NewProduct, Order, OrderCandidate, Product
from .publisher import EventPublisher

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    NotFound: 404,
    DuplicateKey: 409,
    InsufficientStock: 409,
    StorageFailure: 500,
}


# ── Request / Response Models ────────────────────

class StockAdjustment(BaseModel):
    delta: int


class StockLevel(BaseModel):
    product_id: str
    stock: int


class StatusUpdate(BaseModel):
    status: str


class MetricRequest(BaseModel):
    name: str
    value: float


router = APIRouter()


# ── Inventory Endpoints ──────────────────────────

@router.post("/add-product", status_code=201)
async def add_product(
    request: Request,
    session: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
    recorder: Recorder = Depends(get_recorder),
):
    """Register a product from a form post or a JSON body."""
    product = await decode_body(request, NewProduct)
    await inventory.add_product(session, publisher, product)
    await recorder.track_metric("products_added", 1.0)
    return {"message": "Product added successfully"}


@router.get("/products", response_model=list[Product])
async def list_products(session: AsyncSession = Depends(get_session)):
    return await inventory.list_products(session)


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str, session: AsyncSession = Depends(get_session)):
    return await inventory.get_product(session, product_id)


@router.get("/products/{product_id}/stock", response_model=StockLevel)
async def get_stock(product_id: str, session: AsyncSession = Depends(get_session)):
    stock = await inventory.get_stock(session, product_id)
    return StockLevel(product_id=product_id, stock=stock)


@router.post("/products/{product_id}/stock", response_model=StockLevel)
async def adjust_stock(
    product_id: str,
    req: StockAdjustment,
    session: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Restock (positive delta) or correct (negative delta) without a floor."""
    stock = await inventory.adjust_stock(session, publisher, product_id, req.delta)
    return StockLevel(product_id=product_id, stock=stock)


# ── Order Endpoints ──────────────────────────────

@router.post("/create-order", status_code=201, response_model=Order)
async def create_order(
    request: Request,
    session: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
    recorder: Recorder = Depends(get_recorder),
):
    """Place an order from a form post or a JSON body."""
    candidate = await decode_body(request, OrderCandidate)
    created = await order.create_order(session, publisher, candidate)
    await recorder.track_metric("orders_created", 1.0)
    await recorder.track_metric("order_total", float(created.total))
    return created


@router.get("/orders", response_model=list[Order])
async def list_orders(session: AsyncSession = Depends(get_session)):
    return await order.list_orders(session)


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(order_id: int, session: AsyncSession = Depends(get_session)):
    return await order.get_order(session, order_id)


@router.put("/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: int,
    req: StatusUpdate,
    session: AsyncSession = Depends(get_session),
    publisher: EventPublisher = Depends(get_publisher),
):
    return await order.update_order_status(session, publisher, order_id, req.status)


# ── Metric Endpoints ─────────────────────────────

@router.post("/metrics", status_code=201, response_model=Metric)
async def track_metric(req: MetricRequest, recorder: Recorder = Depends(get_recorder)):
    return await recorder.track_metric(req.name, req.value)


@router.get("/metrics", response_model=list[Metric])
async def get_metrics(recorder: Recorder = Depends(get_recorder)):
    return await recorder.get_metrics()


@router.get("/health")
async def health():
    return {"status": "ok", "service": "stockroom"}


async def _domain_error(request: Request, exc: StockroomError) -> JSONResponse:
    status = next(
        (code for kind, code in _ERROR_STATUS.items() if isinstance(exc, kind)),
        500,
    )
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        engine = database.create_engine(settings.database_url)
        redis = (
            aioredis.from_url(settings.redis_url, decode_responses=True)
            if settings.redis_url
            else None
        )
        try:
            await database.create_schema(engine)
            sessions = database.session_factory(engine)
            app.state.sessions = sessions
            app.state.publisher = EventPublisher(redis)
            app.state.metrics = build_recorder(settings.metrics_backend, sessions)
            yield
        finally:
            if redis is not None:
                await redis.aclose()
            await engine.dispose()

    app = FastAPI(title="Stockroom", lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(StockroomError, _domain_error)
    app.include_router(router)
    app.include_router(pages.router)
    return app


app = create_app()


def run() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
