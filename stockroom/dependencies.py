"""
Stockroom: request-scoped dependencies

The lifespan in main.py puts the session factory, the event publisher and
the metric recorder on app.state; routes reach them through these.
"""

from typing import TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel

from .analytics import Recorder
from .publisher import EventPublisher

M = TypeVar("M", bound=BaseModel)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def get_session(request: Request):
    async with request.app.state.sessions() as session:
        yield session


def get_publisher(request: Request) -> EventPublisher:
    return request.app.state.publisher


def get_recorder(request: Request) -> Recorder:
    return request.app.state.metrics


async def decode_body(request: Request, model: type[M]) -> M:
    """
    Build model from either an HTML form post or a JSON body.

    Form values arrive as strings; pydantic's lax mode turns "3" into 3.
    """
    try:
        if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
            form = await request.form()
            data = dict(form)
        else:
            data = await request.json()
        return model.model_validate(data)
    except ValueError as exc:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        raise HTTPException(status_code=400, detail="Invalid request body") from exc
