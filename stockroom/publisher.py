"""
Stockroom: Redis Pub/Sub publisher

Events go out only after the database commit that produced them. Pub/Sub
is fire-and-forget: subscribers that are down miss the message, and a
failed publish never undoes the committed change.
"""

import json
import logging

import redis.asyncio as aioredis
from pydantic import BaseModel
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class EventPublisher:
    def __init__(self, redis: aioredis.Redis | None) -> None:
        self.redis = redis

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    async def publish(self, channel: str, event: BaseModel) -> None:
        if self.redis is None:
            return
        message = json.dumps(
            {
                "event_type": type(event).__name__,
                "data": event.model_dump(mode="json"),
            },
            default=str,
        )
        try:
            await self.redis.publish(channel, message)
        except RedisError:
            logger.exception("Failed to publish %s on %s", type(event).__name__, channel)
