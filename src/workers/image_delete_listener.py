"""Long-running subscriber that deletes images on request from the message bus.

Messages arrive on the ``asset.image.delete`` Redis channel as JSON
``{"client_id": "...", "images": ["...", ...]}``. Each one is passed to the
same ``DeleteService`` the HTTP handler uses; the outcome is only logged.
The bus is trusted, so no token is checked here.

Run with ``python -m workers.image_delete_listener`` (``src`` on the path).
"""

from __future__ import annotations

import signal
from types import FrameType

import redis
from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.infrastructure.adapters.redis_adapter import connect_with_retry
from core.models.image import DeleteResult
from core.utils.constants import IMAGE_DELETE_CHANNEL
from handlers.delete_images.service import DeleteService

logger = Logger(service="image-delete-listener", UTC=True)

POLL_TIMEOUT_SECONDS = 1.0


class ImageDeleteMessage(BaseModel):
    """Payload published on the delete channel."""

    client_id: str = Field(..., description="Tenant owning the images")
    images: list[str] = Field(default_factory=list, description="Filenames to delete")


def handle_message(service: DeleteService, data: str | bytes) -> DeleteResult | None:
    """Decode one message and run the deletion.

    Returns ``None`` when the payload is malformed; such messages are skipped.
    """
    try:
        message = ImageDeleteMessage.model_validate_json(data)
    except PydanticValidationError as exc:
        logger.warning(
            "Skipping malformed delete message",
            extra={"errors": [err["msg"] for err in exc.errors()]},
        )
        return None

    result = service.delete_images(message.client_id, message.images)

    logger.info(
        "Processed delete message",
        extra={
            "client_id": result.client_id,
            "deleted": result.deleted,
            "failed": result.failed,
        },
    )
    return result


class ImageDeleteListener:
    """Consumes the delete channel one message at a time until stopped."""

    def __init__(
        self,
        client: redis.Redis,
        service: DeleteService,
        *,
        channel: str = IMAGE_DELETE_CHANNEL,
        poll_timeout: float = POLL_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.service = service
        self.channel = channel
        self.poll_timeout = poll_timeout
        self._running = False

    def stop(self, signum: int | None = None, frame: FrameType | None = None) -> None:
        """Ask the loop to exit after the message in progress."""
        logger.info("Stopping delete listener", extra={"signal": signum})
        self._running = False

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self.stop)
        signal.signal(signal.SIGINT, self.stop)

    def _subscribe(self) -> redis.client.PubSub:
        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(self.channel)
        logger.info("Subscribed to delete channel", extra={"channel": self.channel})
        return pubsub

    def _resubscribe(self, pubsub: redis.client.PubSub) -> redis.client.PubSub:
        """Drop the broken subscription and subscribe again once Redis answers.

        Raises:
            redis.ConnectionError: If Redis stays unreachable after every retry
        """
        pubsub.close()
        connect_with_retry(self.client)
        return self._subscribe()

    def run(self) -> None:
        pubsub = self._subscribe()
        self._running = True

        try:
            while self._running:
                try:
                    message = pubsub.get_message(timeout=self.poll_timeout)
                except (redis.ConnectionError, redis.TimeoutError) as exc:
                    logger.warning("Lost connection to message bus", extra={"error": str(exc)})
                    pubsub = self._resubscribe(pubsub)
                    continue

                if message is None or message.get("type") != "message":
                    continue

                try:
                    handle_message(self.service, message["data"])
                except Exception:
                    logger.exception("Delete message handling failed")
        finally:
            pubsub.close()
            logger.info("Delete listener stopped")


def main() -> None:
    config = ServiceConfig.from_env()
    client = connect_with_retry(redis.Redis.from_url(config.message_bus_url, decode_responses=True))

    listener = ImageDeleteListener(client, DeleteService.from_config(config))
    listener.install_signal_handlers()
    listener.run()


if __name__ == "__main__":
    main()
