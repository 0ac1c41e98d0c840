"""Notifier that records product events in the application log.

Stands in for a websocket broadcast when no live channel is wired up.
"""

from __future__ import annotations

from typing import Any

import structlog

from storefront.application.notifier import ProductNotifier

logger = structlog.get_logger(__name__)


class LoggingNotifier(ProductNotifier):

    def publish(self, event: str, payload: Any) -> None:
        if isinstance(payload, list):
            logger.info("product_event", notification=event, count=len(payload))
        else:
            logger.info("product_event", notification=event, payload=payload)
