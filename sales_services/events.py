"""
SaleEventBus -- explicit publish/subscribe channel for the sale form.

Responsibility:
    Lets the form layer react to sale draft changes (new totals, a rejected
    discount code) without the draft knowing anything about screens.

Architecture position:
    Services -- in-process only. A bus is injected into each SaleDraft;
    there is no global instance.

Invariants enforced:
    - Handlers run synchronously, in subscription order, on the publishing
      thread.
    - A handler that raises is logged and re-raised; later handlers for
      that publish are not called.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sales_kernel.logging_config import get_logger

logger = get_logger("services.events")

TOTALS_CHANGED = "totals_changed"
DISCOUNT_CODE_REJECTED = "discount_code_rejected"

Handler = Callable[[Any], None]


class SaleEventBus:
    """In-process topic -> handlers registry."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for a topic.

        Returns a callable that removes this subscription.
        """
        self._handlers.setdefault(topic, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, topic: str, payload: Any = None) -> int:
        """Deliver payload to every handler of topic. Returns the handler count."""
        handlers = list(self._handlers.get(topic, ()))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception("sale_event_handler_failed", extra={
                    "topic": topic,
                    "handler": getattr(handler, "__qualname__", repr(handler)),
                })
                raise
        return len(handlers)

    def handler_count(self, topic: str) -> int:
        return len(self._handlers.get(topic, ()))
