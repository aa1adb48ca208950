"""
storefront/services/notifications.py - Cart notification sinks.

CartStore only knows a callable taking a `CartEvent`. How an event is shown is up to the
sink; `message_for` gives the default storefront wording.
"""
import logging
from typing import Callable, Iterable, List

from storefront.schemas.cart import CartEvent

logger = logging.getLogger("storefront.notifications")

Notifier = Callable[[CartEvent], None]


def message_for(event: CartEvent) -> str:
    if event.kind == "item_added":
        return f"{event.name} added to cart"
    if event.kind == "quantity_updated":
        return f"{event.name} quantity updated"
    if event.kind == "item_removed":
        return f"{event.name} removed from cart"
    if event.kind == "cart_cleared":
        return "Cart cleared"
    return f"Only {event.stock} items available in stock"


def log_notifier(event: CartEvent) -> None:
    level = logging.WARNING if event.kind == "stock_exceeded" else logging.INFO
    logger.log(level, "cart %s: %s", event.kind, message_for(event))


def fan_out(*sinks: Notifier) -> Notifier:
    def _notify(event: CartEvent) -> None:
        for sink in sinks:
            sink(event)
    return _notify


class NotificationCollector:
    """Keeps the events of one request so they can be returned to the client."""

    def __init__(self):
        self.events: List[CartEvent] = []

    def __call__(self, event: CartEvent) -> None:
        self.events.append(event)

    def messages(self) -> List[str]:
        return [message_for(e) for e in self.events]

    def kinds(self) -> Iterable[str]:
        return [e.kind for e in self.events]
