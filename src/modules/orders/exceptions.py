"""Order domain exceptions.

``OrderIntakeError`` subclasses are raised inside the order placement
transaction; their message is returned verbatim to the customer, so it
must stay short and human-readable.  The others back the seller/driver
endpoints and are translated by the views into ``{"detail": ...}``.
"""

from __future__ import annotations


class OrderIntakeError(Exception):
    """A customer order was rejected; ``str(exc)`` is the client message."""


class EventNotFound(OrderIntakeError):
    def __init__(self) -> None:
        super().__init__("Event not found")


class EventNotActive(OrderIntakeError):
    def __init__(self) -> None:
        super().__init__("Event is not active")


class ProductNotFound(OrderIntakeError):
    """No live product has the requested display name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Product not found: {name}")


class ProductMissing(OrderIntakeError):
    """The product disappeared between name resolution and locking."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Product missing: {name}")


class InsufficientStock(OrderIntakeError):
    def __init__(self, name: str, left: int) -> None:
        self.name = name
        self.left = left
        super().__init__(f'Insufficient stock for "{name}". Left: {left}')


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidOrderStatus(Exception):
    """A status transition not allowed by the state machine."""
