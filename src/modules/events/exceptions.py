"""Event domain exceptions.

Raised by the Service Layer when event rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class EventNotFound(Exception):
    """The requested event does not exist."""


class InvalidEventStatus(Exception):
    """A lifecycle transition not allowed from the current status."""


class EventNotEditable(Exception):
    """Only active events can be edited."""


class UnknownProducts(Exception):
    """The event lists product names that are not in the catalog."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Unknown products: {', '.join(names)}")
