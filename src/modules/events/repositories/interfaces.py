"""Event repository interface."""

from __future__ import annotations

from modules.core.repositories.interfaces import IRepository


class IEventRepository(IRepository["Event"]):
    """Repository contract for the Event aggregate.

    ``get_for_update`` is what the order intake transaction uses to read
    the event: a concurrent close/cancel waits for the order (or the
    order sees the new status).
    """
