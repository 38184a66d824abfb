"""Event repositories package."""

from modules.events.repositories.django_repository import EventDjangoRepository
from modules.events.repositories.interfaces import IEventRepository

__all__ = ["EventDjangoRepository", "IEventRepository"]
