# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .timer_repository import TimerRepository

__all__ = [
    "BaseRepository",
    "TimerRepository",
]
