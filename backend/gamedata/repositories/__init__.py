"""Read-only repositories over the game data tables."""

from .feedback import FeedbackRepository
from .history import HistoryRepository

__all__ = [
    "FeedbackRepository",
    "HistoryRepository",
]
