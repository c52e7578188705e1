"""Storage contract shared by every persistence backend."""

from abc import ABC, abstractmethod
from typing import List

from stats.schemas import ActivityPoint, ExamRecord


class StorageError(Exception):
    """A load or save could not be completed."""


class NotFound(StorageError):
    """Nothing stored for the requested day."""


class Storage(ABC):
    @abstractmethod
    def load_note(self, day_date: str) -> str:
        """Note content for the day. May raise NotFound."""

    @abstractmethod
    def save_note(self, day_date: str, content: str) -> None:
        ...

    @abstractmethod
    def load_stats(self, day_date: str) -> List[ExamRecord]:
        """Records for the day in insertion order (empty if none)."""

    @abstractmethod
    def save_stats(self, day_date: str, records: List[ExamRecord]) -> None:
        """Replace the whole record list for the day."""

    @abstractmethod
    def get_activity_log(self) -> List[ActivityPoint]:
        """Total solved per day, only for days with any activity."""
