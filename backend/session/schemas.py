"""Session schemas."""

from pydantic import BaseModel
from typing import List, Optional

from activity.heatmap import HeatmapCell
from stats.schemas import ExamRecord, StatsSummary


class DateSelect(BaseModel):
    date: str


class NoteUpdate(BaseModel):
    content: str


class RecordView(ExamRecord):
    """A record plus its correct/solved ratio and display band."""
    ratio: Optional[float] = None
    band: str


class SessionResponse(BaseModel):
    date: str
    records: List[RecordView]
    summary: StatsSummary
    note: str
    subjects: List[str]


class RecordAddResponse(BaseModel):
    added: bool
    record: Optional[ExamRecord] = None
    summary: StatsSummary


class RecordRemoveResponse(BaseModel):
    removed: bool
    summary: StatsSummary


class HeatmapResponse(BaseModel):
    today: str
    cells: List[HeatmapCell]
    weeks: List[List[HeatmapCell]]
