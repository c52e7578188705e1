"""Exam record + statistics schemas."""

from pydantic import BaseModel, Field
from typing import List


class RecordCreate(BaseModel):
    subject: str
    task_type: str = ""
    solved: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)


class ExamRecord(BaseModel):
    id: str
    subject: str
    task_type: str = ""
    solved: int = Field(ge=0)
    correct: int = Field(ge=0)


class ActivityPoint(BaseModel):
    date: str
    count: int = Field(ge=0)


class SubjectSummary(BaseModel):
    subject: str
    solved: int
    correct: int
    accuracy: int


class StatsSummary(BaseModel):
    total_solved: int
    total_correct: int
    accuracy: int
    accuracy_band: str
    subjects: List[SubjectSummary] = []
