"""Pure aggregation over a day's exam records: totals, accuracy, per-subject."""

from __future__ import annotations

from typing import Iterable, Sequence

from stats.schemas import ExamRecord, StatsSummary, SubjectSummary

GOOD_ACCURACY = 70
FAIR_ACCURACY = 40
GOOD_RECORD_RATIO = 0.7


def accuracy_percent(correct: int, solved: int) -> int:
    """round(100 * correct / solved), halves rounded up; 0 when nothing solved.

    Integer arithmetic so that exact .5 ratios never drift.
    """
    if solved <= 0:
        return 0
    return (200 * correct + solved) // (2 * solved)


def accuracy_band(accuracy: int) -> str:
    if accuracy >= GOOD_ACCURACY:
        return "good"
    if accuracy >= FAIR_ACCURACY:
        return "fair"
    return "poor"


def record_ratio(record: ExamRecord) -> float | None:
    """correct/solved for a single record, None when solved is 0."""
    if record.solved == 0:
        return None
    return record.correct / record.solved


def record_band(record: ExamRecord) -> str:
    ratio = record_ratio(record)
    if ratio is not None and ratio >= GOOD_RECORD_RATIO:
        return "good"
    return "fair"


def totals(records: Iterable[ExamRecord]) -> tuple[int, int]:
    solved = 0
    correct = 0
    for r in records:
        solved += r.solved
        correct += r.correct
    return solved, correct


def by_subject(records: Sequence[ExamRecord]) -> list[SubjectSummary]:
    """Group by subject in first-seen order."""
    groups: dict[str, list[ExamRecord]] = {}
    for r in records:
        groups.setdefault(r.subject, []).append(r)

    result = []
    for subject, subject_records in groups.items():
        solved, correct = totals(subject_records)
        result.append(SubjectSummary(
            subject=subject,
            solved=solved,
            correct=correct,
            accuracy=accuracy_percent(correct, solved),
        ))
    return result


def summarize(records: Sequence[ExamRecord]) -> StatsSummary:
    solved, correct = totals(records)
    accuracy = accuracy_percent(correct, solved)
    return StatsSummary(
        total_solved=solved,
        total_correct=correct,
        accuracy=accuracy,
        accuracy_band=accuracy_band(accuracy),
        subjects=by_subject(records),
    )
