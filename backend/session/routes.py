"""Selected-day routes: date switching, records, notes, heatmap."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from activity.heatmap import weeks
from server.config import DEFAULT_SUBJECTS
from session.bridge import DaySession
from session.schemas import (
    DateSelect, NoteUpdate, RecordView, SessionResponse, RecordAddResponse,
    RecordRemoveResponse, HeatmapResponse,
)
from stats.aggregator import record_band, record_ratio
from stats.schemas import RecordCreate

router = APIRouter()


def get_session(request: Request) -> DaySession:
    return request.app.state.session


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Date must be YYYY-MM-DD")


def _session_response(session: DaySession) -> SessionResponse:
    return SessionResponse(
        date=session.selected_date,
        records=[
            RecordView(**r.model_dump(), ratio=record_ratio(r), band=record_band(r))
            for r in session.store.display_order()
        ],
        summary=session.summary(),
        note=session.note,
        subjects=DEFAULT_SUBJECTS,
    )


@router.get("/session", response_model=SessionResponse)
async def get_day(session: DaySession = Depends(get_session)):
    return _session_response(session)


@router.put("/session/date", response_model=SessionResponse)
async def select_date(body: DateSelect, session: DaySession = Depends(get_session)):
    day = _parse_day(body.date)
    await session.select_date(day.isoformat())
    return _session_response(session)


@router.post("/session/records", response_model=RecordAddResponse)
async def add_record(body: RecordCreate, session: DaySession = Depends(get_session)):
    record = await session.add_record(body)
    return RecordAddResponse(added=record is not None, record=record, summary=session.summary())


@router.delete("/session/records/{record_id}", response_model=RecordRemoveResponse)
async def remove_record(record_id: str, session: DaySession = Depends(get_session)):
    removed = await session.remove_record(record_id)
    return RecordRemoveResponse(removed=removed, summary=session.summary())


@router.put("/session/note")
async def save_note(body: NoteUpdate, session: DaySession = Depends(get_session)):
    await session.save_note(body.content)
    return {"date": session.selected_date, "content": session.note}


@router.get("/session/heatmap", response_model=HeatmapResponse)
async def get_heatmap(today: Optional[str] = None, session: DaySession = Depends(get_session)):
    day = _parse_day(today) if today else session.current_day()
    cells = session.heatmap(day)
    return HeatmapResponse(
        today=day.isoformat(),
        cells=cells,
        weeks=weeks(cells),
    )
