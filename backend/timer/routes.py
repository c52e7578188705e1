"""Countdown timer routes."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from timer.engine import TimerStatus
from timer.ticker import TimerTicker

router = APIRouter()


class TimerConfigure(BaseModel):
    minutes: str


def get_ticker(request: Request) -> TimerTicker:
    return request.app.state.timer


@router.get("/timer", response_model=TimerStatus)
async def get_timer(ticker: TimerTicker = Depends(get_ticker)):
    return ticker.status()


@router.post("/timer/start", response_model=TimerStatus)
async def start_timer(ticker: TimerTicker = Depends(get_ticker)):
    return ticker.start()


@router.post("/timer/pause", response_model=TimerStatus)
async def pause_timer(ticker: TimerTicker = Depends(get_ticker)):
    return ticker.pause()


@router.post("/timer/reset", response_model=TimerStatus)
async def reset_timer(ticker: TimerTicker = Depends(get_ticker)):
    return ticker.reset()


@router.post("/timer/edit", response_model=TimerStatus)
async def edit_timer(ticker: TimerTicker = Depends(get_ticker)):
    """Open the minutes editor (clicking the clock). Stops the countdown."""
    return ticker.begin_configuration()


@router.post("/timer/configure", response_model=TimerStatus)
async def configure_timer(body: TimerConfigure, ticker: TimerTicker = Depends(get_ticker)):
    """Set target minutes from raw input text; unparseable text is ignored."""
    return ticker.set_configuration(body.minutes)
