"""FastAPI app creation, middleware, startup."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.config import ALLOWED_ORIGINS, LOG_LEVEL, TIMER_DEFAULT_MINUTES
from session.bridge import DaySession
from session.routes import router as session_router
from storage.factory import create_storage
from timer.engine import CountdownTimer
from timer.routes import router as timer_router
from timer.ticker import TimerTicker, start_scheduler

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(storage=None, scheduler=None, today=None) -> FastAPI:
    """Build the app. Tests inject storage, a scheduler and a clock."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_logging()
        session = DaySession(storage or create_storage(), today=today or date.today)
        await session.open()
        app.state.session = session

        owns_scheduler = scheduler is None
        active_scheduler = start_scheduler() if owns_scheduler else scheduler
        app.state.timer = TimerTicker(CountdownTimer(TIMER_DEFAULT_MINUTES), active_scheduler)
        logger.info(f"ZenPlan ready for {session.selected_date}")
        yield
        # Shutdown
        app.state.timer.close()
        await session.close()
        if owns_scheduler and active_scheduler.running:
            active_scheduler.shutdown()
        logger.info("ZenPlan stopped")

    app = FastAPI(title="ZenPlan API", version=VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── API routes ──────────────────────────────────────────────
    app.include_router(session_router, tags=["session"])
    app.include_router(timer_router, tags=["timer"])

    @app.get("/health")
    def health_check():
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
