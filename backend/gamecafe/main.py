"""
FastAPI app entrypoint.

Board-game café catalog + Party Finder. One TTL cache per process (app.state.cache),
shared by routes and the daily inactivity cleanup job.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from gamecafe.api.routes import admin, comments, cron, games, party_finder
from gamecafe.config import settings
from gamecafe.core.constants import INACTIVE_CLEANUP_JOB_ID
from gamecafe.scheduler.inactivity_job import run_inactive_user_cleanup_job
from gamecafe.services.party_finder.cache import TTLCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = TTLCache()
    app.state.cache = cache
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            run_inactive_user_cleanup_job,
            "cron",
            hour=settings.inactive_cleanup_hour,
            minute=0,
            id=INACTIVE_CLEANUP_JOB_ID,
            args=[cache],
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        app.state.scheduler = scheduler
        logger.info("Scheduler started: inactive user cleanup daily at %02d:00", settings.inactive_cleanup_hour)
    logger.info("Backend ready")
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    cache.clear()


app = FastAPI(title="Game Café", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(party_finder.router, prefix="/party-finder", tags=["party-finder"])
app.include_router(games.router, prefix="/games", tags=["games"])
app.include_router(comments.router, prefix="/comments", tags=["comments"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(cron.router, prefix="/cron", tags=["cron"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Game Café API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
