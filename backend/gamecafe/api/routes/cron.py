"""
Inactive-user cleanup triggers.

GET: external scheduler (must send X-Cron-Secret in production).
POST: manual trigger from the admin page.
The in-process APScheduler job (main.py) runs the same cleanup daily.
"""
import hmac
import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from gamecafe.api.deps import get_cache, require_admin
from gamecafe.config import settings
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.party_finder.activity import cleanup_inactive_users
from gamecafe.services.party_finder.cache import TTLCache

router = APIRouter()
logger = logging.getLogger(__name__)


def _run_cleanup(db: Session, cache: TTLCache, label: str) -> dict[str, Any]:
    start = time.monotonic()
    result = cleanup_inactive_users(db, cache)
    duration_ms = int((time.monotonic() - start) * 1000)
    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "duration": f"{duration_ms}ms",
        "usersUpdated": result.updated,
        "errors": result.errors,
        "message": f"{label}: {result.updated} users set to resting",
    }


def _failure(message: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error": str(exc),
            "message": message,
        },
    )


def _cron_authorized(secret: str | None) -> bool:
    if not settings.is_production:
        return True
    if not settings.cron_secret or not secret:
        return False
    return hmac.compare_digest(secret, settings.cron_secret)


@router.get("/cleanup-inactive-users")
def scheduled_cleanup(
    x_cron_secret: str | None = Header(None, alias="X-Cron-Secret"),
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
):
    if not _cron_authorized(x_cron_secret):
        logger.warning("Unauthorized cron attempt - missing or invalid X-Cron-Secret")
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    logger.info("Starting party finder cleanup (cron endpoint)")
    try:
        response = _run_cleanup(db, cache, "Cleanup completed")
    except Exception as e:
        logger.exception("Cleanup job failed: %s", e)
        return _failure("Cleanup job failed", e)
    logger.info("Cleanup job completed: %s", response)
    return response


@router.post("/cleanup-inactive-users")
def manual_cleanup(
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    admin: User = Depends(require_admin),
):
    logger.info("Manual cleanup triggered by admin: %s", admin.username)
    try:
        response = _run_cleanup(db, cache, "Manual cleanup completed")
    except Exception as e:
        logger.exception("Manual cleanup failed: %s", e)
        return _failure("Manual cleanup failed", e)
    response["triggeredBy"] = admin.username
    logger.info("Manual cleanup completed: %s", response)
    return response
