import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from registry_api.db.session import get_db

router = APIRouter()
logger = logging.getLogger(__name__)

# Process start, for the uptime figure
_started_at = time.monotonic()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report liveness and whether the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check database probe failed")
        return JSONResponse(status_code=503, content={"status": "fail", "db": "error"})

    return {
        "status": "ok",
        "uptime": time.monotonic() - _started_at,
        "db": "ok",
    }
