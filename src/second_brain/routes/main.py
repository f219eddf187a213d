from fastapi import APIRouter
from fastapi.responses import JSONResponse

from second_brain import __version__
from second_brain.database import db_manager

router = APIRouter(tags=["Main"])


@router.get("/health")
async def health_check():
    """Liveness plus a database ping. Answers 503 while MongoDB is unreachable."""
    database_ok = await db_manager.health_check()
    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "database": "connected" if database_ok else "disconnected",
        "version": __version__,
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)
