"""
Health check: verifies the database is reachable.
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from courtdesk.core.logger import logger

router = APIRouter()


def _check_database(request: Request) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        request.app.state.db.ping()
        return "ok", "Database reachable"
    except Exception as e:
        logger.warning(f"Health check: database unreachable: {e}")
        return "error", "Database unreachable"


@router.get("")
def health(request: Request):
    db_status, db_detail = _check_database(request)
    healthy = db_status == "ok"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "success": healthy,
            "data": {
                "status": "healthy" if healthy else "unhealthy",
                "checks": {"database": {"status": db_status, "detail": db_detail}},
            },
        },
    )
