from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.response import ResponseModel, ResponseState

router = APIRouter()

@router.get("/")
async def health():
    """Liveness plus a database round trip; 503 when the database does not answer."""
    database_up = await DatabaseManager.get_instance().sql.ping()
    payload = {
        "status": "Healthy" if database_up else "Unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "services": {"database": "Connected" if database_up else "Unavailable"},
    }
    if not database_up:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ResponseModel.fail(ResponseState.ERROR, "Health check failed", payload),
        )
    return ResponseModel.success(data=payload, message="Health check completed")
