"""Health check endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...errors import MeetingTasksError

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Check backend API reachability."""
    try:
        backend = await request.app.state.context.api.health.check()
    except MeetingTasksError:
        return JSONResponse(status_code=503, content={"status": "unhealthy"})
    return {"status": "ok", "backend": backend.status}
