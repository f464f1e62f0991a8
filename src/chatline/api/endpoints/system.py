"""Service health endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from chatline.db.session import database

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(response: Response) -> dict[str, str]:
    """Report whether the service is connected to its store."""
    if not database.ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "database": "not_ready"}
    return {"status": "ok", "database": "ready"}
