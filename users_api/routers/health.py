"""Health check endpoints."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from users_api.dependencies import UserStoreDep
from users_api.services.user import StoreError

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str


@router.get("/healthz", response_model=HealthResponse)
async def health_check(store: UserStoreDep, response: Response) -> HealthResponse:
    """Check application health."""
    try:
        await store.ping()
    except StoreError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", database="unhealthy")

    return HealthResponse(status="healthy", database="healthy")


@router.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Kubernetes readiness probe endpoint."""
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe endpoint."""
    return {"status": "alive"}
