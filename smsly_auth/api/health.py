"""
Health Checks
=============
Liveness and readiness probes with component status.
"""

import time
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

import structlog
from fastapi import APIRouter, Response
from pydantic import BaseModel

from ..repository.base import ChallengeRepository
from ..secret_store import SecretStore

logger = structlog.get_logger(__name__)

HEALTH_PROBE_SUBJECT = "__health__"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    components: Dict[str, ComponentHealth]
    timestamp: float


HealthCheck = Callable[[], Awaitable[ComponentHealth]]


def repository_check(repository: ChallengeRepository) -> HealthCheck:
    """Round-trip a read against the challenge store."""

    async def check() -> ComponentHealth:
        try:
            start = time.time()
            await repository.get(HEALTH_PROBE_SUBJECT)
            latency = (time.time() - start) * 1000
            return ComponentHealth(status="connected", latency_ms=round(latency, 2))
        except Exception as e:
            logger.error("Challenge store health check failed", backend=repository.name, error=str(e))
            return ComponentHealth(status="error", error=type(e).__name__)

    return check


def secret_check(secret: SecretStore) -> HealthCheck:
    async def check() -> ComponentHealth:
        if secret.is_loaded:
            return ComponentHealth(status="loaded")
        return ComponentHealth(status="error", error="SecretUnavailable")

    return check


def create_health_router(
    service_name: str,
    version: str,
    checks: Dict[str, HealthCheck],
) -> APIRouter:
    """
    Create a health check router.

    Returns:
        FastAPI router with /health, /health/live, and /health/ready endpoints
    """
    router = APIRouter(tags=["Health"])

    async def run_checks() -> Dict[str, ComponentHealth]:
        components: Dict[str, ComponentHealth] = {}
        for name, check_fn in checks.items():
            try:
                components[name] = await check_fn()
            except Exception as e:
                components[name] = ComponentHealth(status="error", error=type(e).__name__)
        return components

    @router.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check with all component statuses."""
        components = await run_checks()
        overall = HealthStatus.HEALTHY
        if any(c.status == "error" for c in components.values()):
            overall = HealthStatus.UNHEALTHY
        return HealthResponse(
            status=overall,
            service=service_name,
            version=version,
            components=components,
            timestamp=time.time(),
        )

    @router.get("/health/live")
    async def liveness_probe():
        """Kubernetes liveness probe - always returns 200 if service is running."""
        return {"status": "alive"}

    @router.get("/health/ready")
    async def readiness_probe():
        """Kubernetes readiness probe - all components must pass."""
        components = await run_checks()
        failed = [name for name, c in components.items() if c.status == "error"]
        if failed:
            return Response(
                content='{"status": "not_ready", "reason": "%s_unavailable"}' % failed[0],
                status_code=503,
                media_type="application/json",
            )
        return {"status": "ready"}

    return router
