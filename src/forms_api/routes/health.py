"""Health check endpoints for liveness and readiness probes."""
import sqlite3
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Error details when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_repository(request: Request) -> ReadinessCheck:
    """Verify the record store answers a trivial query."""
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        return ReadinessCheck(
            name="record_store", status="failed", message="Not configured"
        )
    try:
        repository.count()
        return ReadinessCheck(name="record_store", status="ok")
    except sqlite3.Error as e:
        return ReadinessCheck(
            name="record_store",
            status="failed",
            message=str(e),
        )


def _check_search_index(request: Request) -> ReadinessCheck:
    """Verify the search index answers a trivial query."""
    search_index = getattr(request.app.state, "search_index", None)
    if search_index is None:
        return ReadinessCheck(
            name="search_index", status="failed", message="Not configured"
        )
    try:
        search_index.count()
        return ReadinessCheck(name="search_index", status="ok")
    except sqlite3.Error as e:
        return ReadinessCheck(
            name="search_index",
            status="failed",
            message=str(e),
        )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns immediate success if the process is running.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Checks that the record store and the search index both answer.
    Returns 200 if all checks pass, 503 if any fail.

    Returns:
        Readiness status with individual check results.
    """
    checks = [
        _check_repository(request),
        _check_search_index(request),
    ]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
