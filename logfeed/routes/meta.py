from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..config import Settings, get_settings
from ..models import HealthResponse, RootResponse
from ..services import LogFeed, get_log_feed

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=HealthResponse)
# Return service health status for monitoring and load balancers
def health(
    settings: Settings = Depends(get_settings),
    feed: LogFeed = Depends(get_log_feed),
) -> HealthResponse:
    return HealthResponse(
        ok=True,
        service="logfeed",
        version=settings.app_version,
        poller_running=feed.poller.running,
    )


@router.get("/meta", response_model=RootResponse)
# Return service metadata including available API endpoints
def meta(request: Request, settings: Settings = Depends(get_settings)) -> RootResponse:
    endpoints = sorted(
        {
            route.path
            for route in request.app.routes
            if getattr(route, "include_in_schema", False) and route.path.startswith("/api/")
        }
    )
    return RootResponse(
        status="ok",
        service="logfeed",
        version=settings.app_version,
        endpoints=endpoints,
    )
