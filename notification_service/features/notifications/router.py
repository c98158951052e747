"""Route table for the notifications API.

Each :class:`Route` binds a method and path to a handler. Routes that are not
``public`` require a bearer token; the tenant it resolves to scopes every
notification read.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from notification_service.features.notifications.dependencies import (
    CurrentTenantDep,
    NotificationServiceDep,
    authenticate_tenant,
)
from notification_service.features.notifications.pagination import DEFAULT_LIMIT, DEFAULT_PAGE
from notification_service.features.notifications.schemas import (
    ApiResponse,
    HealthResponse,
    MessageResponse,
    MutedSettingRead,
    MuteSettingUpdate,
    MuteStatus,
    NotificationRead,
    PaginatedResponse,
)
from notification_service.features.notifications.service import NotificationService
from notification_service.infra.metrics import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

# Query values are taken as strings so that bad input surfaces as an
# invalid-argument problem from the service, not a framework 422
PageQuery = Annotated[str, Query(description="1-based page number")]
LimitQuery = Annotated[str, Query(description="Page size")]


@dataclass(frozen=True, slots=True)
class Route:
    """Binding of ``method`` + ``path`` to ``endpoint``."""

    method: str
    path: str
    endpoint: Callable[..., Any]
    public: bool
    response_model: Any = None
    summary: str | None = None
    tags: tuple[str, ...] = ("notifications",)


async def list_settings(service: NotificationServiceDep) -> ApiResponse[list[MutedSettingRead]]:
    settings = await service.get_notification_settings()
    return ApiResponse[list[MutedSettingRead]](
        message="Notification settings fetched successfully",
        data=[
            MutedSettingRead(id=row.setting_id, event_type=row.event_type, is_muted=row.is_muted)
            for row in settings
        ],
    )


async def update_setting(
    event_id: str,
    payload: Annotated[MuteSettingUpdate, Body()],
    service: NotificationServiceDep,
) -> MessageResponse:
    await service.update_setting(event_id, payload.is_muted)
    return MessageResponse(message="Notification setting updated successfully")


async def get_setting(event_id: str, service: NotificationServiceDep) -> ApiResponse[MuteStatus]:
    is_muted = await service.is_muted(event_id)
    return ApiResponse[MuteStatus](
        message="Notification setting fetched successfully",
        data=MuteStatus(is_muted=is_muted),
    )


async def list_notifications(
    tenant_id: CurrentTenantDep,
    service: NotificationServiceDep,
    page: PageQuery = str(DEFAULT_PAGE),
    limit: LimitQuery = str(DEFAULT_LIMIT),
) -> PaginatedResponse:
    return await _notification_page(service, tenant_id, None, page, limit)


async def list_event_notifications(
    event_id: str,
    tenant_id: CurrentTenantDep,
    service: NotificationServiceDep,
    page: PageQuery = str(DEFAULT_PAGE),
    limit: LimitQuery = str(DEFAULT_LIMIT),
) -> PaginatedResponse:
    return await _notification_page(service, tenant_id, event_id, page, limit)


async def _notification_page(
    service: NotificationService,
    tenant_id: int,
    event_id: str | None,
    page: str,
    limit: str,
) -> PaginatedResponse:
    result = await service.get_notifications(tenant_id, event_id, page=page, limit=limit)
    return PaginatedResponse(
        message="Notifications fetched successfully",
        data=[NotificationRead.model_validate(item) for item in result.items],
        total_count=result.total,
    )


async def health(request: Request) -> HealthResponse:
    """Report whether the worker is consuming and the backing stores respond.

    The API keeps serving reads while degraded, so this always answers 200.
    """
    state = request.app.state
    worker = getattr(state, "notification_worker", None)
    worker_running = bool(worker is not None and worker.is_running)

    health_check = getattr(state, "health_check", None)
    database, cache = await health_check() if health_check is not None else (False, False)

    healthy = worker_running and database and cache
    return HealthResponse(
        status="ok" if healthy else "degraded",
        worker_running=worker_running,
        database=database,
        cache=cache,
    )


async def metrics() -> Response:
    """Expose Prometheus metrics for scraping."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


ROUTES: tuple[Route, ...] = (
    Route(
        "GET",
        "/settings",
        list_settings,
        public=True,
        response_model=ApiResponse[list[MutedSettingRead]],
        summary="List muted event types",
    ),
    Route(
        "POST",
        "/settings/{event_id}",
        update_setting,
        public=True,
        response_model=MessageResponse,
        summary="Mute or unmute an event type",
    ),
    Route(
        "GET",
        "/settings/{event_id}",
        get_setting,
        public=True,
        response_model=ApiResponse[MuteStatus],
        summary="Get the mute state of an event type",
    ),
    Route(
        "GET",
        "/notifications",
        list_notifications,
        public=False,
        response_model=PaginatedResponse,
        summary="List the tenant's notifications",
    ),
    Route(
        "GET",
        "/notifications/{event_id}",
        list_event_notifications,
        public=False,
        response_model=PaginatedResponse,
        summary="List the tenant's notifications for one event type",
    ),
    Route(
        "GET",
        "/health",
        health,
        public=True,
        response_model=HealthResponse,
        summary="Service health",
        tags=("observability",),
    ),
    Route("GET", "/metrics", metrics, public=True, summary="Prometheus metrics", tags=("observability",)),
)


def build_router(routes: tuple[Route, ...] = ROUTES, prefix: str = "") -> APIRouter:
    """Register ``routes`` on a new router, guarding non-public ones."""
    router = APIRouter(prefix=prefix)
    for route in routes:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            dependencies=[] if route.public else [Depends(authenticate_tenant)],
            response_model=route.response_model,
            summary=route.summary,
            tags=list(route.tags),
        )
    return router
