"""FastAPI application entrypoint and router wiring for the backend."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from app.api.boards import router as boards_router
from app.api.columns import router as columns_router
from app.api.subtasks import router as subtasks_router
from app.api.tasks import router as tasks_router
from app.api.theme import router as theme_router
from app.core.config import settings
from app.core.error_handling import REQUEST_ID_HEADER, install_error_handling
from app.core.logging import configure_logging, get_logger
from app.db.session import init_db
from app.schemas.errors import ErrorResponse
from app.schemas.health import HealthStatusResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)
OPENAPI_TAGS = [
    {
        "name": "health",
        "description": (
            "Service liveness/readiness probes used by infrastructure and runtime checks."
        ),
    },
    {
        "name": "boards",
        "description": "Board lifecycle plus board-scoped column and task listings.",
    },
    {
        "name": "columns",
        "description": "Column CRUD and reordering within a board.",
    },
    {
        "name": "tasks",
        "description": "Task CRUD and drag-and-drop moves within and across columns.",
    },
    {
        "name": "subtasks",
        "description": "Checklist items ordered within a task.",
    },
    {
        "name": "theme",
        "description": "Persisted light/dark UI preference.",
    },
]
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Validation failed or a business rule was violated.",
    },
    status.HTTP_404_NOT_FOUND: {
        "model": ErrorResponse,
        "description": "Requested resource was not found.",
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponse,
        "description": "Storage or internal server error.",
    },
}


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize application resources before serving requests."""
    logger.info(
        "app.lifecycle.starting environment=%s storage_backend=%s db_auto_migrate=%s",
        settings.environment,
        settings.storage_backend.value,
        settings.db_auto_migrate,
    )
    await init_db()
    logger.info("app.lifecycle.started")
    try:
        yield
    finally:
        logger.info("app.lifecycle.stopped")


app = FastAPI(
    title="Kanban API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    logger.info("app.cors.enabled origins_count=%s", len(origins))
else:
    logger.info("app.cors.disabled")

install_error_handling(app)


HEALTH_PROBES = (
    ("/health", "Liveness probe."),
    ("/healthz", "Liveness probe alias for container platforms."),
    ("/readyz", "Readiness probe; the app only serves once the store is initialized."),
)


def probe() -> HealthStatusResponse:
    """Report that the process is up and serving."""
    return HealthStatusResponse(ok=True)


for path, description in HEALTH_PROBES:
    app.add_api_route(
        path,
        probe,
        methods=["GET"],
        tags=["health"],
        response_model=HealthStatusResponse,
        description=description,
        operation_id=f"probe_{path.strip('/')}",
    )


api_v1 = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)
api_v1.include_router(boards_router)
api_v1.include_router(columns_router)
api_v1.include_router(tasks_router)
api_v1.include_router(subtasks_router)
api_v1.include_router(theme_router)
app.include_router(api_v1)

logger.debug("app.routes.registered count=%s", len(app.routes))
