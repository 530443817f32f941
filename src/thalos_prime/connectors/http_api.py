# src/thalos_prime/connectors/http_api.py

"""
JSON HTTP front door.

Thin layer over the coordinator: submit returns the pending task at once,
clients poll /api/tasks/{id} for the outcome. The coordinator comes from
AppState stored on app.state (no module-level singleton).
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException, Query, Request

from ..core.state import AppState
from ..tasks.coordinator import Coordinator
from ..tasks.task_models import CoordinatorClosedError, InvalidIntentError
from .http_schemas import (
    HealthResponse,
    StatusResponse,
    TaskCreate,
    TaskCreated,
    TaskDetail,
    TaskListResponse,
    TaskRead,
)

logger = logging.getLogger(__name__)


def get_coordinator(request: Request) -> Coordinator:
    state: AppState = request.app.state.app_state
    return state.coordinator


def create_app(state: AppState) -> FastAPI:
    app_name = str(getattr(state.settings, "app_name", "Thalos Prime"))
    app = FastAPI(title=f"{app_name} API")
    app.state.app_state = state

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Attach a request id to every response and log a compact access line."""
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "access request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get("/api/status", response_model=StatusResponse)
    def api_status(coordinator: Coordinator = Depends(get_coordinator)) -> StatusResponse:
        return StatusResponse.from_status(coordinator.status())

    @app.get("/api/tasks", response_model=TaskListResponse)
    def list_tasks_endpoint(
        limit: int | None = Query(None, ge=1, description="Newest N tasks"),
        coordinator: Coordinator = Depends(get_coordinator),
    ) -> TaskListResponse:
        tasks = coordinator.list_tasks(limit)
        return TaskListResponse(tasks=[TaskRead.from_task(t) for t in tasks])

    @app.post("/api/tasks", response_model=TaskCreated, status_code=201)
    def submit_task_endpoint(
        payload: TaskCreate,
        coordinator: Coordinator = Depends(get_coordinator),
    ) -> TaskCreated:
        try:
            task = coordinator.submit(payload.intent, metadata=payload.metadata)
        except InvalidIntentError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except CoordinatorClosedError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return TaskCreated.from_task(task)

    @app.get("/api/tasks/{task_id}", response_model=TaskDetail)
    def task_detail_endpoint(
        task_id: str,
        coordinator: Coordinator = Depends(get_coordinator),
    ) -> TaskDetail:
        task = coordinator.get(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return TaskDetail.from_task(task)

    return app


def serve(state: AppState, *, host: str | None = None, port: int | None = None) -> None:
    """Run the API with uvicorn until interrupted (blocking)."""
    import uvicorn

    settings = state.settings
    host = host or str(getattr(settings, "http_host", "0.0.0.0"))
    port = int(port or getattr(settings, "http_port", 8000))

    logger.info("Serving HTTP API on %s:%s", host, port)
    # log_config=None keeps the handlers installed by setup_logging().
    uvicorn.run(create_app(state), host=host, port=port, log_config=None)
