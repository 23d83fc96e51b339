from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.openapi.docs import get_redoc_html
from starlette.staticfiles import StaticFiles

from patient_service.api.exception_handlers import register_exception_handlers
from patient_service.api.schemas import ErrorOut, HealthOut
from patient_service.core.db import close_db, init_db
from patient_service.core.logging import setup_logging
from patient_service.core.metrics import PrometheusMetricsMiddleware, metrics_router
from patient_service.core.middleware.http_logging import HttpLoggingMiddleware
from patient_service.core.settings import get_settings
from patient_service.patients.router import router as patients_router

setup_logging()


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Settings are read here rather than at import time so that importing the
        # app (e.g. during test collection) does not require DATABASE_URL.
        settings = get_settings()
        init_db(app=app, database_url=str(settings.database_url))
        yield
        await close_db(app=app)

    app = FastAPI(
        title="Patient Service API",
        description=(
            "Create, read, update and delete patient records.\n\n"
            "- Dates are `yyyy-MM-dd` strings; identifiers are UUID strings.\n"
            "- Email addresses are unique across patients.\n"
            "- Every error response has the same shape: `timestamp`, `status`, `error`, "
            "`message` and, for validation failures, `details`."
        ),
        lifespan=lifespan,
        docs_url="/swagger",
        redoc_url=None,  # custom ReDoc page served at /docs
        responses={"default": {"model": ErrorOut, "description": "Error response"}},
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "patients",
                "description": "Create, read, update and delete patient records.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    static_dir = Path(__file__).resolve().parent / "static"
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/docs", include_in_schema=False)
    async def redoc_docs():
        local_redoc = static_dir / "redoc.standalone.js"
        redoc_js_url = (
            "/static/redoc.standalone.js"
            if local_redoc.exists()
            else "https://cdn.jsdelivr.net/npm/redoc@2.1.4/bundles/redoc.standalone.js"
        )
        return get_redoc_html(
            openapi_url=app.openapi_url or "/openapi.json",
            title=f"{app.title} - ReDoc",
            redoc_js_url=redoc_js_url,
        )

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description="Reports that the API process is up. Does not check the database.",
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(patients_router)
    return app


app = create_app()
