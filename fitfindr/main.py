"""FastAPI application for the FitFindr location and event directory."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from fitfindr.api.v1.router import router as v1_router
from fitfindr.core.config import Settings
from fitfindr.core.db import init_db
from fitfindr.core.logging import configure_logging, get_logger
from fitfindr.middleware.correlation import REQUEST_ID_HEADER, CorrelationMiddleware
from fitfindr.middleware.errors import ErrorHandlingMiddleware

settings = Settings()

configure_logging(testing=not settings.JSON_LOGS, level=settings.LOG_LEVEL)
logger = get_logger()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    # Test runs create and drop their own schema
    if os.getenv("TESTING") != "true":
        init_db()
        logger.info(
            "database_ready", database_url=settings.DATABASE_URL.split("@")[-1]
        )
    yield


def create_app() -> FastAPI:
    """Build the application with its middleware stack and routes."""
    application = FastAPI(
        title=settings.app_name,
        description="Directory and events for fitness locations",
        version=settings.version,
        default_response_class=JSONResponse,
        lifespan=lifespan,
    )

    # Last added runs first: CORS, then correlation, then error handling
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(CorrelationMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=600,
    )

    @application.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @application.get("/", include_in_schema=False)
    async def docs_redirect() -> Response:
        return RedirectResponse(
            url="/docs", status_code=status.HTTP_307_TEMPORARY_REDIRECT
        )

    application.include_router(v1_router, prefix=settings.api_prefix)
    return application


app = create_app()
