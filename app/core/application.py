"""
Application builder.
Wires middlewares, routers, lifespan and the error envelope.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import api_logger, app_logger, init_app_logging
from app.domain.errors import SalesQueryError
from app.infra.db import get_engine, health_check
from app.infra.schema import create_schema
from app.routers import auth, health, sales


def error_envelope(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


class ApplicationBuilder:
    """Builder for the FastAPI application."""

    def __init__(self):
        self.app = FastAPI(
            title=settings.APP_NAME,
            version="1.0.0",
            description="Search, filter and summarize sales records",
            docs_url="/docs",
            redoc_url="/redoc",
            openapi_url="/openapi.json",
        )
        self._middlewares_added = False
        self._routes_added = False
        self._startup_handlers_added = False

    def add_cors_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        allowed_origins = settings.CORS_ORIGINS_LIST or [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
        app_logger.info("CORS middleware added", origins=",".join(allowed_origins))
        return self

    def add_request_logging_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            api_logger.info(
                f"{request.method} {request.url.path}",
                status=response.status_code,
            )
            return response

        return self

    def finalize_middlewares(self) -> ApplicationBuilder:
        self._middlewares_added = True
        return self

    def add_routes(self) -> ApplicationBuilder:
        if self._routes_added:
            raise RuntimeError("Routes already added")

        self.app.include_router(health.router)
        self.app.include_router(auth.router)
        self.app.include_router(sales.router)

        @self.app.get("/")
        def root():
            return {
                "name": settings.APP_NAME,
                "env": settings.ENV,
                "docs": "/docs",
                "sales": "/api/sales",
                "healthz": "/healthz",
                "readyz": "/readyz",
            }

        self._routes_added = True
        return self

    def add_startup_handlers(self) -> ApplicationBuilder:
        if self._startup_handlers_added:
            raise RuntimeError("Startup handlers already added")

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            app_logger.info("Starting application...")
            try:
                engine = get_engine()
                create_schema(engine)
                info = health_check(engine)
                app_logger.info("Database ready", dialect=info["dialect"], records=info["records"])
            except Exception as exc:
                app_logger.error("Database connection failed", exc=exc)
                raise
            yield
            app_logger.info("Shutting down application...")

        self.app.router.lifespan_context = lifespan
        self._startup_handlers_added = True
        return self

    def add_exception_handlers(self) -> ApplicationBuilder:
        """Every failure leaves as ``{"success": false, "message": ...}``."""

        @self.app.exception_handler(SalesQueryError)
        async def sales_query_error_handler(request: Request, exc: SalesQueryError):
            if exc.status_code >= 500:
                api_logger.error(exc.message, exc=exc, path=request.url.path)
            else:
                api_logger.info(exc.message, status=exc.status_code, path=request.url.path)
            return error_envelope(exc.status_code, exc.message)

        @self.app.exception_handler(StarletteHTTPException)
        async def http_error_handler(request: Request, exc: StarletteHTTPException):
            return error_envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

        @self.app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            return error_envelope(400, details or "Invalid request")

        @self.app.exception_handler(Exception)
        async def internal_error_handler(request: Request, exc: Exception):
            api_logger.error("Unhandled error", exc=exc, path=request.url.path)
            return error_envelope(500, "Internal server error")

        return self

    def build(self) -> FastAPI:
        if not self._middlewares_added:
            raise RuntimeError("Middlewares not finalized")
        if not self._routes_added:
            raise RuntimeError("Routes not added")
        if not self._startup_handlers_added:
            raise RuntimeError("Startup handlers not added")

        app_logger.info("FastAPI application built")
        return self.app


def create_application() -> FastAPI:
    init_app_logging()

    builder = (
        ApplicationBuilder()
        .add_cors_middleware()
        .add_request_logging_middleware()
        .finalize_middlewares()
        .add_routes()
        .add_startup_handlers()
        .add_exception_handlers()
    )

    return builder.build()
