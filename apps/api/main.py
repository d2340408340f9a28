"""
LinkVault - FastAPI Backend
Main application entry point with liveness check and API routing.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager

from config import settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    links,
    collections,
    public,
    users,
    tags,
)
from services.persistence import INTERNAL_ERROR_DETAIL

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting LinkVault API...")
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Database schema verified.")
        except (SQLAlchemyError, OSError) as e:
            print(f"⚠️ Database bootstrap skipped: {e}")
    yield
    # Shutdown
    await engine.dispose()
    print("👋 Shutting down API...")


app = FastAPI(
    title="LinkVault API",
    description="Save, tag, organize and discover links",
    version="0.1.0",
    lifespan=lifespan,
)


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware whose preflight answers carry headers only, no body."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        response.body = b""
        response.headers["content-length"] = "0"
        return response


@app.middleware("http")
async def unexpected_error(request: Request, call_next):
    # Runs inside the CORS middleware so generic 500s still carry CORS headers.
    try:
        return await call_next(request)
    except Exception:
        logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})


# CORS middleware
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(StarletteHTTPException)
async def not_found_as_text(request: Request, exc: StarletteHTTPException):
    # No route matched at all: plain-text 404. Handler-raised errors keep their JSON detail.
    if exc.status_code == 404 and "endpoint" not in request.scope:
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_as_400(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(links.router, prefix="/api/links", tags=["Links"])
app.include_router(collections.router, prefix="/api/collections", tags=["Collections"])
app.include_router(public.router, prefix="/api/public", tags=["Public"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(tags.router, prefix="/api/tags", tags=["Tags"])


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Root liveness endpoint."""
    return "Server is up!"
