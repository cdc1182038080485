"""Zamora: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from zamora.api.routes.admin import router as admin_router
from zamora.api.routes.auth import router as auth_router
from zamora.api.routes.bookings import router as bookings_router
from zamora.api.routes.folios import router as folios_router
from zamora.api.routes.guests import router as guests_router
from zamora.api.routes.inventory import router as inventory_router
from zamora.api.routes.menu import router as menu_router
from zamora.api.routes.notifications import router as notifications_router
from zamora.api.routes.orders import router as orders_router
from zamora.api.routes.payment_methods import router as payment_methods_router
from zamora.api.routes.properties import router as properties_router
from zamora.api.routes.rooms import router as rooms_router
from zamora.api.routes.service_requests import router as service_requests_router
from zamora.api.routes.staff import router as staff_router
from zamora.api.routes.stats import router as stats_router
from zamora.api.routes.tables import router as tables_router
from zamora.config import settings
from zamora.errors import (
    ZamoraError,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
    zamora_error_handler,
)

# Configure root logger so all zamora.* loggers output to stderr (captured by Docker).
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    yield
    # Shutdown: dispose engine connections
    from zamora.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Operations platform for hotels, lodges, restaurants and bars.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error bodies are always {"error": ..., "code": ...}
app.add_exception_handler(ZamoraError, zamora_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Routers
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(properties_router)
app.include_router(staff_router)
app.include_router(rooms_router)
app.include_router(tables_router)
app.include_router(bookings_router)
app.include_router(guests_router)
app.include_router(folios_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(payment_methods_router)
app.include_router(inventory_router)
app.include_router(service_requests_router)
app.include_router(notifications_router)
app.include_router(stats_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
