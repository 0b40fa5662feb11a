"""Application factory and top-level wiring for the Machine Manager API.

This module is the glue that brings together configuration, the database
handle, the API routers, middleware and error handling. ``create_app`` is the
single place where the storage handle is built; routers reach it through the
``get_db`` dependency instead of a module-level engine, which is what lets
tests hand in their own in-memory database.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import AppSettings, get_settings
from .core.errors import register_exception_handlers
from .db.seed import seed_database
from .db.session import Database
from .middlewares import RequestIdMiddleware


def create_app(settings: AppSettings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url)

    # ``create_all`` makes a brand-new database usable straight away; existing
    # tables are left untouched.
    database.create_all()
    if settings.SEED_DEMO_DATA:
        with database.session() as db:
            seed_database(db)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # ---------- Middleware ----------
    # The browser client is served from a different origin during development.
    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestIdMiddleware)

    # ---------- Routers ----------
    from .routers import api_machines as api_machines_router  # type: ignore

    app.include_router(api_machines_router.router)

    from .routers import api_maintenance as api_maintenance_router  # type: ignore

    app.include_router(api_maintenance_router.router)

    from .routers import api_usage_logs as api_usage_logs_router  # type: ignore

    app.include_router(api_usage_logs_router.router)

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # ---------- Exception handling ----------
    register_exception_handlers(app)

    return app


__all__ = ["create_app"]
