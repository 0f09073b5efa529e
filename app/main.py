# app/main.py
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from app.core.config import Settings, get_settings
from app.core.db import Database
from app.core.errors import register_error_handlers
from app.routers.auth import router as auth_router
from app.routers.health import router as health_router
from app.routers.posts import router as posts_router
from app.routers.users import router as users_router
from app.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

routers = [
    health_router,
    auth_router,
    users_router,
    posts_router,
]


def _install_openapi(app: FastAPI) -> None:
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description="Share Board API",
            routes=app.routes,
        )
        comps = schema.setdefault("components", {})
        schemes = comps.setdefault("securitySchemes", {})
        schemes["BearerAuth"] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
        schema["security"] = [{"BearerAuth": []}]
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """Build the app. ``db`` may be passed in (tests); otherwise it is built from settings."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Share Board API", version="1.0.0")
    app.state.settings = settings

    if db is None:
        db = Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        db.create_all()
    app.state.db = db
    logger.info("database backend: %s", db.backend)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    for r in routers:
        app.include_router(r)

    for r in app.routes:
        logger.debug("route %s %s", sorted(getattr(r, "methods", None) or []), getattr(r, "path", None))

    _install_openapi(app)
    return app


app = create_app()
