# bookstore/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bookstore.api.v1.errors import register_exception_handlers
from bookstore.api.v1.routers import auth, books, user_books, users
from bookstore.config import Settings, settings as default_settings
from bookstore.core.bootstrap import ensure_default_admin
from bookstore.core.db import close_db, init_db
from bookstore.core.security import TokenIssuer

logger = logging.getLogger("uvicorn.error")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The settings are threaded through explicitly: the token issuer (and its
    signing key) is created here and kept on `app.state`, the database is
    opened on startup and closed on shutdown.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("[startup] %s (env=%s)", settings.APP_NAME, settings.env)
        await init_db(settings.database_url, generate_schemas=settings.db_generate_schemas)
        # Ensure there's a default admin account on first run
        await ensure_default_admin(settings)
        yield
        await close_db()
        logger.info("[shutdown] database connections closed")

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    if not settings.jwt_secret:
        logger.warning("[startup] JWT_SECRET not set -> using a random signing key for this process")

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(user_books.router)
    app.include_router(books.router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app


app = create_app()
