from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from account_service.api.router import router as api_router
from account_service.core.config import Settings, get_settings
from account_service.core.database import Database
from account_service.core.logging import setup_logging
from account_service.core.security import PasswordHasher, TokenIssuer

logger = logging.getLogger("account_service")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Settings are resolved once here and handed to every collaborator;
    invalid token configuration raises before the app can serve traffic.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    token_issuer = TokenIssuer.from_settings(settings)
    password_hasher = PasswordHasher.from_settings(settings)
    database = Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up Account Service API")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        await database.check_connection()
        if settings.AUTO_CREATE_TABLES:
            await database.create_all()
            logger.info("Database tables created")

        yield

        logger.info("Shutting down Account Service API")
        await database.dispose()

    app = FastAPI(
        title="Account Service API",
        version="1.0.0",
        description="User accounts with JWT access/refresh authentication",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.token_issuer = token_issuer
    app.state.password_hasher = password_hasher

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_STR)

    @app.get("/")
    async def root():
        return {"message": "Account Service API", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
