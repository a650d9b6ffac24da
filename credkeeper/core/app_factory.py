from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.credential_service import CredentialService
from ..infrastructure.persistence.sqlite import SQLiteUserDirectory
from ..infrastructure.security.password_hasher import BcryptPasswordHasher
from ..presentation.api.errors import register_error_handlers
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Credential Management Service", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(users_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        directory = SQLiteUserDirectory(settings.database_path)
        hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
        credential_service = CredentialService(directory, hasher)

        container = ApplicationContainer(
            settings=settings,
            directory=directory,
            hasher=hasher,
            credential_service=credential_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("User directory opened at %s", settings.database_path)

        try:
            yield
        finally:
            directory.close()

    return lifespan
