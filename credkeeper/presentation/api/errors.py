from __future__ import annotations

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ...domain.errors import (
    CredentialError,
    EmailAlreadyTaken,
    InvalidOldPassword,
    PasswordMismatch,
    PasswordTooLong,
    PersistenceFailure,
    UserNotFound,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[Type[CredentialError], int] = {
    PasswordMismatch: status.HTTP_400_BAD_REQUEST,
    PasswordTooLong: status.HTTP_400_BAD_REQUEST,
    InvalidOldPassword: status.HTTP_403_FORBIDDEN,
    UserNotFound: status.HTTP_404_NOT_FOUND,
    EmailAlreadyTaken: status.HTTP_409_CONFLICT,
    PersistenceFailure: 422,
}


def status_for(exc: CredentialError) -> int:
    for error_type in type(exc).__mro__:
        code = STATUS_BY_ERROR.get(error_type)  # type: ignore[arg-type]
        if code is not None:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: CredentialError) -> Dict[str, str]:
    return {"error": exc.code, "detail": exc.message}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CredentialError)
    async def handle_credential_error(request: Request, exc: CredentialError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("Unclassified credential error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content=error_body(exc))
