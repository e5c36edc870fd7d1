"""Map domain errors onto HTTP responses.

Bodies use FastAPI's `{"detail": ...}` shape so clients see the same format as
for errors raised with HTTPException.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docshare.errors import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationFailedError,
)
from docshare.app.tokens import AUTHENTICATION_REQUIRED
from docshare.integrations.blob import BlobNotFoundError, BlobStoreError

logger = logging.getLogger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


async def invalid_token_handler(request: Request, exc: InvalidTokenError) -> JSONResponse:
    logger.warning(f"Invalid token on {request.url.path}: {exc.reason}")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": AUTHENTICATION_REQUIRED},
        headers=BEARER_CHALLENGE,
    )


async def invalid_credentials_handler(
    request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": "Invalid credentials"},
        headers=BEARER_CHALLENGE,
    )


async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def validation_failed_handler(
    request: Request, exc: ValidationFailedError
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def blob_not_found_handler(request: Request, exc: BlobNotFoundError) -> JSONResponse:
    logger.error(f"Document content missing from blob store: {exc.key}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Document content not found"},
    )


async def blob_store_error_handler(request: Request, exc: BlobStoreError) -> JSONResponse:
    logger.error(f"Blob store failure on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register one handler per domain error category."""
    app.add_exception_handler(InvalidTokenError, invalid_token_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidCredentialsError, invalid_credentials_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ForbiddenError, forbidden_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConflictError, conflict_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BlobNotFoundError, blob_not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BlobStoreError, blob_store_error_handler)  # type: ignore[arg-type]
