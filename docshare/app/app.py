# This file loads env variables and must thus be imported before anything else.
from . import env_loader  # noqa: F401
from .env_loader import get_cors_allowed_origins, get_current_environment

import os
import logging

from fastapi import FastAPI, Depends, Response
from fastapi.middleware.cors import CORSMiddleware

from docshare.models import Identity
from .routers import auth_router, documents_router, admin_router
from .exception_handlers import register_exception_handlers
from .models import EnvironmentResponse
from .auth import require_user

"""FastAPI application setup for the document sharing API.

Exposes routes for registration and login, document upload, listing,
download and sharing, and admin user management. This module configures
CORS, logging behavior, and the mapping of domain errors to HTTP responses.
"""

logger = logging.getLogger(__name__)

app = FastAPI(title="docshare")
app.include_router(auth_router)
app.include_router(documents_router)
app.include_router(admin_router)
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=get_cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


# Configure basic logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(filename)s:%(lineno)d",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# Configure the logging for the API itself if the user specifies it.
if "LOG_LEVEL" in os.environ:
    match os.environ["LOG_LEVEL"].upper():
        case "DEBUG":
            log_level = logging.DEBUG
        case "INFO":
            log_level = logging.INFO
        case "WARNING":
            log_level = logging.WARNING
        case "ERROR":
            log_level = logging.ERROR
        case "CRITICAL":
            log_level = logging.CRITICAL
        case _:
            raise ValueError(f"Invalid log level: {os.environ['LOG_LEVEL']}")
    logging.getLogger("docshare").setLevel(log_level)


@app.get("/health")
@app.options("/health")
def health_check(response: Response) -> dict[str, str]:
    """Health check endpoint that returns 200 status with CORS from anywhere."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"
    return {"status": "healthy"}


@app.get("/environment", response_model=EnvironmentResponse)
def get_environment(_identity: Identity = Depends(require_user)) -> EnvironmentResponse:
    """Get the current environment configuration."""
    environment = get_current_environment()
    return EnvironmentResponse(environment=environment)
