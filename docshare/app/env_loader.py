"""Load environment variables early for the FastAPI app.

For local dev, loads a .env file based on ENV ("dev", "staging" or "prod").
In deployed environments (ENV="staging" or "prod") env vars are injected by the
platform, so no .env file is loaded.
"""

import os
import sys
from typing import Literal
from dotenv import load_dotenv

EnvironmentName = Literal["dev", "staging", "prod"]

# Required environment variables that must be set for the app to run.
# If any are missing, the app will fail to start with a clear error message.
REQUIRED_ENV_VARS = [
    "DATABASE_URL",
    "JWT_SECRET",
    "BLOB_BUCKET",
]


def validate_required_env_vars() -> None:
    """Validate that all required environment variables are set.

    Raises:
        SystemExit: If any required environment variables are missing.
    """
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        print(
            f"ERROR: Missing required environment variables: {', '.join(missing)}",
            file=sys.stderr,
        )
        print(
            "Please set these variables in your .env file or environment.",
            file=sys.stderr,
        )
        sys.exit(1)


# Load env vars before any app code runs.
env = os.getenv("ENV", "dev")
if env in ("staging", "prod"):
    print(f"Running in {env} environment (env vars injected)")
elif env == "dev":
    print("Loading environment variables from .env.dev")
    load_dotenv(".env.dev", verbose=True)
else:
    raise ValueError(f"Invalid ENV value: {env}. Must be 'dev', 'staging', or 'prod'.")

# Validate required env vars after loading.
validate_required_env_vars()


def get_current_environment() -> EnvironmentName:
    """Get the current environment (dev, staging, or prod)."""
    env = os.getenv("ENV", "dev")
    if env in ("dev", "staging", "prod"):
        return env  # type: ignore[return-value]
    raise ValueError(f"Invalid ENV value: {env}. Must be 'dev', 'staging', or 'prod'.")


def get_max_upload_bytes() -> int:
    """Largest accepted upload, 25 MiB unless MAX_UPLOAD_BYTES overrides it."""
    return int(os.getenv("MAX_UPLOAD_BYTES", 25 * 1024 * 1024))


def get_restrict_document_edits() -> bool:
    """Whether update/share are limited to the owner and admins."""
    return os.getenv("RESTRICT_DOCUMENT_EDITS", "").lower() in ("1", "true", "yes")


def get_restrict_search() -> bool:
    """Whether search results are limited to documents the caller can open."""
    return os.getenv("RESTRICT_SEARCH", "").lower() in ("1", "true", "yes")


def get_cors_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
