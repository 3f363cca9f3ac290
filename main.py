"""
Main entrypoint: CredScore FastAPI server.

Env: API_HOST, API_PORT, LOG_LEVEL, plus the upstream keys read by backend_credscore.config
(TWITTER_API_KEY, MORALIS_API_KEY, VERIDA_API_BASE_URL, CREDSCORE_DB_URL / DATABASE_URL).

Equivalent: uvicorn backend_credscore.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from backend_credscore.credscore_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    from backend_credscore.config import get_settings

    settings = get_settings()

    from backend_credscore.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
