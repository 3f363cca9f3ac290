"""
FastAPI server for CredScore.

Mounts the score and wallet routes under /api, owns the vault token store (app.state) and
creates the score tables on startup. Config via env (see backend_credscore.config).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from backend_credscore import __version__
from backend_credscore.api_server.dependencies import build_token_store
from backend_credscore.api_server.score_routes import router as score_router
from backend_credscore.api_server.wallet_routes import router as wallet_router
from backend_credscore.core.exceptions import PersistenceError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.database import init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create score tables; a database that is down must not keep the API from starting."""
    try:
        init_db()
    except PersistenceError as e:
        logger.warning("score_store_init_skip", error=str(e))
    logger.info("api_started", version=__version__)
    yield
    logger.info("api_stopped")


app = FastAPI(
    title="CredScore API",
    description="Reputation scores, badges and titles from social, wallet and data-vault activity.",
    version=__version__,
    lifespan=lifespan,
)
app.state.token_store = build_token_store()

app.include_router(score_router, prefix="/api")
app.include_router(wallet_router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "detail": exc.detail},
    )
