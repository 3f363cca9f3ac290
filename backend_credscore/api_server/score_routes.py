"""
FastAPI router: score evaluation, stored totals and vault token registration.

POST /get-score                          evaluate a user from the sources in the body
GET  /get-score/{user_key}/{username}/{address}   same, path parameters only (no vault)
GET  /total-score/{user_key}             stored totals
POST /vault/token, DELETE /vault/token/{vault_user_id}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from backend_credscore.api_server.dependencies import (
    get_social_client,
    get_token_store,
    get_vault_client,
    get_wallet_client,
)
from backend_credscore.api_server.score_service import collect_and_evaluate
from backend_credscore.collectors import SocialClient, TokenStore, VaultClient, WalletClient
from backend_credscore.config.env import mask_secret
from backend_credscore.core.exceptions import PersistenceError, TokenNotFound
from backend_credscore.credscore_logging import bind_user, get_logger
from backend_credscore.database import get_total_score

logger = get_logger(__name__)

router = APIRouter(tags=["Score"])


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class GetScoreRequest(BaseModel):
    """POST /get-score body. Only userKey is required; missing sources score as empty."""

    model_config = ConfigDict(populate_by_name=True)

    user_key: str | None = Field(None, alias="userKey", description="Stable user identifier")
    username: str | None = Field(None, description="Social handle (with or without @)")
    wallet_address: str | None = Field(None, alias="walletAddress", description="Primary wallet")
    wallet_addresses: list[str] = Field(default_factory=list, alias="walletAddresses")
    email: str | None = None
    auth_token: str | None = Field(None, alias="authToken", description="Vault auth token")
    vault_user_id: str | None = Field(None, alias="vaultUserId", description="Vault user id for the token store")


class ScoreResponse(BaseModel):
    """Evaluation result for one user."""

    success: bool = True
    userKey: str
    title: str
    badges: dict[str, dict[str, Any]] = Field(default_factory=dict)
    scores: dict[str, float] = Field(default_factory=dict)
    walletCount: int = 0
    failedSources: list[str] = Field(default_factory=list)


class WalletScoreItem(BaseModel):
    wallet: str
    score: float


class ConnectionFlags(BaseModel):
    social: bool = False
    wallet: bool = False
    vault: bool = False


class TotalScoreResponse(BaseModel):
    totalScore: float = 0.0
    socialScore: float = 0.0
    vaultScore: float = 0.0
    walletScores: list[WalletScoreItem] = Field(default_factory=list)
    badges: list[str] = Field(default_factory=list)
    socialBadges: list[str] = Field(default_factory=list)
    walletBadges: list[str] = Field(default_factory=list)
    vaultBadges: list[str] = Field(default_factory=list)
    connections: ConnectionFlags = Field(default_factory=ConnectionFlags)
    walletAddress: str | None = None
    title: str = ""
    scores: dict[str, float] = Field(default_factory=dict)


class VaultTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vault_user_id: str = Field(..., min_length=1, alias="vaultUserId")
    auth_token: str = Field(..., min_length=1, alias="authToken")


class VaultTokenResponse(BaseModel):
    vaultUserId: str
    stored: bool


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _resolve_vault_token(
    auth_token: str | None,
    vault_user_id: str | None,
    store: TokenStore,
) -> str | None:
    """Token from the request (stored for later when a vault user id comes with it), else from the store."""
    auth_token = (auth_token or "").strip() or None
    vault_user_id = (vault_user_id or "").strip() or None
    if vault_user_id and auth_token:
        store.put(vault_user_id, auth_token)
        logger.info("vault_token_stored", vault_user_id=vault_user_id, token=mask_secret(auth_token))
        return auth_token
    if auth_token:
        return auth_token
    if vault_user_id:
        try:
            return store.get(vault_user_id)
        except TokenNotFound:
            logger.info("vault_token_missing", vault_user_id=vault_user_id)
    return None


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@router.post("/get-score", response_model=ScoreResponse)
def post_get_score(
    body: GetScoreRequest,
    social_client: SocialClient = Depends(get_social_client),
    wallet_client: WalletClient = Depends(get_wallet_client),
    vault_client: VaultClient = Depends(get_vault_client),
    store: TokenStore = Depends(get_token_store),
) -> JSONResponse:
    """Evaluate a user from the sources given in the body and store the result."""
    user_key = (body.user_key or "").strip()
    if not user_key:
        raise HTTPException(status_code=400, detail="userKey is required")
    bind_user(user_key).info(
        "get_score_called",
        has_username=bool(body.username),
        wallets=len(body.wallet_addresses) + (1 if body.wallet_address else 0),
        has_vault=bool(body.auth_token or body.vault_user_id),
    )
    vault_token = _resolve_vault_token(body.auth_token, body.vault_user_id, store)
    outcome = collect_and_evaluate(
        user_key,
        social_client=social_client,
        wallet_client=wallet_client,
        vault_client=vault_client,
        username=body.username,
        wallet_address=body.wallet_address,
        wallet_addresses=body.wallet_addresses,
        email=body.email,
        vault_token=vault_token,
    )
    return JSONResponse(status_code=200, content=outcome.to_response(user_key))


@router.get("/get-score/{user_key}/{username}/{address}", response_model=ScoreResponse)
def get_score_by_path(
    user_key: str,
    username: str,
    address: str,
    social_client: SocialClient = Depends(get_social_client),
    wallet_client: WalletClient = Depends(get_wallet_client),
    vault_client: VaultClient = Depends(get_vault_client),
) -> JSONResponse:
    """Evaluate from social handle and wallet only."""
    user_key = user_key.strip()
    if not user_key:
        raise HTTPException(status_code=400, detail="userKey is required")
    bind_user(user_key).info("get_score_called", username=username, wallet=address[:16] + "...")
    outcome = collect_and_evaluate(
        user_key,
        social_client=social_client,
        wallet_client=wallet_client,
        vault_client=vault_client,
        username=username,
        wallet_address=address,
    )
    return JSONResponse(status_code=200, content=outcome.to_response(user_key))


@router.get("/total-score/{user_key}", response_model=TotalScoreResponse)
def get_total(user_key: str) -> TotalScoreResponse:
    """Stored totals; an unknown user returns zeros."""
    user_key = user_key.strip()
    if not user_key:
        raise HTTPException(status_code=400, detail="userKey is required")
    try:
        return TotalScoreResponse(**get_total_score(user_key))
    except PersistenceError as e:
        logger.exception("total_score_failed", user_key=user_key, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to read stored score") from e


@router.post("/vault/token", response_model=VaultTokenResponse, status_code=201)
def post_vault_token(body: VaultTokenRequest, store: TokenStore = Depends(get_token_store)) -> JSONResponse:
    """Register a vault auth token for later evaluations that only carry vaultUserId."""
    try:
        store.put(body.vault_user_id.strip(), body.auth_token.strip())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    logger.info("vault_token_stored", vault_user_id=body.vault_user_id, token=mask_secret(body.auth_token))
    return JSONResponse(
        status_code=201,
        content=VaultTokenResponse(vaultUserId=body.vault_user_id.strip(), stored=True).model_dump(),
    )


@router.delete("/vault/token/{vault_user_id}", status_code=204)
def delete_vault_token(vault_user_id: str, store: TokenStore = Depends(get_token_store)) -> Response:
    if not store.delete(vault_user_id.strip()):
        raise HTTPException(status_code=404, detail=f"No auth token found for user {vault_user_id}")
    logger.info("vault_token_deleted", vault_user_id=vault_user_id)
    return Response(status_code=204)
