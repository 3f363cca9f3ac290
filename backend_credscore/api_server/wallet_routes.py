"""
FastAPI router: wallet link lifecycle.

POST /wallet/connect                link wallets to a user (creates the user record)
POST /wallet/disconnect             unlink one or all wallets and recompute the stored total
GET  /wallet/status/{user_key}      linked wallets and their scores
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from backend_credscore.core.exceptions import PersistenceError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.database import connect_wallet, disconnect_wallet, get_wallet_status

logger = get_logger(__name__)

router = APIRouter(prefix="/wallet", tags=["Wallet"])


class WalletConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_key: str | None = Field(None, alias="userKey")
    wallet_address: str | None = Field(None, alias="walletAddress", description="Becomes the primary wallet")
    wallet_addresses: list[str] = Field(default_factory=list, alias="walletAddresses")


class WalletDisconnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_key: str | None = Field(None, alias="userKey")
    wallet_address: str | None = Field(None, alias="walletAddress", description="Omit to unlink every wallet")


class LinkedWallet(BaseModel):
    wallet: str
    score: float


class WalletStatusResponse(BaseModel):
    success: bool = True
    userKey: str
    walletConnected: bool = False
    walletAddress: str | None = None
    wallets: list[LinkedWallet] = Field(default_factory=list)
    totalScore: float = 0.0


@router.post("/connect", response_model=WalletStatusResponse)
def post_connect(body: WalletConnectRequest) -> WalletStatusResponse:
    user_key = (body.user_key or "").strip()
    wallet_address = (body.wallet_address or "").strip()
    if not user_key or not wallet_address:
        raise HTTPException(status_code=400, detail="userKey and walletAddress are required")
    try:
        status = connect_wallet(user_key, wallet_address, body.wallet_addresses)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail="Failed to connect wallet") from e
    return WalletStatusResponse(**status)


@router.post("/disconnect", response_model=WalletStatusResponse)
def post_disconnect(body: WalletDisconnectRequest) -> WalletStatusResponse:
    """Unlink wallets; the stored total drops their scores."""
    user_key = (body.user_key or "").strip()
    if not user_key:
        raise HTTPException(status_code=400, detail="userKey is required")
    try:
        status = disconnect_wallet(user_key, body.wallet_address)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail="Failed to disconnect wallet") from e
    if status is None:
        raise HTTPException(status_code=404, detail="User not found")
    return WalletStatusResponse(**status)


@router.get("/status/{user_key}", response_model=WalletStatusResponse)
def get_status(user_key: str) -> WalletStatusResponse:
    try:
        status = get_wallet_status(user_key.strip())
    except PersistenceError as e:
        logger.exception("wallet_status_failed", user_key=user_key, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to read wallet status") from e
    if status is None:
        raise HTTPException(status_code=404, detail="User not found")
    return WalletStatusResponse(**status)
