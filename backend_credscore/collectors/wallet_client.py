"""
Wallet summary collector (Moralis deep-index API).

Builds the wallet summary mapping the normalizer reads ("Native Balance Result",
"Token Balances Result", ...) from several Moralis calls. Each call degrades to
its default on failure; only when every call fails is the whole fetch an error.
"""

from __future__ import annotations

from typing import Any, Callable

import requests

from backend_credscore.collectors.http import request_json
from backend_credscore.config import Settings, get_settings
from backend_credscore.core.exceptions import CollectorError, ConfigurationError
from backend_credscore.credscore_logging import get_logger
from backend_credscore.scoring.normalizer import (
    WALLET_ACTIVE_CHAINS,
    WALLET_DEFI_POSITIONS,
    WALLET_NATIVE_BALANCE,
    WALLET_NFTS,
    WALLET_RESOLVED_ADDRESS,
    WALLET_TOKEN_BALANCES,
    WALLET_TX_COUNT,
    WALLET_UNIQUE_TOKENS,
)

logger = get_logger(__name__)

SOURCE = "wallet"
WEI_PER_ETH = 10**18
# Sub-requests that must not all fail (reverse domain lookup excluded)
CORE_PART_COUNT = 6


def empty_wallet_summary() -> dict[str, Any]:
    """Summary used when no wallet is connected or the fetch failed."""
    return {
        WALLET_NATIVE_BALANCE: 0,
        WALLET_TOKEN_BALANCES: [],
        WALLET_ACTIVE_CHAINS: {"activeChains": []},
        WALLET_DEFI_POSITIONS: [],
        WALLET_RESOLVED_ADDRESS: None,
        WALLET_NFTS: [],
        WALLET_TX_COUNT: 0,
        WALLET_UNIQUE_TOKENS: 0,
    }


def _to_int(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _list_from(payload: Any, key: str = "result") -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []


class WalletClient:
    """Fetches a wallet summary for an EVM address."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None) -> None:
        self._settings = settings or get_settings()
        self._session = session

    def _get(self, path: str, params: Any = None) -> Any:
        return request_json(
            SOURCE,
            "GET",
            f"{self._settings.moralis_base_url}{path}",
            headers={"X-API-Key": self._settings.moralis_api_key, "accept": "application/json"},
            params=params,
            timeout=self._settings.http_timeout_sec,
            session=self._session,
        )

    @property
    def primary_chain(self) -> str:
        chains = self._settings.wallet_chains
        return chains[0] if chains else "eth"

    def native_balance(self, address: str) -> float:
        payload = self._get(f"/{address}/balance", {"chain": self.primary_chain})
        wei = _to_int(payload.get("balance") if isinstance(payload, dict) else 0)
        return wei / WEI_PER_ETH

    def token_balances(self, address: str) -> list[Any]:
        return _list_from(self._get(f"/{address}/erc20", {"chain": self.primary_chain}))

    def active_chains(self, address: str) -> list[Any]:
        payload = self._get(f"/wallets/{address}/chains", {"chains": list(self._settings.wallet_chains)})
        return _list_from(payload, "active_chains")

    def defi_positions(self, address: str) -> list[Any]:
        return _list_from(self._get(f"/wallets/{address}/defi/positions", {"chain": self.primary_chain}))

    def resolved_domain(self, address: str) -> str | None:
        payload = self._get(f"/resolve/{address}/reverse")
        name = payload.get("name") if isinstance(payload, dict) else None
        return name or None

    def nfts(self, address: str) -> list[Any]:
        return _list_from(self._get(f"/{address}/nft", {"chain": self.primary_chain}))

    def transaction_count(self, address: str) -> int:
        payload = self._get(f"/wallets/{address}/stats", {"chain": self.primary_chain})
        transactions = payload.get("transactions") if isinstance(payload, dict) else None
        return _to_int(transactions.get("total") if isinstance(transactions, dict) else 0)

    def fetch_wallet_summary(self, address: str) -> dict[str, Any]:
        address = (address or "").strip()
        if not address:
            raise CollectorError(SOURCE, "wallet address is required")
        if not self._settings.moralis_api_key:
            raise ConfigurationError(SOURCE, "MORALIS_API_KEY is not configured")

        summary = empty_wallet_summary()
        failures: list[str] = []

        def _part(key: str, fetch: Callable[[str], Any], default: Any) -> Any:
            try:
                return fetch(address)
            except CollectorError as e:
                failures.append(key)
                logger.warning("wallet_part_failed", wallet=address[:16] + "...", part=key, error=str(e))
                return default

        tokens = _part(WALLET_TOKEN_BALANCES, self.token_balances, [])
        summary[WALLET_TOKEN_BALANCES] = tokens
        summary[WALLET_NATIVE_BALANCE] = _part(WALLET_NATIVE_BALANCE, self.native_balance, 0)
        summary[WALLET_ACTIVE_CHAINS] = {
            "activeChains": _part(WALLET_ACTIVE_CHAINS, self.active_chains, []),
        }
        summary[WALLET_DEFI_POSITIONS] = _part(WALLET_DEFI_POSITIONS, self.defi_positions, [])
        summary[WALLET_RESOLVED_ADDRESS] = _part(WALLET_RESOLVED_ADDRESS, self.resolved_domain, None)
        summary[WALLET_NFTS] = _part(WALLET_NFTS, self.nfts, [])
        summary[WALLET_TX_COUNT] = _part(WALLET_TX_COUNT, self.transaction_count, 0)
        summary[WALLET_UNIQUE_TOKENS] = len({
            t.get("token_address") for t in tokens if isinstance(t, dict) and t.get("token_address")
        })

        # The reverse lookup 404s for wallets without a domain; it alone does not count
        if len([f for f in failures if f != WALLET_RESOLVED_ADDRESS]) == CORE_PART_COUNT:
            raise CollectorError(SOURCE, "all wallet sub-requests failed")
        logger.info(
            "wallet_summary_fetched",
            wallet=address[:16] + "...",
            failed_parts=failures,
            tokens=len(tokens),
        )
        return summary
