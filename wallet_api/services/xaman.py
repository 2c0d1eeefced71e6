"""
Xaman (Xumm) platform API: create sign-request payloads and read their resolution state.
Uses httpx async API; call from async route handlers.
Docs: https://docs.xaman.dev/concepts/payloads-sign-requests
"""
from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Optional, Protocol
from urllib.parse import quote

import httpx

from wallet_api.config import XAMAN_BASE_URL
from wallet_api.exceptions import ConfigurationError, XamanAPIError

logger = logging.getLogger(__name__)

# DestinationTag is a UInt32 on the ledger.
_MAX_DESTINATION_TAG = 4294967295


class PayloadService(Protocol):
    """What the HTTP layer needs from the wallet-payload service."""

    async def create_payload(self, spec: dict[str, Any]) -> dict[str, Any]: ...

    async def get_payload_status(self, uuid: str) -> dict[str, Any]: ...


class XamanClient:
    """
    Async client for the Xaman platform REST API, authenticated with an API key/secret pair.

    Each call opens its own short-lived httpx.AsyncClient, so instances hold no connection state
    and can be shared across concurrent requests.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = XAMAN_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key or not api_secret:
            raise ConfigurationError("Xaman API key and secret are required")
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Content-Type": "application/json",
                "X-API-Key": self._api_key,
                "X-API-Secret": self._api_secret,
            },
            transport=self._transport,
        )

    @staticmethod
    def _parse(response: httpx.Response) -> dict[str, Any]:
        if response.is_error:
            logger.error(
                "Xaman API error",
                extra={"status_code": response.status_code, "url": str(response.request.url)},
            )
            raise XamanAPIError(
                f"Xaman API error: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def create_payload(self, spec: dict[str, Any]) -> dict[str, Any]:
        """POST /payload. Returns the payload descriptor (uuid, next.always, refs.qr_png, ...)."""
        async with self._client() as client:
            response = await client.post("/payload", json=spec)
        result = self._parse(response)
        logger.info("Xaman payload created", extra={"uuid": result.get("uuid")})
        return result

    async def get_payload_status(self, uuid: str) -> dict[str, Any]:
        """GET /payload/{uuid}. Returns the full payload record (meta, response, ...)."""
        async with self._client() as client:
            response = await client.get(f"/payload/{quote(uuid, safe='')}")
        return self._parse(response)


def build_payment_payload(
    txjson: dict[str, Any],
    *,
    app_url: str,
    expire: int = 300,
    force_network: str = "DEVNET",
) -> dict[str, Any]:
    """
    Wrap a Payment txjson into a Xaman payload that Xaman submits itself once signed.
    A fresh random DestinationTag keeps repeated payments distinguishable; LastLedgerSequence
    is left to the wallet.
    """
    tx = {key: value for key, value in txjson.items() if key != "LastLedgerSequence"}
    tx["DestinationTag"] = secrets.randbelow(_MAX_DESTINATION_TAG)
    return_url = f"{app_url.rstrip('/')}/receipts"
    return {
        "txjson": tx,
        "options": {
            "submit": True,
            "expire": expire,
            "force_network": force_network,
            "return_url": {"web": return_url, "app": return_url},
        },
    }


def build_optin_payload(
    user_address: str,
    issuance_id: str,
    service_id: str,
    service_name: str,
    now_ms: Optional[int] = None,
) -> dict[str, Any]:
    """MPTokenAuthorize payload letting user_address hold tokens of issuance_id."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return {
        "txjson": {
            "TransactionType": "MPTokenAuthorize",
            "Account": user_address,
            "MPTokenIssuanceID": issuance_id,
        },
        "custom_meta": {
            "identifier": f"mptoken-optin-{service_id}-{now_ms}",
            "blob": {
                "purpose": "MPToken Opt-in Authorization",
                "service": service_name,
                "description": f"Authorize receiving {service_name} subscription tokens",
            },
        },
    }


def summarize_descriptor(descriptor: dict[str, Any]) -> dict[str, Any]:
    refs = descriptor.get("refs") or {}
    next_ = descriptor.get("next") or {}
    return {
        "uuid": descriptor.get("uuid"),
        "qr_code": refs.get("qr_png"),
        "deep_link": next_.get("always"),
        "websocket": refs.get("websocket_status"),
    }


def summarize_status(status: dict[str, Any]) -> dict[str, Any]:
    """Reduce a payload record to {resolved, signed, txid, account}."""
    meta = status.get("meta") or {}
    response = status.get("response") or {}
    return {
        "resolved": bool(meta.get("resolved")),
        "signed": meta.get("signed") is True,
        "txid": response.get("txid") or None,
        "account": response.get("account") or None,
    }
