"""
XRPL MPToken holdings: read the MPToken ledger entries owned by an account.
Uses xrpl-py async API (AsyncJsonRpcClient.request) so it can be awaited from async route handlers.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from xrpl.asyncio.clients import AsyncJsonRpcClient
from xrpl.models.requests import AccountObjects

logger = logging.getLogger(__name__)

# XRPL classic address: r + base58 (25 chars). X-address: X + base58 (47 chars).
_CLASSIC_PATTERN = re.compile(r"^r[1-9A-HJ-NP-Za-km-z]{24,33}$")
_XADDRESS_PATTERN = re.compile(r"^X[1-9A-HJ-NP-Za-km-z]{46,47}$")


def is_valid_xrpl_address(address: str) -> bool:
    """Return True if address looks like a valid XRPL classic or X-address."""
    if not address or not isinstance(address, str):
        return False
    return bool(_CLASSIC_PATTERN.match(address) or _XADDRESS_PATTERN.match(address))


def build_ledger_client(url: str) -> AsyncJsonRpcClient:
    return AsyncJsonRpcClient(url)


def _result_of(resp: Any) -> Any:
    return getattr(resp, "result", resp) if not isinstance(resp, dict) else resp.get("result", resp)


def _parse_amount(raw: Any) -> int:
    try:
        return int(raw or "0", 10)
    except (TypeError, ValueError):
        return 0


async def list_mptoken_holdings(client: Any, account: str) -> list[dict[str, Any]]:
    """
    Return [{"mpt_issuance_id", "amount"}, ...] for every MPToken entry owned by account,
    following the account_objects marker until the last page.
    An RPC error in the result (e.g. actNotFound for an unfunded account) yields an empty list;
    transport errors propagate.
    """
    holdings: list[dict[str, Any]] = []
    marker = None
    while True:
        req = AccountObjects(account=account, type="mptoken", ledger_index="validated", marker=marker)
        resp = await client.request(req)
        result = _result_of(resp)
        if not result:
            logger.error("list_mptoken_holdings: no result for %s", account[:16])
            return holdings
        if isinstance(result, dict) and result.get("error"):
            logger.info(
                "list_mptoken_holdings: RPC error for %s: %s",
                account[:16],
                result.get("error"),
            )
            return holdings
        for obj in result.get("account_objects") or []:
            if obj.get("LedgerEntryType") != "MPToken":
                continue
            holdings.append(
                {
                    "mpt_issuance_id": (obj.get("MPTokenIssuanceID") or "").strip().upper(),
                    "amount": _parse_amount(obj.get("MPTAmount")),
                }
            )
        marker = result.get("marker")
        if not marker:
            return holdings


def holds_issuance(holdings: list[dict[str, Any]], issuance_id: Optional[str]) -> bool:
    """True if holdings contain at least 1 unit of issuance_id (case-insensitive)."""
    issuance_upper = (issuance_id or "").strip().upper()
    if not issuance_upper:
        return False
    return any(h["mpt_issuance_id"] == issuance_upper and h["amount"] >= 1 for h in holdings)
