from __future__ import annotations

from types import SimpleNamespace

import pytest

from wallet_api.services.xrpl_mptoken import holds_issuance, is_valid_xrpl_address, list_mptoken_holdings

ACCOUNT = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"


class _PagedLedger:
    """Serves account_objects pages; results are xrpl-py style objects with a .result dict."""

    def __init__(self, pages) -> None:
        self.pages = list(pages)
        self.markers = []

    async def request(self, req):
        self.markers.append(req.marker)
        return SimpleNamespace(result=self.pages.pop(0))


def test_is_valid_xrpl_address():
    assert is_valid_xrpl_address(ACCOUNT)
    assert is_valid_xrpl_address("X7AcgcsBL6XDcUb289X4mJ8djcdyKaB5hJDWMArnXr61cqZ")
    assert not is_valid_xrpl_address("")
    assert not is_valid_xrpl_address("0x52908400098527886E0F7030069857D2E4169EE7")
    assert not is_valid_xrpl_address(None)


@pytest.mark.asyncio
async def test_holdings_follow_marker():
    ledger = _PagedLedger(
        [
            {
                "account_objects": [{"LedgerEntryType": "MPToken", "MPTokenIssuanceID": "aa", "MPTAmount": "1"}],
                "marker": "page-2",
            },
            {"account_objects": [{"LedgerEntryType": "MPToken", "MPTokenIssuanceID": "BB"}]},
        ]
    )

    holdings = await list_mptoken_holdings(ledger, ACCOUNT)

    assert holdings == [
        {"mpt_issuance_id": "AA", "amount": 1},
        {"mpt_issuance_id": "BB", "amount": 0},
    ]
    assert ledger.markers == [None, "page-2"]


@pytest.mark.asyncio
async def test_holdings_rpc_error_is_empty():
    ledger = _PagedLedger([{"error": "actNotFound", "status": "error"}])

    assert await list_mptoken_holdings(ledger, ACCOUNT) == []


@pytest.mark.asyncio
async def test_holdings_bad_amount_counts_as_zero():
    ledger = _PagedLedger(
        [{"account_objects": [{"LedgerEntryType": "MPToken", "MPTokenIssuanceID": "CC", "MPTAmount": "x"}]}]
    )

    holdings = await list_mptoken_holdings(ledger, ACCOUNT)

    assert holdings == [{"mpt_issuance_id": "CC", "amount": 0}]
    assert not holds_issuance(holdings, "cc")


def test_holds_issuance():
    holdings = [{"mpt_issuance_id": "AA", "amount": 2}]
    assert holds_issuance(holdings, " aa ")
    assert not holds_issuance(holdings, "BB")
    assert not holds_issuance(holdings, None)
