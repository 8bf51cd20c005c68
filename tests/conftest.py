"""Shared test fixtures."""

from collections.abc import Callable
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest

from token_risk.analyzer.aggregator import AggregatedData
from token_risk.models.analysis import (
    HolderProfile,
    MarketSnapshot,
    SecurityProfile,
    TokenMetadata,
)

TOKEN_ADDRESS = "0x1111111111111111111111111111111111111111"


def _clean_metadata(**kwargs: Any) -> TokenMetadata:
    defaults: dict[str, Any] = {
        "contract_address": TOKEN_ADDRESS,
        "name": "Clean Token",
        "symbol": "CLN",
        "total_supply": "1000000000000000000000000000",  # 1e9 tokens
        "decimals": 18,
    }
    defaults.update(kwargs)
    return TokenMetadata(**defaults)


def _healthy_market(**kwargs: Any) -> MarketSnapshot:
    defaults: dict[str, Any] = {
        "price": Decimal("1.25"),
        "market_cap": Decimal("50000000"),
        "volume_24h": Decimal("2000000"),
        "price_change_24h": Decimal("3.5"),
        "circulating_supply": Decimal("40000000"),
        "total_supply": Decimal("1000000000"),
        "max_supply": None,
    }
    defaults.update(kwargs)
    return MarketSnapshot(**defaults)


def _clean_security(**kwargs: Any) -> SecurityProfile:
    defaults: dict[str, Any] = {
        "is_verified": True,
        "has_proxy_contract": False,
        "has_mint_function": False,
        "has_pause_function": False,
        "has_blacklist_function": False,
        "has_ownership_renounced": True,
    }
    defaults.update(kwargs)
    return SecurityProfile(**defaults)


def _healthy_holders(**kwargs: Any) -> HolderProfile:
    defaults: dict[str, Any] = {
        "total_holders": 5000,
        "top10_holders_percentage": 20.0,
        "creator_percentage": 2.0,
        "distribution_score": 72.0,
    }
    defaults.update(kwargs)
    return HolderProfile(**defaults)


@pytest.fixture
def make_data() -> Callable[..., AggregatedData]:
    """Factory for a clean aggregated bundle; override any part by keyword.

    ``market=None`` means unlisted. Pass dicts to tweak individual fields.
    """

    def _make(
        *,
        metadata: dict[str, Any] | TokenMetadata | None = None,
        market: dict[str, Any] | MarketSnapshot | None | str = "healthy",
        security: dict[str, Any] | SecurityProfile | None = None,
        holders: dict[str, Any] | HolderProfile | None = None,
    ) -> AggregatedData:
        if not isinstance(metadata, TokenMetadata):
            metadata = _clean_metadata(**(metadata or {}))
        if market == "healthy":
            market = _healthy_market()
        elif isinstance(market, dict):
            market = _healthy_market(**market)
        if not isinstance(security, SecurityProfile):
            security = _clean_security(**(security or {}))
        if not isinstance(holders, HolderProfile):
            holders = _healthy_holders(**(holders or {}))
        return AggregatedData(metadata=metadata, market=market, security=security, holders=holders)

    return _make


@pytest.fixture
def http_response() -> Callable[..., MagicMock]:
    """Build a mocked httpx response with a status code and JSON payload."""

    def _make(status_code: int = 200, payload: Any = None) -> MagicMock:
        resp = MagicMock()
        resp.status_code = status_code
        if isinstance(payload, Exception):
            resp.json.side_effect = payload
        else:
            resp.json.return_value = payload
        return resp

    return _make
