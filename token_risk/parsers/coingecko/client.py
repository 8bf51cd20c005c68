"""CoinGecko market data client: contract-address lookup.

A 404 means the token has no listing: that is an ordinary outcome and maps
to ``None`` just like a failed request.
"""

from decimal import Decimal

import httpx
from loguru import logger
from pydantic import ValidationError

from token_risk.models.analysis import MarketSnapshot
from token_risk.parsers.coingecko.models import CoinGeckoCoin, CoinGeckoMarketData

BASE_URL = "https://api.coingecko.com/api/v3"
QUOTE_CURRENCY = "usd"


class CoinGeckoApiError(Exception):
    pass


class CoinGeckoClient:
    """Async REST client for CoinGecko's public (or demo-key) API."""

    def __init__(
        self,
        api_key: str = "",
        base_url: str = BASE_URL,
        platform: str = "ethereum",
        timeout: float = 10.0,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._platform = platform
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_coin(self, address: str) -> CoinGeckoCoin | None:
        """Fetch the coin document for a contract. None when unlisted."""
        try:
            resp = await self._client.get(
                f"/coins/{self._platform}/contract/{address.lower()}",
                params={
                    "localization": "false",
                    "tickers": "false",
                    "community_data": "false",
                    "developer_data": "false",
                },
            )
        except httpx.HTTPError as e:
            raise CoinGeckoApiError(f"{type(e).__name__}: {e}") from e

        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise CoinGeckoApiError(f"HTTP {resp.status_code}")

        try:
            return CoinGeckoCoin.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise CoinGeckoApiError("unexpected response schema") from e

    async def get_market_snapshot(self, address: str) -> MarketSnapshot | None:
        """Market snapshot in USD, or None when unlisted/unavailable."""
        try:
            coin = await self.get_coin(address)
        except CoinGeckoApiError as e:
            logger.warning(f"[COINGECKO] Market lookup failed for {address[:10]}: {e}")
            return None

        if coin is None:
            logger.debug(f"[COINGECKO] {address[:10]} not listed")
            return None
        if coin.market_data is None:
            logger.debug(f"[COINGECKO] {address[:10]} listed without market data")
            return None

        try:
            return _to_snapshot(coin.market_data)
        except ValueError as e:
            logger.warning(f"[COINGECKO] Malformed market data for {address[:10]}: {e}")
            return None


def _quote(values: dict[str, Decimal | None]) -> Decimal | None:
    return values.get(QUOTE_CURRENCY)


def _non_negative(name: str, value: Decimal | None) -> Decimal:
    if value is None:
        return Decimal(0)
    if value < 0:
        raise ValueError(f"{name} is negative ({value})")
    return value


def _to_snapshot(md: CoinGeckoMarketData) -> MarketSnapshot | None:
    """Map the USD quotes onto a MarketSnapshot.

    Missing price, market cap or volume means the listing has no usable
    quote (None). Negative monetary values raise ValueError.
    """
    price = _quote(md.current_price)
    market_cap = _quote(md.market_cap)
    volume = _quote(md.total_volume)
    if price is None or market_cap is None or volume is None:
        return None

    max_supply = md.max_supply
    if max_supply is not None:
        max_supply = _non_negative("max_supply", max_supply)

    return MarketSnapshot(
        price=_non_negative("price", price),
        market_cap=_non_negative("market_cap", market_cap),
        volume_24h=_non_negative("volume_24h", volume),
        price_change_24h=md.price_change_percentage_24h or Decimal(0),
        circulating_supply=_non_negative("circulating_supply", md.circulating_supply),
        total_supply=_non_negative("total_supply", md.total_supply),
        max_supply=max_supply,
        ath=_non_negative("ath", _quote(md.ath)),
        ath_change_percentage=_quote(md.ath_change_percentage) or Decimal(0),
        atl=_non_negative("atl", _quote(md.atl)),
        atl_change_percentage=_quote(md.atl_change_percentage) or Decimal(0),
    )
