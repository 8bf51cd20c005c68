"""Pydantic models for CoinGecko /coins/{platform}/contract/{address}."""

from decimal import Decimal

from pydantic import BaseModel


class CoinGeckoMarketData(BaseModel):
    """``market_data`` block. Quote maps are keyed by currency (``usd``)."""

    current_price: dict[str, Decimal | None] = {}
    market_cap: dict[str, Decimal | None] = {}
    total_volume: dict[str, Decimal | None] = {}
    ath: dict[str, Decimal | None] = {}
    ath_change_percentage: dict[str, Decimal | None] = {}
    atl: dict[str, Decimal | None] = {}
    atl_change_percentage: dict[str, Decimal | None] = {}

    price_change_percentage_24h: Decimal | None = None
    circulating_supply: Decimal | None = None
    total_supply: Decimal | None = None
    max_supply: Decimal | None = None

    model_config = {"extra": "ignore"}


class CoinGeckoCoin(BaseModel):
    id: str = ""
    symbol: str | None = None
    name: str | None = None
    market_data: CoinGeckoMarketData | None = None

    model_config = {"extra": "ignore"}
