"""Parallel fan-out to the four data sources with per-source failure isolation.

All four fetches run concurrently and are awaited until every one settles.
A source that raises or returns nothing is replaced by its category default;
no failure cancels a sibling and nothing is retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol, TypeVar

from loguru import logger

from token_risk.models.analysis import (
    HolderProfile,
    MarketSnapshot,
    SecurityProfile,
    TokenMetadata,
)

SOURCE_METADATA = "metadata"
SOURCE_MARKET = "market"
SOURCE_SECURITY = "security"
SOURCE_HOLDERS = "holders"

T = TypeVar("T")


class MetadataSource(Protocol):
    async def get_token_metadata(self, address: str) -> TokenMetadata | None: ...


class MarketSource(Protocol):
    async def get_market_snapshot(self, address: str) -> MarketSnapshot | None: ...


class SecuritySource(Protocol):
    async def get_security_profile(self, address: str) -> SecurityProfile | None: ...


class HolderSource(Protocol):
    async def get_holder_profile(self, address: str) -> HolderProfile | None: ...


@dataclass(frozen=True)
class AggregatedData:
    """The four bundles for one address, defaults already substituted.

    ``market`` is None when the token has no listing or the lookup failed.
    ``unavailable_sources`` is informational and never scored.
    """

    metadata: TokenMetadata
    market: MarketSnapshot | None
    security: SecurityProfile
    holders: HolderProfile
    unavailable_sources: tuple[str, ...] = ()


class Aggregator:
    def __init__(
        self,
        metadata_source: MetadataSource,
        market_source: MarketSource,
        security_source: SecuritySource,
        holder_source: HolderSource,
    ) -> None:
        self._metadata_source = metadata_source
        self._market_source = market_source
        self._security_source = security_source
        self._holder_source = holder_source

    async def fetch_metadata(self, address: str) -> TokenMetadata:
        """Metadata alone (used by the allowlist path), placeholder on failure."""
        try:
            metadata = await self._metadata_source.get_token_metadata(address)
        except Exception as e:
            logger.warning(f"[AGGREGATOR] metadata source raised for {address[:10]}: {e!r}")
            return TokenMetadata.placeholder(address)
        if metadata is None:
            logger.debug(f"[AGGREGATOR] metadata source returned no data for {address[:10]}")
            return TokenMetadata.placeholder(address)
        return metadata

    async def gather(self, address: str) -> AggregatedData:
        results = await asyncio.gather(
            self._metadata_source.get_token_metadata(address),
            self._market_source.get_market_snapshot(address),
            self._security_source.get_security_profile(address),
            self._holder_source.get_holder_profile(address),
            return_exceptions=True,
        )
        labels = (SOURCE_METADATA, SOURCE_MARKET, SOURCE_SECURITY, SOURCE_HOLDERS)
        metadata, market, security, holders = (
            _settle(label, address, r) for label, r in zip(labels, results)
        )
        unavailable = tuple(
            label for label, v in zip(labels, (metadata, market, security, holders)) if v is None
        )

        if metadata is None:
            metadata = TokenMetadata.placeholder(address)
        if security is None:
            security = SecurityProfile.pessimistic()
        if holders is None:
            holders = HolderProfile.pessimistic()

        if unavailable:
            logger.info(f"[AGGREGATOR] {address[:10]} defaults used for: {', '.join(unavailable)}")

        return AggregatedData(
            metadata=metadata,
            market=market,
            security=security,
            holders=holders,
            unavailable_sources=unavailable,
        )


def _settle(label: str, address: str, result: T | BaseException) -> T | None:
    """Turn a leaked exception into None (logged)."""
    if isinstance(result, BaseException):
        logger.warning(f"[AGGREGATOR] {label} source raised for {address[:10]}: {result!r}")
        return None
    if result is None:
        logger.debug(f"[AGGREGATOR] {label} source returned no data for {address[:10]}")
    return result
