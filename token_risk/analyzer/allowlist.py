"""Known-safe token addresses that bypass full analysis."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

# Ethereum mainnet blue chips (lowercase)
DEFAULT_ALLOWLIST: dict[str, str] = {
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2": "WETH",
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": "USDC",
    "0xdac17f958d2ee523a2206206994597c13d831ec7": "USDT",
    "0x6b175474e89094c44da98b954eedeac495271d0f": "DAI",
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599": "WBTC",
    "0x514910771af9ca656af840dff83e8264ecf986ca": "LINK",
    "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984": "UNI",
    "0x7d1afa7b718fb893db30a3abc0cfc608aacfebb0": "MATIC",
    "0x95ad61b0a150d79219dcf64e1e6cc01f0b64c4ce": "SHIB",
    "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9": "AAVE",
}


@dataclass(frozen=True)
class Allowlist:
    """Immutable set of pre-vetted addresses, compared case-insensitively."""

    addresses: frozenset[str]

    @classmethod
    def from_addresses(cls, addresses: Iterable[str]) -> Allowlist:
        return cls(frozenset(a.strip().lower() for a in addresses if a and a.strip()))

    @classmethod
    def default(cls, extra: Iterable[str] = ()) -> Allowlist:
        return cls.from_addresses([*DEFAULT_ALLOWLIST, *extra])

    @classmethod
    def from_csv(cls, raw: str) -> Allowlist:
        """Defaults plus a comma-separated list of extra addresses."""
        return cls.default(raw.split(",") if raw else ())

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str):
            return False
        return address.strip().lower() in self.addresses

    def __len__(self) -> int:
        return len(self.addresses)
