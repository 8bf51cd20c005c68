"""Tatum smart-contract invocation client: ERC-20 metadata reads.

Each of the four reads (name, symbol, decimals, totalSupply) fails on its
own and falls back to a placeholder; the metadata bundle always builds.
"""

import asyncio

import httpx
from loguru import logger
from pydantic import ValidationError

from token_risk.models.analysis import (
    DEFAULT_DECIMALS,
    PLACEHOLDER_NAME,
    PLACEHOLDER_SUPPLY,
    PLACEHOLDER_SYMBOL,
    TokenMetadata,
)
from token_risk.parsers.tatum.models import ERC20_METHOD_ABIS, TatumCallResult

BASE_URL = "https://api.tatum.io/v3"
METADATA_METHODS = ("name", "symbol", "decimals", "totalSupply")


class TatumApiError(Exception):
    pass


class TatumClient:
    """Async client for Tatum's read-only contract calls."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        chain: str = "ethereum",
        timeout: float = 10.0,
    ) -> None:
        self._chain = chain
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"x-api-key": api_key, "Content-Type": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def call_method(self, address: str, method: str) -> str:
        """Invoke a parameterless ERC-20 view method and return its raw value.

        Raises TatumApiError on transport errors, non-200 responses and
        responses that do not match the v3 schema.
        """
        abi = ERC20_METHOD_ABIS.get(method)
        if abi is None:
            raise TatumApiError(f"Unknown method: {method}")

        try:
            resp = await self._client.post(
                f"/{self._chain}/smartcontract",
                json={
                    "contractAddress": address,
                    "methodName": method,
                    "methodABI": abi,
                    "params": [],
                },
            )
        except httpx.HTTPError as e:
            raise TatumApiError(f"{method}: {type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise TatumApiError(f"{method}: HTTP {resp.status_code}")

        try:
            result = TatumCallResult.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise TatumApiError(f"{method}: unexpected response schema") from e
        return str(result.data)

    async def get_token_metadata(self, address: str) -> TokenMetadata:
        """Read name/symbol/decimals/totalSupply concurrently."""
        results = await asyncio.gather(
            *(self.call_method(address, m) for m in METADATA_METHODS),
            return_exceptions=True,
        )

        values: dict[str, str | None] = {}
        for method, r in zip(METADATA_METHODS, results):
            if isinstance(r, BaseException):
                logger.debug(f"[TATUM] {method}() failed for {address[:10]}: {r}")
                values[method] = None
            else:
                values[method] = r

        return TokenMetadata(
            contract_address=address,
            name=_parse_text(values["name"], PLACEHOLDER_NAME),
            symbol=_parse_text(values["symbol"], PLACEHOLDER_SYMBOL),
            decimals=_parse_decimals(values["decimals"]),
            total_supply=_parse_supply(values["totalSupply"]),
        )


def _parse_text(val: str | None, placeholder: str) -> str:
    if val is None or not val.strip():
        return placeholder
    return val.strip()


def _parse_decimals(val: str | None) -> int:
    """uint8 decimals; anything out of range falls back to 18."""
    if val is None:
        return DEFAULT_DECIMALS
    try:
        decimals = int(val.strip())
    except ValueError:
        return DEFAULT_DECIMALS
    if not 0 <= decimals <= 255:
        return DEFAULT_DECIMALS
    return decimals


def _parse_supply(val: str | None) -> str:
    """uint256 as a decimal-digit string; anything else becomes "0"."""
    if val is None:
        return PLACEHOLDER_SUPPLY
    s = val.strip()
    if not (s.isascii() and s.isdigit()):
        return PLACEHOLDER_SUPPLY
    return str(int(s))
