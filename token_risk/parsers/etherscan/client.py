"""Etherscan V2 client: contract verification/ABI flags and holder distribution.

Two adapters share one client:
- get_security_profile: contract/getsourcecode (+ owner() via proxy/eth_call)
- get_holder_profile:   token/tokenholderlist (+ supply, holder count, creator)

Both return None when their primary lookup fails; supplementary lookups
fail independently and fall back to pessimistic estimates.
"""

import asyncio
import json
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from token_risk.models.analysis import HolderProfile, SecurityProfile
from token_risk.parsers.distribution import distribution_score
from token_risk.parsers.etherscan.models import (
    AbiItem,
    ContractCreation,
    EtherscanProxyResponse,
    EtherscanResponse,
    SourceCodeEntry,
    TokenHolder,
)
from token_risk.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api.etherscan.io/v2/api"
UNVERIFIED_ABI = "Contract source code not verified"
OWNER_SELECTOR = "0x8da5cb5b"  # owner()
ZERO_ADDRESS = "0x" + "0" * 40

MINT_KEYWORDS = ("mint",)
PAUSE_KEYWORDS = ("pause",)
BLACKLIST_KEYWORDS = ("blacklist", "blocklist", "denylist", "isbot", "setbot", "addbot", "bots")
UPGRADE_FUNCTIONS = {"upgradeto", "upgradetoandcall", "implementation", "changeimplementation"}
OWNER_FUNCTIONS = {"owner", "getowner"}


class EtherscanApiError(Exception):
    pass


class EtherscanClient:
    """Async client for the Etherscan V2 multichain API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        chain_id: int = 1,
        timeout: float = 10.0,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 4.0,
        holder_page_size: int = 100,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._chain_id = chain_id
        self._holder_page_size = holder_page_size
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(self, params: dict[str, Any]) -> Any:
        await self._rate_limiter.acquire()
        query = {"chainid": self._chain_id, **params, "apikey": self._api_key}
        try:
            resp = await self._client.get(self._base_url, params=query)
        except httpx.HTTPError as e:
            raise EtherscanApiError(f"{type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise EtherscanApiError(f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise EtherscanApiError("response is not JSON") from e

    async def _query(self, module: str, action: str, **params: Any) -> Any:
        """Run a module/action query and return ``result`` on status "1"."""
        data = await self._get_json({"module": module, "action": action, **params})
        try:
            envelope = EtherscanResponse.model_validate(data)
        except ValidationError as e:
            raise EtherscanApiError(f"{action}: unexpected envelope") from e
        if envelope.status != "1":
            raise EtherscanApiError(f"{action}: {envelope.message} ({envelope.result})")
        return envelope.result

    # --- Security -------------------------------------------------------

    async def get_source_entry(self, address: str) -> SourceCodeEntry:
        result = await self._query("contract", "getsourcecode", address=address)
        if not isinstance(result, list) or len(result) != 1:
            raise EtherscanApiError("getsourcecode: expected exactly one entry")
        try:
            return SourceCodeEntry.model_validate(result[0])
        except ValidationError as e:
            raise EtherscanApiError("getsourcecode: unexpected entry schema") from e

    async def get_owner(self, address: str) -> str | None:
        """Call owner() through the proxy module. None when not callable."""
        data = await self._get_json(
            {"module": "proxy", "action": "eth_call", "to": address, "data": OWNER_SELECTOR, "tag": "latest"}
        )
        try:
            resp = EtherscanProxyResponse.model_validate(data)
        except ValidationError as e:
            raise EtherscanApiError("eth_call: unexpected response schema") from e
        return _parse_owner_word(resp.result)

    async def _ownership_renounced(self, address: str) -> bool:
        try:
            owner = await self.get_owner(address)
        except EtherscanApiError as e:
            logger.debug(f"[ETHERSCAN] owner() lookup failed for {address[:10]}: {e}")
            return False
        return owner == ZERO_ADDRESS

    async def get_security_profile(self, address: str) -> SecurityProfile | None:
        """Security flags from verified source; pessimistic when unverified."""
        try:
            entry = await self.get_source_entry(address)
            abi = _parse_abi(entry)
        except EtherscanApiError as e:
            logger.warning(f"[ETHERSCAN] Source lookup failed for {address[:10]}: {e}")
            return None

        if abi is None:
            logger.debug(f"[ETHERSCAN] {address[:10]} source not verified")
            renounced = await self._ownership_renounced(address)
            return SecurityProfile.pessimistic(has_ownership_renounced=renounced)

        names = _function_names(abi)
        if names & OWNER_FUNCTIONS:
            renounced = await self._ownership_renounced(address)
        else:
            renounced = True  # no owner role at all

        return SecurityProfile(
            is_verified=True,
            has_proxy_contract=entry.Proxy == "1" or bool(names & UPGRADE_FUNCTIONS),
            has_mint_function=_has_mutating(abi, MINT_KEYWORDS),
            has_pause_function=_has_mutating(abi, PAUSE_KEYWORDS),
            has_blacklist_function=any(kw in n for n in names for kw in BLACKLIST_KEYWORDS),
            has_ownership_renounced=renounced,
        )

    # --- Holders --------------------------------------------------------

    async def get_top_holders(self, address: str) -> list[TokenHolder]:
        result = await self._query(
            "token",
            "tokenholderlist",
            contractaddress=address,
            page=1,
            offset=self._holder_page_size,
        )
        if not isinstance(result, list):
            raise EtherscanApiError("tokenholderlist: expected a list")
        try:
            return [TokenHolder.model_validate(row) for row in result]
        except ValidationError as e:
            raise EtherscanApiError("tokenholderlist: unexpected row schema") from e

    async def get_token_supply(self, address: str) -> int:
        result = await self._query("stats", "tokensupply", contractaddress=address)
        return _parse_int(result, "tokensupply")

    async def get_holder_count(self, address: str) -> int:
        result = await self._query("token", "tokenholdercount", contractaddress=address)
        return _parse_int(result, "tokenholdercount")

    async def get_creator(self, address: str) -> str:
        result = await self._query("contract", "getcontractcreation", contractaddresses=address)
        if not isinstance(result, list) or not result:
            raise EtherscanApiError("getcontractcreation: empty result")
        try:
            return ContractCreation.model_validate(result[0]).contractCreator
        except ValidationError as e:
            raise EtherscanApiError("getcontractcreation: unexpected entry schema") from e

    async def get_holder_profile(self, address: str) -> HolderProfile | None:
        """Holder distribution from the first page of the holder list."""
        try:
            holders = await self.get_top_holders(address)
        except EtherscanApiError as e:
            logger.warning(f"[ETHERSCAN] Holder list failed for {address[:10]}: {e}")
            return None
        if not holders:
            logger.debug(f"[ETHERSCAN] {address[:10]} holder list empty")
            return None

        supply, count, creator = await asyncio.gather(
            self.get_token_supply(address),
            self.get_holder_count(address),
            self.get_creator(address),
            return_exceptions=True,
        )
        for label, r in (("supply", supply), ("holder_count", count), ("creator", creator)):
            if isinstance(r, BaseException):
                logger.debug(f"[ETHERSCAN] {label} lookup failed for {address[:10]}: {r}")

        return build_holder_profile(
            holders,
            total_supply=None if isinstance(supply, BaseException) else supply,
            holder_count=None if isinstance(count, BaseException) else count,
            creator=None if isinstance(creator, BaseException) else creator,
            page_size=self._holder_page_size,
        )


def build_holder_profile(
    holders: list[TokenHolder],
    *,
    total_supply: int | None,
    holder_count: int | None,
    creator: str | None,
    page_size: int,
) -> HolderProfile | None:
    """Summarize one page of holders.

    Missing supply falls back to the listed total (overstates concentration).
    Missing holder count falls back to the listed rows (understates holders).
    Creator share: exact when listed; 0 when the page is the complete list;
    otherwise bounded by the smallest listed share; unknown creator takes
    the largest listed share.
    """
    balances = sorted((h.TokenHolderQuantity for h in holders if h.TokenHolderQuantity > 0), reverse=True)
    if not balances:
        return None
    listed_total = sum(balances)
    if not total_supply or total_supply < listed_total:
        total_supply = listed_total
    if total_supply <= 0:
        return None

    def pct(amount: int) -> float:
        return round(min(amount / total_supply * 100, 100.0), 2)

    if creator:
        creator_lc = creator.lower()
        match = next((h for h in holders if h.TokenHolderAddress.lower() == creator_lc), None)
        if match is not None:
            creator_pct = pct(match.TokenHolderQuantity)
        elif len(holders) < page_size:
            creator_pct = 0.0
        else:
            creator_pct = pct(balances[-1])
    else:
        creator_pct = pct(balances[0])

    listed_rows = len(holders)
    total_holders = holder_count if holder_count and holder_count >= listed_rows else listed_rows

    return HolderProfile(
        total_holders=total_holders,
        top10_holders_percentage=pct(sum(balances[:10])),
        creator_percentage=creator_pct,
        distribution_score=distribution_score(balances),
    )


def _parse_abi(entry: SourceCodeEntry) -> list[AbiItem] | None:
    """Decoded ABI of a verified contract, None when unverified.

    A verified entry whose ABI does not decode raises EtherscanApiError.
    """
    if not entry.SourceCode or not entry.ABI or entry.ABI == UNVERIFIED_ABI:
        return None
    try:
        raw = json.loads(entry.ABI)
    except ValueError as e:
        raise EtherscanApiError("getsourcecode: ABI is not JSON") from e
    if not isinstance(raw, list):
        raise EtherscanApiError("getsourcecode: ABI is not a list")
    try:
        return [AbiItem.model_validate(item) for item in raw]
    except ValidationError as e:
        raise EtherscanApiError("getsourcecode: unexpected ABI item schema") from e


def _function_names(abi: list[AbiItem]) -> set[str]:
    return {item.name.lower() for item in abi if item.type == "function"}


def _has_mutating(abi: list[AbiItem], keywords: tuple[str, ...]) -> bool:
    """True if a state-changing function name contains any keyword."""
    for item in abi:
        if item.type != "function":
            continue
        if item.stateMutability in ("view", "pure") or item.constant is True:
            continue
        name = item.name.lower()
        if any(kw in name for kw in keywords):
            return True
    return False


def _parse_owner_word(raw: str) -> str | None:
    """Decode an ABI-encoded address word; None for empty/short returns."""
    hex_body = raw[2:] if raw.startswith("0x") else raw
    if len(hex_body) < 64:
        return None
    try:
        int(hex_body[:64], 16)
    except ValueError:
        return None
    return "0x" + hex_body[24:64].lower()


def _parse_int(value: Any, action: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as e:
        raise EtherscanApiError(f"{action}: not an integer ({value!r})") from e
    if parsed < 0:
        raise EtherscanApiError(f"{action}: negative value")
    return parsed
