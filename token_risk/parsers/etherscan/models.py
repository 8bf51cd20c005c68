"""Pydantic models for Etherscan V2 API responses."""

from typing import Any

from pydantic import BaseModel, StrictBool, StrictStr


class EtherscanResponse(BaseModel):
    """Standard ``{status, message, result}`` envelope.

    ``status == "1"`` is success; on failure ``result`` carries the reason
    (e.g. "Max rate limit reached").
    """

    status: str
    message: str = ""
    result: Any = None

    model_config = {"extra": "ignore"}


class EtherscanProxyResponse(BaseModel):
    """JSON-RPC envelope returned by the ``proxy`` module."""

    result: str

    model_config = {"extra": "ignore"}


class SourceCodeEntry(BaseModel):
    """One entry of contract/getsourcecode."""

    SourceCode: str = ""
    ABI: str = ""
    ContractName: str = ""
    Proxy: str = "0"
    Implementation: str = ""

    model_config = {"extra": "ignore"}


class TokenHolder(BaseModel):
    """One row of token/tokenholderlist (quantity in smallest denomination)."""

    TokenHolderAddress: str
    TokenHolderQuantity: int

    model_config = {"extra": "ignore"}


class ContractCreation(BaseModel):
    """One entry of contract/getcontractcreation."""

    contractAddress: str
    contractCreator: str
    txHash: str = ""

    model_config = {"extra": "ignore"}


class AbiItem(BaseModel):
    """One entry of a contract ABI (functions, events, constructor...)."""

    type: StrictStr = "function"
    name: StrictStr = ""
    stateMutability: StrictStr = ""
    constant: StrictBool | None = None

    model_config = {"extra": "ignore"}
