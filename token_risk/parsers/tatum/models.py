"""Request ABIs and response models for Tatum smart-contract invocation."""

from typing import Any

from pydantic import BaseModel, StrictInt, StrictStr

# Read-only ERC-20 methods, one ABI fragment each
ERC20_METHOD_ABIS: dict[str, dict[str, Any]] = {
    "name": {
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    "symbol": {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    "decimals": {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    "totalSupply": {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
}


class TatumCallResult(BaseModel):
    """Response of POST /v3/{chain}/smartcontract for a read call.

    v3 schema: ``{"data": <value>}``. Anything else fails validation.
    """

    data: StrictStr | StrictInt

    model_config = {"extra": "ignore"}
