"""EVM contract address validation for the outer surfaces (API, CLI)."""

import re

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


class InvalidAddressError(ValueError):
    pass


def normalize_address(raw: str | None) -> str:
    """Strictly validate a 0x-prefixed 40-hex address and return it trimmed.

    Casing is preserved; the core compares addresses case-insensitively.
    """
    s = (raw or "").strip()
    if not s:
        raise InvalidAddressError("Contract address is required")
    if "..." in s:
        raise InvalidAddressError("Ellipses ('...') are not allowed. Provide the full 42-char 0x address.")
    if not ADDRESS_RE.match(s):
        raise InvalidAddressError("Invalid Ethereum address format")
    return s
