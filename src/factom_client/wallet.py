"""
Address resolution through factom-walletd.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Union

from .addresses import Address, parse_address
from .runtime.errors import TransportError

logger = logging.getLogger(__name__)


async def get_address(walletd, address: Union[str, Address]) -> Dict[str, Any]:
    """Public and secret forms of an address held by the wallet."""
    return await walletd.call("address", {"address": parse_address(address).text})


async def get_private_address(walletd, address: Union[str, Address]) -> str:
    """
    Resolve an address to its private form.

    Private addresses are returned as-is; public ones are looked up in the
    wallet.

    Args:
        walletd: factom-walletd client
        address: Any Factoid or Entry Credit address

    Returns:
        Private address text

    Raises:
        InvalidAddress: If the address does not decode
        ApiError: If the wallet does not hold the address
    """
    parsed = parse_address(address)
    if parsed.is_private:
        return parsed.text

    logger.debug(f"Resolving private address of {parsed.text} from walletd")
    result = await get_address(walletd, parsed)
    try:
        secret = result["secret"]
    except (KeyError, TypeError) as e:
        raise TransportError(f"Malformed walletd address response: {result}", cause=e) from e
    return parse_address(secret).text


__all__ = [
    "get_address",
    "get_private_address",
]
