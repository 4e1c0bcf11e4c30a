from typing import Any

from solders.pubkey import Pubkey

MIN_ADDRESS_LENGTH = 32


class InvalidAddressError(ValueError):
    """Raised when a value is not a usable Solana address."""


def parse_address(value: Any) -> Pubkey:
    """
    Parses a base58 Solana address.

    The value must be a string of at least 32 characters that decodes to a
    32-byte public key. Anything else raises InvalidAddressError.
    """
    if not value or not isinstance(value, str) or len(value) < MIN_ADDRESS_LENGTH:
        raise InvalidAddressError("Address must be a string of at least 32 characters.")
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise InvalidAddressError(f"Address is not a valid public key: {e}") from e
