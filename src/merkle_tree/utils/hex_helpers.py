"""
Hex String Utilities

This module provides helpers for rendering digests as hex strings and
parsing hex strings received from the CLI or the REST API back into bytes.
"""

from typing import Optional

HEX_CHARS = "0123456789abcdefABCDEF"


def normalize_hex(hex_str: str, expected_bytes: Optional[int] = None) -> str:
    """
    Normalize a hex string to lowercase with a '0x' prefix.

    Args:
        hex_str: Hex string with or without '0x' prefix
        expected_bytes: Optional expected byte length for validation

    Returns:
        Normalized hex string

    Raises:
        ValueError: If the string contains invalid characters, has an odd
            number of digits, or does not match expected_bytes

    Examples:
        >>> normalize_hex("ABCD")
        "0xabcd"
    """
    if not isinstance(hex_str, str):
        raise ValueError(f"Expected a hex string, got {type(hex_str).__name__}")

    hex_part = hex_str[2:] if hex_str.startswith(("0x", "0X")) else hex_str

    if not all(c in HEX_CHARS for c in hex_part):
        raise ValueError(f"Invalid hex string: {hex_str}")
    if len(hex_part) % 2 == 1:
        raise ValueError(f"Hex string has an odd number of digits: {hex_str}")

    if expected_bytes is not None:
        actual_bytes = len(hex_part) // 2
        if actual_bytes != expected_bytes:
            raise ValueError(f"Expected {expected_bytes} bytes, got {actual_bytes} bytes")

    return "0x" + hex_part.lower()


def hex_to_bytes(hex_str: str, expected_bytes: Optional[int] = None) -> bytes:
    """
    Convert a hex string to bytes.

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x12\\x34'
    """
    return bytes.fromhex(normalize_hex(hex_str, expected_bytes)[2:])


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a lowercase hex string.

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        "0x1234"
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        "1234"
    """
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str


def validate_hex_length(hex_str: str, expected_bytes: int) -> bool:
    """Return True if hex_str is valid hex of exactly expected_bytes bytes."""
    try:
        normalize_hex(hex_str, expected_bytes)
    except ValueError:
        return False
    return True
