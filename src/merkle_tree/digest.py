"""
Digest Function

This module provides the hash primitive used for leaf and node digests.
Every function here is pure: no hasher object is retained between calls,
so trees built on top of it carry no hidden shared state.
"""

from hashlib import sha256
from typing import Callable, Union

Element = Union[str, bytes, bytearray]
HashFunction = Callable[[bytes], bytes]

DIGEST_SIZE = 32


def sha256_hash(data: bytes) -> bytes:
    """
    Hash raw bytes with SHA-256.

    Args:
        data: Bytes to hash

    Returns:
        32-byte digest

    Examples:
        >>> sha256_hash(b"a").hex()
        "ca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb"
    """
    return sha256(data).digest()


def element_bytes(element: Element) -> bytes:
    """
    Convert an element to the bytes that get hashed into its leaf.

    Strings are encoded as UTF-8; bytes-like values are used as-is.

    Raises:
        TypeError: If the element is neither str nor bytes
    """
    if isinstance(element, str):
        return element.encode("utf-8")
    if isinstance(element, (bytes, bytearray)):
        return bytes(element)
    raise TypeError(f"Element must be str or bytes, got {type(element).__name__}")


def hash_element(element: Element, hash_fn: HashFunction = sha256_hash) -> bytes:
    """Compute the leaf digest of a single element."""
    return hash_fn(element_bytes(element))


def hash_pair(left: bytes, right: bytes, hash_fn: HashFunction = sha256_hash) -> bytes:
    """
    Compute a parent digest from two child digests.

    The children are concatenated left-then-right with no delimiter.

    Args:
        left: Left child digest
        right: Right child digest
        hash_fn: Digest function to apply

    Returns:
        Parent digest
    """
    return hash_fn(left + right)
