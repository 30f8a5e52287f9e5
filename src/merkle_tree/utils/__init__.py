"""
Utility Functions

Hex rendering and parsing helpers shared by the CLI, the REST API and the
client.
"""

from .hex_helpers import (
    normalize_hex,
    hex_to_bytes,
    bytes_to_hex,
    validate_hex_length,
)

__all__ = [
    'normalize_hex',
    'hex_to_bytes',
    'bytes_to_hex',
    'validate_hex_length',
]
