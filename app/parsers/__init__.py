"""
app/parsers package marker.
"""

from app.parsers.literal_parser import (
    MalformedPayloadError,
    PayloadTooLargeError,
    decode_account_payload,
    parse_literal,
)

__all__ = [
    "MalformedPayloadError",
    "PayloadTooLargeError",
    "decode_account_payload",
    "parse_literal",
]
