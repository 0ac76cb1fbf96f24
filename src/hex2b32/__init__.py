"""
hex2b32

Streaming conversion of hexadecimal input into RFC4648 (RFC3548) base32.

The encoder consumes one byte at a time and only ever keeps the few bits
left over from the previous byte, so input of any length can be encoded
without buffering. Hex decoding lives in a separate stage that feeds it.
"""

__version__ = "0.1.0"

from .config import (
    CaseMode,
    EncoderConfig
)

from .base32 import (
    Base32Encoder,
    Base32DecodeError,
    EncoderFinalizedError,
    encode,
    encode_stream,
    decode
)

from .hexsrc import (
    HexDecodeError,
    iter_hex_bytes,
    iter_stream_chars
)

__all__ = [
    # Configuration
    "CaseMode",
    "EncoderConfig",

    # Base32 encoding
    "Base32Encoder",
    "Base32DecodeError",
    "EncoderFinalizedError",
    "encode",
    "encode_stream",
    "decode",

    # Hex input
    "HexDecodeError",
    "iter_hex_bytes",
    "iter_stream_chars",
]
