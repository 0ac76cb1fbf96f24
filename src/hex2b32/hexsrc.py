"""
Hexadecimal byte source

Turns a stream of hex characters into byte values for the encoder. Two
hex digits make one byte, high nibble first.
"""

import logging
from enum import Enum
from typing import BinaryIO, Iterable, Iterator, TextIO, Union

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096


class HexDecodeError(Exception):
    """An error when decoding hexadecimal input"""

    class ErrorType(Enum):
        """Types of hex decoding errors"""
        INVALID_CHARACTER = "invalid_character"
        INCOMPLETE_PAIR = "incomplete_pair"

    def __init__(self, error_type: ErrorType, message: str = ""):
        self.error_type = error_type
        super().__init__(f"{error_type.value}: {message}" if message else error_type.value)


def hex_digit_value(c: str) -> int:
    """Return the value of a single hex digit, or -1 if c is not one"""
    if "0" <= c <= "9":
        return ord(c) - ord("0")
    if "a" <= c <= "f":
        return ord(c) - ord("a") + 10
    if "A" <= c <= "F":
        return ord(c) - ord("A") + 10
    return -1


def iter_hex_bytes(chars: Iterable[str], ignore_errors: bool = True) -> Iterator[int]:
    """
    Lazily decode hex characters into byte values

    Args:
        chars: Characters to decode, consumed one at a time
        ignore_errors: Skip characters that are not hex digits instead of failing

    Yields:
        One byte value per pair of hex digits

    Raises:
        HexDecodeError: On an invalid character when ignore_errors is False, or
            at end of input if an odd number of hex digits was read
    """
    high = -1
    skipped = 0

    for c in chars:
        value = hex_digit_value(c)
        if value < 0:
            if not ignore_errors:
                raise HexDecodeError(
                    HexDecodeError.ErrorType.INVALID_CHARACTER,
                    f"Invalid hexadecimal character {c!r}"
                )
            skipped += 1
            continue

        if high < 0:
            high = value
        else:
            yield (high << 4) | value
            high = -1

    if skipped:
        logger.debug("Ignored %d non-hexadecimal characters", skipped)

    if high >= 0:
        raise HexDecodeError(
            HexDecodeError.ErrorType.INCOMPLETE_PAIR,
            "Must provide an even number of hexadecimal characters"
        )


def iter_stream_chars(stream: Union[TextIO, BinaryIO], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """
    Yield the characters of a stream, reading it chunk by chunk

    Binary streams are decoded as latin-1 so that every byte maps to exactly
    one character and arbitrary input never fails to decode.
    """
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        if isinstance(chunk, bytes):
            chunk = chunk.decode("latin-1")
        yield from chunk
