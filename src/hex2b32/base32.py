"""
Streaming Base32 encoding and decoding using the RFC4648 (RFC3548) alphabet

The encoder consumes one byte at a time and never holds more than the
leftover bits of the last byte, so arbitrarily long inputs can be encoded
without buffering them. A full cycle is 40 bits, 5 bytes in and 8 symbols
out:

    +-------------+----------------------------------------------+
    | phase       | 12345678|12345678|12345678|12345678|12345678 |
    +-------------+----------------------------------------------+
    | 0 bits left | 12345   |        |        |        |          |
    | 3 bits left |      123|45      |        |        |          |
    |             |         |  12345 |        |        |          |
    | 1 bit  left |         |       1|2345    |        |          |
    | 4 bits left |         |        |    1234|5       |          |
    |             |         |        |        | 12345  |          |
    | 2 bits left |         |        |        |      12|345       |
    |             |         |        |        |        |   12345  |
    | 0 bits left |         |        |        |        |          |
    +-------------+----------------------------------------------+
"""

import logging
from typing import Iterable, Iterator, NamedTuple, Optional, Union

from .config import CaseMode, EncoderConfig

logger = logging.getLogger(__name__)


# RFC4648 encoding table
RFC4648_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_ALPHABETS = {
    CaseMode.UPPER: RFC4648_ALPHABET,
    CaseMode.LOWER: RFC4648_ALPHABET.lower(),
}

# RFC4648 decoding table, accepts either case
RFC4648_INV_ALPHABET = {c: i for i, c in enumerate(RFC4648_ALPHABET)}
RFC4648_INV_ALPHABET.update({c.lower(): i for i, c in enumerate(RFC4648_ALPHABET)})

PAD_CHAR = "="


class _Transition(NamedTuple):
    # Bits of the carry register still waiting to be emitted
    carry_mask: int
    # Right shift that moves the top of the byte under the carry bits
    head_shift: int
    # Mask and right shift of a second, whole symbol taken from the byte
    tail_mask: int
    tail_shift: int
    # Left shift that aligns the unconsumed low bits to the top of the carry
    keep_shift: int
    next_phase: int


# Indexed by phase, the number of bits left over from the previous byte
_TRANSITIONS = {
    0: _Transition(0x00, 3, 0x00, 0, 5, 3),
    3: _Transition(0xE0, 6, 0x3E, 1, 7, 1),
    1: _Transition(0x80, 4, 0x00, 0, 4, 4),
    4: _Transition(0xF0, 7, 0x7C, 2, 6, 2),
    2: _Transition(0xC0, 5, 0x1F, 0, 8, 0),
}

# Phase at end of stream -> number of '=' needed to complete the 8-symbol block
_PAD_LENGTHS = {
    0: 0,
    3: 6,
    1: 4,
    4: 3,
    2: 1,
}


class EncoderFinalizedError(RuntimeError):
    """The encoder was used after finalize() had been called"""
    pass


class Base32DecodeError(ValueError):
    """Input is not valid RFC4648 base32 text"""
    pass


class Base32Encoder:
    """
    Incremental RFC4648 base32 encoder

    Feed bytes with consume() or update(), each call returns the symbols
    that became complete. Call finalize() once at the end to flush the last
    partial symbol and any padding. The instance cannot be used afterwards.
    """

    def __init__(self, config: Optional[EncoderConfig] = None):
        self._config = config if config is not None else EncoderConfig()
        self._alphabet = _ALPHABETS[self._config.case]
        self._phase = 0
        self._carry = 0
        self._finalized = False

    @property
    def config(self) -> EncoderConfig:
        """Output policy, fixed at construction"""
        return self._config

    @property
    def phase(self) -> int:
        """Number of bits carried over from the last consumed byte"""
        return self._phase

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise EncoderFinalizedError("Encoder has already been finalized")

    def consume(self, byte: int) -> str:
        """
        Consume a single byte

        Args:
            byte: Byte value in the range 0..255

        Returns:
            The one or two symbols completed by this byte
        """
        self._check_open()
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte value out of range: {byte}")

        t = _TRANSITIONS[self._phase]
        out = self._alphabet[((self._carry & t.carry_mask) >> 3) | (byte >> t.head_shift)]
        if t.tail_mask:
            out += self._alphabet[(byte & t.tail_mask) >> t.tail_shift]

        self._carry = (byte << t.keep_shift) & 0xFF
        self._phase = t.next_phase
        return out

    def update(self, data: Union[bytes, bytearray, memoryview, Iterable[int]]) -> str:
        """
        Consume every byte of data in order and return the symbols emitted

        Raises:
            ValueError: If any value is outside 0..255, before any byte is consumed
        """
        self._check_open()
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = bytes(list(data))
        return "".join(self.consume(b) for b in data)

    def finalize(self) -> str:
        """
        Flush the final partial symbol, followed by padding if enabled

        Returns:
            An empty string when the input ended on a 5 byte boundary,
            otherwise one symbol plus 0, 1, 3, 4 or 6 '=' characters.
        """
        self._check_open()
        self._finalized = True

        phase = self._phase
        if phase == 0:
            return ""

        # The leftover bits become the top of the last symbol, zero-filled below
        out = self._alphabet[(self._carry & _TRANSITIONS[phase].carry_mask) >> 3]
        if self._config.padding:
            out += PAD_CHAR * _PAD_LENGTHS[phase]

        self._phase = 0
        self._carry = 0
        return out


def encode_stream(data: Iterable[int], config: Optional[EncoderConfig] = None) -> Iterator[str]:
    """
    Lazily encode a stream of byte values

    Yields the output of each consume() call as it becomes available,
    then the output of finalize() once the input is exhausted.
    """
    encoder = Base32Encoder(config)
    count = 0
    for byte in data:
        yield encoder.consume(byte)
        count += 1
    logger.debug("Encoded %d bytes, finishing in phase %d", count, encoder.phase)
    tail = encoder.finalize()
    if tail:
        yield tail


def encode(data: Union[bytes, bytearray, memoryview, Iterable[int]],
           case: CaseMode = CaseMode.UPPER, padding: bool = True) -> str:
    """
    Encode bytes into a base32 string using the RFC4648 alphabet

    Args:
        data: Bytes to encode
        case: Letter case of the output
        padding: Whether to append '=' padding

    Returns:
        Base32 encoded string
    """
    encoder = Base32Encoder(EncoderConfig(case=case, padding=padding))
    return encoder.update(data) + encoder.finalize()


def decode(data: str) -> bytes:
    """
    Decode an RFC4648 base32 string into bytes

    Both cases are accepted, with or without trailing padding.

    Args:
        data: Base32 string to decode

    Returns:
        Decoded bytes

    Raises:
        Base32DecodeError: If the string is invalid base32
    """
    stripped = data.rstrip(PAD_CHAR)
    pad = len(data) - len(stripped)
    if pad not in (0, (8 - len(stripped) % 8) % 8):
        raise Base32DecodeError("Incorrect base32 padding")

    # If the string has more characters than are required to encode the number of bytes
    # decodable, treat the string as invalid.
    remainder = len(stripped) % 8
    if remainder in (1, 3, 6):
        raise Base32DecodeError("Invalid base32 string length")

    result = bytearray()

    # Process data in 8-character chunks
    for i in range(0, len(stripped), 8):
        chunk = stripped[i:i + 8]

        buf = bytearray(8)
        for j, c in enumerate(chunk):
            value = RFC4648_INV_ALPHABET.get(c)
            if value is None:
                raise Base32DecodeError(f"Invalid base32 character: {c!r}")
            buf[j] = value

        # Decode 8 base32 characters into 5 bytes
        result.append(((buf[0] << 3) | (buf[1] >> 2)) & 0xFF)
        result.append(((buf[1] << 6) | (buf[2] << 1) | (buf[3] >> 4)) & 0xFF)
        result.append(((buf[3] << 4) | (buf[4] >> 1)) & 0xFF)
        result.append(((buf[4] << 7) | (buf[5] << 2) | (buf[6] >> 3)) & 0xFF)
        result.append(((buf[6] << 5) | buf[7]) & 0xFF)

    output_length = len(stripped) * 5 // 8

    # Bits past the last whole byte must be zero
    for i in range(output_length, len(result)):
        if result[i] != 0:
            raise Base32DecodeError("Non-zero trailing bits in base32 string")

    return bytes(result[:output_length])
