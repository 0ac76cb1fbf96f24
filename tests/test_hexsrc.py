"""
Test cases for the hexadecimal byte source
"""

import os
import sys
import io
import pytest

# Add the src directory to path to import hex2b32
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from hex2b32.hexsrc import HexDecodeError, hex_digit_value, iter_hex_bytes, iter_stream_chars


def test_hex_digit_value():
    assert [hex_digit_value(c) for c in "0123456789"] == list(range(10))
    assert [hex_digit_value(c) for c in "abcdef"] == list(range(10, 16))
    assert [hex_digit_value(c) for c in "ABCDEF"] == list(range(10, 16))
    for c in "gG \n-x":
        assert hex_digit_value(c) == -1


def test_pairs_high_nibble_first():
    assert list(iter_hex_bytes("00ff7F10")) == [0x00, 0xFF, 0x7F, 0x10]
    assert list(iter_hex_bytes("")) == []


def test_invalid_characters_skipped_by_default():
    assert list(iter_hex_bytes("de:ad be\nef\n")) == [0xDE, 0xAD, 0xBE, 0xEF]
    # A skipped character may sit between the two digits of a byte
    assert list(iter_hex_bytes("d e")) == [0xDE]


def test_invalid_character_fatal():
    source = iter_hex_bytes("dead,beef", ignore_errors=False)
    assert next(source) == 0xDE
    assert next(source) == 0xAD
    with pytest.raises(HexDecodeError) as excinfo:
        next(source)
    assert excinfo.value.error_type == HexDecodeError.ErrorType.INVALID_CHARACTER
    assert "','" in str(excinfo.value)


def test_trailing_newline_is_invalid_when_strict():
    with pytest.raises(HexDecodeError):
        list(iter_hex_bytes("00\n", ignore_errors=False))


@pytest.mark.parametrize("ignore_errors", [True, False])
def test_incomplete_pair(ignore_errors):
    source = iter_hex_bytes("abc", ignore_errors=ignore_errors)
    assert next(source) == 0xAB
    with pytest.raises(HexDecodeError) as excinfo:
        next(source)
    assert excinfo.value.error_type == HexDecodeError.ErrorType.INCOMPLETE_PAIR


def test_is_lazy():
    """Bytes are produced before the rest of the input is read"""
    consumed = []

    def chars():
        for c in "0102":
            consumed.append(c)
            yield c
        raise AssertionError("read past what was needed")

    source = iter_hex_bytes(chars())
    assert next(source) == 0x01
    assert consumed == ["0", "1"]


def test_iter_stream_chars():
    stream = io.StringIO("0123456789abcdef")
    assert "".join(iter_stream_chars(stream, chunk_size=3)) == "0123456789abcdef"
    assert list(iter_stream_chars(io.StringIO(""))) == []


def test_iter_stream_chars_binary():
    """Bytes that are not valid text still come through as single characters"""
    stream = io.BytesIO(b"00\xff\x80ab")
    assert "".join(iter_stream_chars(stream, chunk_size=2)) == "00\xff\x80ab"
    assert list(iter_hex_bytes(iter_stream_chars(io.BytesIO(b"00\xff00\n")))) == [0x00, 0x00]
