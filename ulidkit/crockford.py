from __future__ import annotations

from typing import Any

from .result import Err, ErrorKind, Ok, Result


ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

# Case-insensitive lookup; I, L, O and U are deliberately absent.
_DECODE = {ch: i for i, ch in enumerate(ALPHABET)}
_DECODE.update({ch.lower(): i for ch, i in list(_DECODE.items()) if ch.isalpha()})


def _int_to_bytes(value: int) -> bytes:
    # Minimal unsigned big-endian form, zero is one byte.
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def encode32(data: Any) -> Result:
    """
    Encode bytes (or a non-negative int) to Crockford base32.

    The output is minimal, not fixed-width: the bit string is left-padded
    with zero bits up to a multiple of 5 and emitted 5 bits per character.
    """
    if isinstance(data, bool):
        return Err(ErrorKind.CODEC_ERROR, f"cannot encode {data!r}")
    if isinstance(data, int):
        if data < 0:
            return Err(ErrorKind.CODEC_ERROR, f"cannot encode a negative integer, got {data!r}")
        data = _int_to_bytes(data)
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, bytes):
        return Err(ErrorKind.CODEC_ERROR, f"cannot encode {type(data).__name__}, got {data!r}")
    if not data:
        return Ok("")

    nbits = len(data) * 8
    nchars = (nbits + 4) // 5
    value = int.from_bytes(data, "big")

    out = []
    for i in range(nchars):
        shift = (nchars - 1 - i) * 5
        out.append(ALPHABET[(value >> shift) & 0x1F])
    return Ok("".join(out))


def decode32(text: Any) -> Result:
    """
    Decode Crockford base32 text to big-endian bytes.

    The result is floor(5n / 8) bytes wide for n characters, widened when
    the value does not fit. Padding bits are thereby dropped without hiding
    a value that overflows the field.
    """
    if not isinstance(text, str):
        return Err(ErrorKind.CODEC_ERROR, f"cannot decode {type(text).__name__}, got {text!r}")

    value = 0
    for pos, ch in enumerate(text):
        digit = _DECODE.get(ch)
        if digit is None:
            return Err(ErrorKind.CODEC_ERROR, f"invalid character {ch!r} at position {pos} in {text!r}")
        value = (value << 5) | digit

    width = max((len(text) * 5) // 8, (value.bit_length() + 7) // 8)
    return Ok(value.to_bytes(width, "big"))
