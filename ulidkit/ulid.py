from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .crockford import decode32, encode32
from .result import Err, ErrorKind, Ok, Result
from .timeutil import ms_to_datetime, now_ms, secure_random_bytes


MAX_TIME = 281474976710655  # (2 ^ 48) - 1
TIMESTAMP_LEN = 6
RANDOMNESS_LEN = 10
BYTES_LEN = TIMESTAMP_LEN + RANDOMNESS_LEN
TIME_CHARS = 10
RANDOMNESS_CHARS = 16
ULID_LEN = TIME_CHARS + RANDOMNESS_CHARS

TimeSource = Callable[[], int]
RandomSource = Callable[[int], bytes]

_NOW = object()


def validate_time(time: Any) -> Err | None:
    if isinstance(time, bool) or not isinstance(time, int):
        return Err(ErrorKind.INVALID_TIME_TYPE, f"time must be an integer, got {time!r}")
    if time < 0:
        return Err(ErrorKind.NEGATIVE_TIME, f"time cannot be negative, got {time!r}")
    if time > MAX_TIME:
        return Err(ErrorKind.TIME_OVERFLOW, f"time cannot be >= 2^48 milliseconds, got {time!r}")
    return None


def validate_decoded_time(decoded: int) -> Result:
    # A decoded time >= 2^48 could never have been encoded in the first place.
    if decoded > MAX_TIME:
        return Err(
            ErrorKind.DECODED_TIME_OVERFLOW,
            f"the decoded time cannot be greater than 2^48, got {decoded!r}",
        )
    return Ok(decoded)


def format_encoded(encoded: str, width: int) -> str:
    """
    Normalize codec output to exactly `width` characters.

    Significant digits are right-aligned, so overlong output loses its
    leftmost characters and short output is padded with "0" on the left.
    """
    n = len(encoded)
    if n > width:
        return encoded[-width:]
    if n < width:
        return encoded.rjust(width, "0")
    return encoded


def encode_field(data: int | bytes, width: int) -> Result:
    res = encode32(data)
    if not res.ok:
        return res
    return Ok(format_encoded(res.value, width))


def _encode_fields(time: int | bytes, rand: int | bytes) -> Result:
    t = encode_field(time, TIME_CHARS)
    if not t.ok:
        return t
    r = encode_field(rand, RANDOMNESS_CHARS)
    if not r.ok:
        return r
    return Ok(t.value + r.value)


class Generator:
    """
    Produces text ULIDs from an injectable clock and random source.

    Holds no state besides the two sources; identifiers generated in the
    same millisecond are not ordered relative to each other.
    """

    def __init__(
        self,
        *,
        time_source: TimeSource = now_ms,
        random_source: RandomSource = secure_random_bytes,
    ) -> None:
        self.time_source = time_source
        self.random_source = random_source

    def generate(self, time: Any = _NOW) -> Result:
        if time is _NOW:
            time = self.time_source()

        err = validate_time(time)
        if err is not None:
            return err

        rand = self.random_source(RANDOMNESS_LEN)
        if len(rand) != RANDOMNESS_LEN:
            raise ValueError(f"random source returned {len(rand)} bytes, expected {RANDOMNESS_LEN}")
        return _encode_fields(time, bytes(rand))


_default_generator = Generator()


def generate(time: Any = _NOW) -> Result:
    """
    Generate a ULID, at the current time or at `time` (epoch milliseconds).
    """
    return _default_generator.generate(time)


def encode(data: Any) -> Result:
    """
    Encode a 16-byte binary ULID into its 26-character string.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)) or len(data) != BYTES_LEN:
        return Err(ErrorKind.MALFORMED_LENGTH, f"the binary ULID must be {BYTES_LEN} bytes long, got {data!r}")
    raw = bytes(data)
    binary_time = int.from_bytes(raw[:TIMESTAMP_LEN], "big")
    binary_rand = int.from_bytes(raw[TIMESTAMP_LEN:], "big")
    return _encode_fields(binary_time, binary_rand)


def _check_length(text: Any) -> Err | None:
    if not isinstance(text, str) or len(text) != ULID_LEN:
        return Err(ErrorKind.MALFORMED_LENGTH, f"the ULID must be {ULID_LEN} characters long, got {text!r}")
    return None


def _decode_time(text: str) -> Result:
    res = decode32(text[:TIME_CHARS])
    if not res.ok:
        return res
    return validate_decoded_time(int.from_bytes(res.value, "big"))


def _decode(text: Any) -> Result:
    err = _check_length(text)
    if err is not None:
        return err
    t = _decode_time(text)
    if not t.ok:
        return t
    rand = decode32(text[TIME_CHARS:])
    if not rand.ok:
        return rand
    return Ok((t.value, text[TIME_CHARS:], rand.value))


def decode(text: Any) -> Result:
    """
    Decode a ULID string into `(time, randomness)`.

    `time` is the embedded unix timestamp in milliseconds. `randomness` is
    returned as its 16-character base32 field, not as bytes; see
    `decode_bytes` for the decoded form.
    """
    res = _decode(text)
    if not res.ok:
        return res
    time, rand_field, _ = res.value
    return Ok((time, rand_field))


def decode_bytes(text: Any) -> Result:
    res = _decode(text)
    if not res.ok:
        return res
    time, _, rand = res.value
    return Ok((time, rand))


def to_binary(text: Any) -> Result:
    """
    Convert a ULID string to its binary form.

    No field split or time-range check is applied; the full string is
    decoded as one value.
    """
    err = _check_length(text)
    if err is not None:
        return err
    return decode32(text)


def to_datetime(text: Any) -> Result:
    res = decode(text)
    if not res.ok:
        return res
    time = res.value[0]
    try:
        return Ok(ms_to_datetime(time))
    except OverflowError:
        return Err(ErrorKind.DECODED_TIME_OVERFLOW, f"the decoded time is beyond the datetime range, got {time!r}")


def is_valid(text: Any) -> bool:
    return decode(text).ok


def ulid() -> str:
    """
    Generate a ULID (26 chars, Crockford base32).
    Not monotonic; good enough for ids/log lines.
    """
    return generate().unwrap()


def new_id(prefix: str) -> str:
    return f"{prefix}_{ulid()}"
