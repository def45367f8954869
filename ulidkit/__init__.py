from __future__ import annotations

from .result import Err, ErrorKind, Ok, Result, ULIDError
from .ulid import (
    MAX_TIME,
    Generator,
    decode,
    decode_bytes,
    encode,
    generate,
    is_valid,
    new_id,
    to_binary,
    to_datetime,
    ulid,
)

__version__ = "0.3.0"

__all__ = [
    "MAX_TIME",
    "Err",
    "ErrorKind",
    "Generator",
    "Ok",
    "Result",
    "ULIDError",
    "decode",
    "decode_bytes",
    "encode",
    "generate",
    "is_valid",
    "new_id",
    "to_binary",
    "to_datetime",
    "ulid",
]
