from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_TIME_TYPE = "InvalidTimeType"
    NEGATIVE_TIME = "NegativeTime"
    TIME_OVERFLOW = "TimeOverflow"
    MALFORMED_LENGTH = "MalformedLength"
    DECODED_TIME_OVERFLOW = "DecodedTimeOverflow"
    CODEC_ERROR = "CodecError"


class ULIDError(ValueError):
    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


@dataclass(frozen=True)
class Ok:
    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Err:
    """
    A failed operation. `detail` is human-readable and includes the
    offending input; `kind` is what callers should branch on.
    """

    kind: ErrorKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ULIDError(self.kind, self.detail)


Result = Ok | Err
