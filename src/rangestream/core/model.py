from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class RangeNotSatisfiableError(ValueError):
    """Raised when a requested byte range lies outside the resource."""
    pass


@dataclass(frozen=True, slots=True)
class RangeSpec:
    start: int                 # inclusive
    end: int                   # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def validate(self, total_length: int) -> None:
        if not 0 <= self.start <= self.end < total_length:
            raise RangeNotSatisfiableError(
                f"Range {self.start}-{self.end} not satisfiable for length {total_length}"
            )

    def content_range(self, total_length: int) -> str:
        return f"bytes {self.start}-{self.end}/{total_length}"


class ResponseMode(Enum):
    FULL_BODY = "full"
    SINGLE_RANGE = "single"
    MULTI_RANGE = "multipart"

    @classmethod
    def for_ranges(cls, ranges: Sequence[RangeSpec] | None) -> "ResponseMode":
        count = len(ranges) if ranges else 0
        if count == 0:
            return cls.FULL_BODY
        if count == 1:
            return cls.SINGLE_RANGE
        return cls.MULTI_RANGE


@dataclass(slots=True)
class StreamResult:
    mode: ResponseMode | None  # None when rejected with 416
    status_code: int | None
    bytes_requested: int
    bytes_sent: int            # content bytes only, framing excluded
    cancelled: bool = False

    @property
    def truncated(self) -> bool:
        return self.bytes_sent < self.bytes_requested
