"""Base protocols and shared constants for the I/O layer."""

from typing import Optional, Protocol, runtime_checkable


BUFFER_SIZE = 0x1000  # 4 KB, one transfer buffer per range copy
DEFAULT_BOUNDARY = "<1a1s1d1f1g1h1j1k1l1>"
CRLF = "\r\n"


@runtime_checkable
class ByteSource(Protocol):
    """Protocol for seekable binary sources."""

    def seek(self, offset: int, whence: int = 0) -> int:
        ...

    def readinto(self, buffer) -> Optional[int]:
        """Read into `buffer`, returning the number of bytes read (0 at EOF)."""
        ...


@runtime_checkable
class ResponseSink(Protocol):
    """Protocol for a writable HTTP response.

    `disable_buffering()` is optional and looked up at runtime.
    """

    status_code: Optional[int]
    content_length: Optional[int]

    def set_header(self, name: str, value: str) -> None:
        ...

    async def write(self, data: bytes) -> None:
        ...

    async def flush(self) -> None:
        ...


@runtime_checkable
class CancellationSignal(Protocol):
    """Anything with `is_set()`: asyncio.Event, threading.Event, ..."""

    def is_set(self) -> bool:
        ...
