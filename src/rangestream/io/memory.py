"""In-memory response sink."""

from typing import List, Optional, Tuple


class MemoryResponseSink:
    """Collects status, headers and body in memory.

    Useful for tests and for rendering a response offline (see the CLI).
    """

    def __init__(self, status_code: Optional[int] = 200):
        self.status_code = status_code
        self.content_length: Optional[int] = None
        self.headers: List[Tuple[str, str]] = []
        self.body = bytearray()
        self.writes = 0
        self.flushes = 0
        self.buffering_disabled = False

    def disable_buffering(self) -> None:
        self.buffering_disabled = True

    def set_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_all(self, name: str) -> List[str]:
        wanted = name.lower()
        return [v for k, v in self.headers if k.lower() == wanted]

    def get_header(self, name: str) -> Optional[str]:
        values = self.get_all(name)
        return values[0] if values else None

    async def write(self, data: bytes) -> None:
        self.writes += 1
        self.body += data

    async def flush(self) -> None:
        self.flushes += 1
