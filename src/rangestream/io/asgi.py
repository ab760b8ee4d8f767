"""ASGI adapter: run the responder against a raw ASGI connection."""

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..core.model import RangeNotSatisfiableError, StreamResult
from ..core.responder import RangeStreamResponder
from ..core.util import ranges_from_header
from .base import ByteSource

logger = logging.getLogger(__name__)

Message = Dict[str, Any]
Send = Callable[[Message], Awaitable[None]]
Receive = Callable[[], Awaitable[Message]]


class ASGIResponseSink:
    """Response sink over an ASGI `send` callable.

    Headers are held back until the first write or flush. A content length
    declared after that point is bookkeeping only.
    """

    def __init__(self, send: Send, *, status_code: int = 200):
        self._send = send
        self.status_code = status_code
        self.content_length: Optional[int] = None
        self.headers: List[Tuple[str, str]] = []
        self.started = False
        self.finished = False

    def set_header(self, name: str, value: str) -> None:
        if self.started:
            raise RuntimeError("Response headers already sent")
        self.headers.append((name, value))

    async def _start(self) -> None:
        if self.started:
            return
        raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in self.headers]
        if self.content_length is not None:
            raw.append((b"content-length", str(self.content_length).encode("latin-1")))
        await self._send({"type": "http.response.start", "status": self.status_code, "headers": raw})
        self.started = True

    async def write(self, data: bytes) -> None:
        await self._start()
        if data:
            await self._send({"type": "http.response.body", "body": bytes(data), "more_body": True})

    async def flush(self) -> None:
        # ASGI servers send each body message as it arrives; only headers can be pending
        await self._start()

    async def finish(self) -> None:
        if self.finished:
            return
        await self._start()
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})
        self.finished = True


async def watch_disconnect(receive: Receive, signal: asyncio.Event) -> None:
    """Drain `receive` until the client disconnects, then set `signal`."""
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            logger.debug("Client disconnected")
            signal.set()
            return


def _range_header(scope: Message) -> Optional[str]:
    for name, value in scope.get("headers", []):
        if name.lower() == b"range":
            return value.decode("latin-1")
    return None


async def stream_asgi(
    scope: Message,
    receive: Receive,
    send: Send,
    source: ByteSource,
    total_length: int,
    content_type: str,
    *,
    responder: Optional[RangeStreamResponder] = None,
) -> StreamResult:
    """Serve `source` on an HTTP connection, honouring its Range header.

    The source stays open; closing it is up to the caller.
    """
    if scope["type"] != "http":
        raise ValueError(f"Unsupported scope type {scope['type']!r}")
    responder = responder or RangeStreamResponder()
    sink = ASGIResponseSink(send)
    disconnected = asyncio.Event()
    watcher = asyncio.create_task(watch_disconnect(receive, disconnected))

    try:
        try:
            ranges = ranges_from_header(_range_header(scope), total_length)
        except RangeNotSatisfiableError as e:
            logger.info("Rejecting %s: %s", scope.get("path", "?"), e)
            result = await responder.reject(total_length, sink)
        else:
            result = await responder.respond(source, total_length, ranges, content_type, sink, disconnected)

        if not disconnected.is_set():
            await sink.finish()
        return result
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
