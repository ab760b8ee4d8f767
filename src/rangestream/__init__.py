"""rangestream - HTTP Range-aware streaming of large binary resources."""

from .core.model import RangeSpec, ResponseMode, StreamResult, RangeNotSatisfiableError   # re-export
from .core.responder import RangeStreamResponder, copy_range, respond
from .core.util import ranges_from_header
from .io import (
    ByteSource, ResponseSink, CancellationSignal,
    LocalByteSource, open_local_source, MemoryResponseSink,
    BUFFER_SIZE, DEFAULT_BOUNDARY,
)
from .io.asgi import ASGIResponseSink, stream_asgi


__all__ = [
    "RangeStreamResponder", "respond", "copy_range", "ranges_from_header",
    "RangeSpec", "ResponseMode", "StreamResult", "RangeNotSatisfiableError",
    "ByteSource", "ResponseSink", "CancellationSignal",
    "LocalByteSource", "open_local_source", "MemoryResponseSink",
    "ASGIResponseSink", "stream_asgi",
    "BUFFER_SIZE", "DEFAULT_BOUNDARY",
]
