"""I/O layer for rangestream - byte sources in, response sinks out.

The ASGI adapter, rangestream.io.asgi, depends on the core responder and is
imported explicitly rather than re-exported here.
"""

# Re-export these for import convenience
from .base import ByteSource, ResponseSink, CancellationSignal, BUFFER_SIZE, DEFAULT_BOUNDARY, CRLF
from .local import LocalByteSource, open_local_source
from .memory import MemoryResponseSink
