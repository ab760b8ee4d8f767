"""Range-aware streaming of a seekable byte source into an HTTP response."""

from __future__ import annotations
import asyncio
import logging
from typing import Iterable, Optional, Sequence

from ..io.base import BUFFER_SIZE, CRLF, DEFAULT_BOUNDARY, ByteSource, CancellationSignal, ResponseSink
from .model import RangeNotSatisfiableError, RangeSpec, ResponseMode, StreamResult
from .util import as_range_specs, multipart_content_type

logger = logging.getLogger(__name__)

PARTIAL_CONTENT = 206
RANGE_NOT_SATISFIABLE = 416

# Errors raised by a source read that end the copy instead of the request.
_READ_FAULTS = (OSError, ValueError, IndexError)


def _cancelled(cancel: Optional[CancellationSignal]) -> bool:
    return cancel is not None and cancel.is_set()


async def copy_range(
    source: ByteSource,
    start: int,
    end: int,
    sink: ResponseSink,
    cancel: Optional[CancellationSignal] = None,
    *,
    buffer_size: int = BUFFER_SIZE,
    declare_length: bool = True,
    offload_reads: bool = False,
) -> int:
    """Copy bytes `start..end` (inclusive) from `source` into `sink`.

    Returns the number of bytes written. Fewer than requested means the client
    went away, the source ran dry or a read failed; none of these raise.
    """
    source.seek(start)
    remaining = end - start + 1
    if declare_length:
        sink.content_length = remaining

    buffer = bytearray(buffer_size)
    view = memoryview(buffer)
    written = 0

    while remaining > 0 and not _cancelled(cancel):
        window = view[:min(remaining, buffer_size)]
        try:
            if offload_reads:
                count = await asyncio.to_thread(source.readinto, window)
            else:
                count = source.readinto(window)
        except _READ_FAULTS as e:
            logger.warning("Read failed at offset %d, truncating response: %s", start + written, e)
            await sink.flush()
            return written

        if not count:
            logger.debug("Source exhausted at offset %d with %d bytes outstanding", start + written, remaining)
            await sink.flush()
            return written

        # the buffer is reused, so hand the sink its own copy.
        # A failed write propagates without a flush on the broken transport.
        await sink.write(bytes(view[:count]))
        await sink.flush()
        written += count
        remaining -= count

    if remaining > 0:
        logger.debug("Copy of %d-%d cancelled after %d bytes", start, end, written)
    return written


class RangeStreamResponder:
    """Write a full, single-range or multipart/byteranges response.

    One instance may serve many requests; it holds configuration only.
    """

    def __init__(
        self,
        multipart_boundary: str = DEFAULT_BOUNDARY,
        *,
        buffer_size: int = BUFFER_SIZE,
        line_break: str = CRLF,
        validate_ranges: bool = False,
        offload_reads: bool = False,
    ):
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.multipart_boundary = multipart_boundary
        self.buffer_size = buffer_size
        self.line_break = line_break
        self.validate_ranges = validate_ranges
        self.offload_reads = offload_reads

    async def respond(
        self,
        source: ByteSource,
        total_length: int,
        ranges: Optional[Iterable[RangeSpec | tuple[int, int]]],
        content_type: str,
        sink: ResponseSink,
        cancel: Optional[CancellationSignal] = None,
    ) -> StreamResult:
        specs = as_range_specs(ranges)
        mode = ResponseMode.for_ranges(specs)
        logger.debug("Responding in %s mode (%d ranges, length %d)", mode.name, len(specs), total_length)

        disable_buffering = getattr(sink, "disable_buffering", None)
        if disable_buffering is not None:
            disable_buffering()

        if self.validate_ranges:
            try:
                for spec in specs:
                    spec.validate(total_length)
            except RangeNotSatisfiableError as e:
                logger.info("Rejecting request: %s", e)
                return await self.reject(total_length, sink)

        if mode is ResponseMode.MULTI_RANGE:
            sink.set_header("Content-Type", multipart_content_type(self.multipart_boundary))
        else:
            sink.set_header("Content-Type", content_type)
        sink.set_header("Accept-Ranges", "bytes")

        if mode is ResponseMode.FULL_BODY:
            sent = await self._copy(source, 0, total_length - 1, sink, cancel, declare_length=False)
            return StreamResult(mode, sink.status_code, total_length, sent, _cancelled(cancel))

        sink.status_code = PARTIAL_CONTENT
        requested = sum(spec.length for spec in specs)

        if mode is ResponseMode.SINGLE_RANGE:
            spec = specs[0]
            sink.set_header("Content-Range", spec.content_range(total_length))
            sent = await self._copy(source, spec.start, spec.end, sink, cancel)
        else:
            sent = await self._write_multipart(source, total_length, specs, content_type, sink, cancel)

        return StreamResult(mode, sink.status_code, requested, sent, _cancelled(cancel))

    async def reject(self, total_length: int, sink: ResponseSink) -> StreamResult:
        """Answer 416 with the unsatisfied-range form of Content-Range."""
        sink.status_code = RANGE_NOT_SATISFIABLE
        sink.set_header("Accept-Ranges", "bytes")
        sink.set_header("Content-Range", f"bytes */{total_length}")
        sink.content_length = 0
        await sink.flush()
        return StreamResult(None, sink.status_code, 0, 0)

    async def _write_multipart(
        self,
        source: ByteSource,
        total_length: int,
        specs: Sequence[RangeSpec],
        content_type: str,
        sink: ResponseSink,
        cancel: Optional[CancellationSignal],
    ) -> int:
        nl = self.line_break
        boundary = self.multipart_boundary
        sent = 0
        for spec in specs:
            if _cancelled(cancel):
                return sent
            part_header = (
                f"--{boundary}{nl}"
                f"Content-type: {content_type}{nl}"
                f"Content-Range: {spec.content_range(total_length)}{nl}"
            )
            await sink.write(part_header.encode("utf-8"))
            sent += await self._copy(source, spec.start, spec.end, sink, cancel)
            if _cancelled(cancel):
                return sent
            await sink.write(nl.encode("utf-8"))

        if _cancelled(cancel):
            return sent
        await sink.write(f"--{boundary}--{nl}".encode("utf-8"))
        await sink.flush()
        return sent

    async def _copy(self, source, start, end, sink, cancel, *, declare_length=True) -> int:
        return await copy_range(
            source, start, end, sink, cancel,
            buffer_size=self.buffer_size,
            declare_length=declare_length,
            offload_reads=self.offload_reads,
        )


async def respond(
    source: ByteSource,
    total_length: int,
    ranges: Optional[Iterable[RangeSpec | tuple[int, int]]],
    content_type: str,
    sink: ResponseSink,
    *,
    multipart_boundary: str = DEFAULT_BOUNDARY,
    cancel: Optional[CancellationSignal] = None,
    **options,
) -> StreamResult:
    """One-shot helper around RangeStreamResponder.respond."""
    responder = RangeStreamResponder(multipart_boundary, **options)
    return await responder.respond(source, total_length, ranges, content_type, sink, cancel)
