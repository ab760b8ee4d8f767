"""CLI implementation for rangestream."""

import asyncio
import json
import logging
import mimetypes
from pathlib import Path
from typing import Optional

import typer

from .core.model import RangeNotSatisfiableError, ResponseMode, StreamResult
from .core.responder import RangeStreamResponder
from .core.util import ranges_from_header, result_asdict
from .io.base import BUFFER_SIZE, DEFAULT_BOUNDARY
from .io.local import LocalByteSource
from .io.memory import MemoryResponseSink

app = typer.Typer(add_completion=False, help="Render the HTTP response a Range request would receive.")


async def _render(source: LocalByteSource, header: Optional[str], content_type: str,
                  responder: RangeStreamResponder, sink: MemoryResponseSink) -> StreamResult:
    """Resolve the Range header and stream the source into `sink`."""
    total = source.size
    try:
        ranges = ranges_from_header(header, total)
    except RangeNotSatisfiableError:
        return await responder.reject(total, sink)
    return await responder.respond(source, total, ranges, content_type, sink)


@app.command()
def main(
    file: Path = typer.Argument(..., help="File to stream"),
    range_header: Optional[str] = typer.Option(None, "--range", "-r", help="Range header value, e.g. 'bytes=0-499'"),
    content_type: Optional[str] = typer.Option(None, "--content-type", help="Content-Type of FILE (guessed if omitted)"),
    boundary: str = typer.Option(DEFAULT_BOUNDARY, "--boundary", help="Multipart boundary token"),
    buffer_size: int = typer.Option(BUFFER_SIZE, "--buffer-size", min=1, help="Transfer buffer size in bytes"),
    validate: bool = typer.Option(False, "--validate", help="Answer 416 for out-of-bounds ranges"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write the response body to PATH"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Stream FILE as an HTTP response and print its status and headers as JSON."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if not file.is_file():
        typer.echo(f"No such file: {file}", err=True)
        raise typer.Exit(code=1)

    if content_type is None:
        guessed, _ = mimetypes.guess_type(str(file))
        content_type = guessed or "application/octet-stream"

    responder = RangeStreamResponder(boundary, buffer_size=buffer_size, validate_ranges=validate)
    sink = MemoryResponseSink()
    with LocalByteSource(file) as source:
        result = asyncio.run(_render(source, range_header, content_type, responder, sink))

    headers = list(sink.headers)
    if sink.content_length is not None and result.mode is not ResponseMode.MULTI_RANGE:
        headers.append(("Content-Length", str(sink.content_length)))
    typer.echo(json.dumps(result_asdict(result, headers=headers), indent=2))

    if output:
        output.write_bytes(bytes(sink.body))

    # exit code
    if result.mode is None or result.truncated:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
