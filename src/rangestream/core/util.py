from __future__ import annotations
from typing import Any, Dict, Iterable, List

from werkzeug.http import parse_range_header

from .model import RangeNotSatisfiableError, RangeSpec, StreamResult


def as_range_specs(ranges: Iterable[RangeSpec | tuple[int, int]] | None) -> List[RangeSpec]:
    """Normalise `(start, end)` tuples into RangeSpec, keeping order."""
    if not ranges:
        return []
    return [r if isinstance(r, RangeSpec) else RangeSpec(*r) for r in ranges]


def multipart_content_type(boundary: str) -> str:
    return f"multipart/byteranges; boundary={boundary}"


def ranges_from_header(header: str | None, total_length: int) -> List[RangeSpec] | None:
    """Resolve a raw `Range` header against a resource of `total_length` bytes.

    Returns None when the header is missing, malformed or not in `bytes` units,
    which callers treat as a full-body request. Suffix (`-N`) and open (`N-`)
    ranges are resolved and ends clamped to the last byte. Ranges starting past
    the end are dropped; if nothing is left, RangeNotSatisfiableError is raised.

    werkzeug only accepts ascending, non-overlapping range lists, so a header
    such as ``bytes=900-999,0-99`` comes back as None (full body). Pass the
    RangeSpec list to the responder directly to serve parts in another order.
    """
    if not header:
        return None
    parsed = parse_range_header(header)
    if parsed is None or parsed.units.lower() != "bytes":
        return None

    specs: List[RangeSpec] = []
    for begin, stop in parsed.ranges:   # werkzeug: stop is exclusive or None
        if begin < 0:
            start = max(total_length + begin, 0)
            end = total_length - 1
        else:
            start = begin
            end = total_length - 1 if stop is None else min(stop, total_length) - 1
        if start >= total_length or start > end:
            continue
        specs.append(RangeSpec(start, end))

    if not specs:
        raise RangeNotSatisfiableError(f"No satisfiable range in {header!r} for length {total_length}")
    return specs


def result_asdict(res: StreamResult, *, headers: Iterable[tuple[str, str]] = ()) -> Dict[str, Any]:
    """Return a JSON-serialisable summary of a streamed response."""
    return {
        "status": res.status_code,
        "mode": res.mode.value if res.mode is not None else None,
        "headers": {name: value for name, value in headers},
        "bytes_requested": res.bytes_requested,
        "bytes_sent": res.bytes_sent,
        "cancelled": res.cancelled,
        "truncated": res.truncated,
    }
