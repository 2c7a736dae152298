"""Line-level value coercion shared by the format parsers.

Two shapes of per-line data exist in the wild:

- counts: ``{line: hits}`` where hits is an integer or null
- nested: ``{line: [test_id, ...]}`` where the number of tests that hit
  the line is the execution count (raw PHPUnit data)

Both preserve null as "not executable". Non-numeric line keys are ignored.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from covgraph.coverage.models import CoverageParseError, LineMap

_INT_KEY = re.compile(r"^\s*\d+\s*$")
_SIGNED_INT = re.compile(r"^\s*[-+]?\d+\s*$")


def line_number(key: Any) -> int | None:
    """Return key as a line number, or None if it isn't numeric."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float) and key.is_integer():
        return int(key)
    if isinstance(key, str | bytes):
        text = key.decode("utf-8", errors="ignore") if isinstance(key, bytes) else key
        if _INT_KEY.match(text):
            return int(text)
    return None


def _is_collection(value: Any) -> bool:
    return isinstance(value, Mapping) or (
        isinstance(value, Sequence) and not isinstance(value, str | bytes)
    )


def _entries(data: Any) -> list[tuple[Any, Any]]:
    """Key/value pairs of a mapping, or index/value pairs of a list."""
    if isinstance(data, Mapping):
        return list(data.items())
    if _is_collection(data):
        return list(enumerate(data))
    raise CoverageParseError(f"Expected line mapping, got {type(data).__name__}")


def coerce_count(value: Any) -> int | None:
    """Coerce a recorded execution count.

    Values that aren't a count ("n/a", "") mark the line as not executable.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    if isinstance(value, str) and _SIGNED_INT.match(value):
        return max(int(value), 0)
    if _is_collection(value):
        return len(value)
    return None


def hits_to_count(value: Any) -> int | None:
    """Execution count of one nested-format entry.

    A collection counts the tests that hit the line; a scalar is 1 when
    truthy, else 0.
    """
    if value is None:
        return None
    if _is_collection(value):
        return len(value)
    return 1 if value else 0


def lines_from_counts(data: Any) -> LineMap:
    """Build a LineMap from a ``{line: count}`` mapping."""
    lines: LineMap = {}
    for key, value in _entries(data):
        num = line_number(key)
        if num is not None:
            lines[num] = coerce_count(value)
    return lines


def lines_from_hits(data: Any) -> LineMap:
    """Build a LineMap from a ``{line: [test, ...]}`` mapping."""
    lines: LineMap = {}
    for key, value in _entries(data):
        num = line_number(key)
        if num is not None:
            lines[num] = hits_to_count(value)
    return lines


def _text_key(key: Any) -> str:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return str(key)


def normalize_nested(raw: Any) -> dict[str, LineMap]:
    """Normalize a raw ``path -> (line -> hits)`` structure.

    Files whose data is not a collection carry no line information and
    come out empty; the aggregator drops them.

    Raises:
        CoverageParseError: If raw is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise CoverageParseError(f"Expected file mapping, got {type(raw).__name__}")

    result: dict[str, LineMap] = {}
    for path, file_data in raw.items():
        result[_text_key(path)] = lines_from_hits(file_data) if _is_collection(file_data) else {}
    return result


def normalize_counts(raw: Any) -> dict[str, LineMap]:
    """Normalize a ``path -> (line -> count)`` structure taken as-is."""
    if not isinstance(raw, Mapping):
        raise CoverageParseError(f"Expected file mapping, got {type(raw).__name__}")

    result: dict[str, LineMap] = {}
    for path, file_data in raw.items():
        result[_text_key(path)] = lines_from_counts(file_data) if _is_collection(file_data) else {}
    return result
