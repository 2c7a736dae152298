"""Serialized PHPUnit coverage parser.

Legacy PHPUnit (and some CI caches) store coverage with PHP's serialize():

    a:1:{s:13:"src/Utils.php";a:2:{i:5;a:1:{i:0;s:9:"testFoo";}i:6;a:0:{}}}

Each file maps line numbers to the list of tests that executed the line,
so the execution count is the size of that list. A whole CodeCoverage
object may be serialized instead; its line data is reached through the
``data`` property. When the blob doesn't deserialize to an array or
object (extra metadata around it), the ``"coverage"`` field is located
and only that value is deserialized.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import phpserialize

from covgraph.coverage.lines import normalize_nested
from covgraph.coverage.models import CoverageMap, CoverageParseError

_COVERAGE_FIELD = re.compile(rb's:\d+:"coverage";')

# Accessors tried, in order, to unwrap snapshot objects down to line data
_DATA_ACCESSORS = ("data", "lineCoverage")


def load_serialized(data: bytes) -> Any:
    """Deserialize the first PHP serialize() value in data.

    Whatever follows that value is ignored.

    Raises:
        CoverageParseError: If the bytes are not a serialized value.
    """
    try:
        return phpserialize.loads(data, decode_strings=True, object_hook=phpserialize.phpobject)
    except (ValueError, TypeError) as e:
        raise CoverageParseError(f"Not a serialized value: {e}") from e


def load_container(data: bytes) -> Any:
    """Deserialize data that must hold an array or object.

    Raises:
        CoverageParseError: If the bytes don't deserialize, or hold a scalar.
    """
    value = load_serialized(data)
    if not isinstance(value, Mapping | phpserialize.phpobject):
        raise CoverageParseError(f"Serialized {type(value).__name__} holds no coverage data")
    return value


def _object_property(obj: phpserialize.phpobject, name: str) -> Any:
    # Private/protected properties serialize as "\0Class\0name" / "\0*\0name"
    for key, value in obj._asdict().items():
        if key == name or str(key).endswith("\0" + name):
            return value
    return None


def unwrap_snapshot(value: Any) -> Any:
    """Follow data accessors until a plain value is reached.

    Raises:
        CoverageParseError: If an object exposes no data accessor.
    """
    while isinstance(value, phpserialize.phpobject):
        for accessor in _DATA_ACCESSORS:
            inner = _object_property(value, accessor)
            if inner is not None:
                value = inner
                break
        else:
            raise CoverageParseError(f"Object {value.__name__} exposes no coverage data")
    return value


class SerializedParser:
    """Parser for PHP-serialized coverage data."""

    @property
    def format_id(self) -> str:
        return "serialized"

    def can_parse(self, data: bytes, hint: str) -> bool:  # noqa: ARG002
        """Always attempted: last generic strategy."""
        return True

    def parse(self, data: bytes) -> CoverageMap:
        """Deserialize and normalize nested line data."""
        try:
            value = load_container(data.strip())
        except CoverageParseError:
            match = _COVERAGE_FIELD.search(data)
            if match is None:
                raise
            value = load_container(data[match.end() :])

        return CoverageMap.from_lines(self.format_id, normalize_nested(unwrap_snapshot(value)))
