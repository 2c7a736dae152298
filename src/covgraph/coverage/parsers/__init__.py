"""Coverage parser registry and format auto-detection.

This module provides:
- PARSER_REGISTRY: All available parsers, in detection order
- normalize: Detect the format of raw artifact bytes and parse them
"""

from collections.abc import Sequence

from covgraph.config.constants import SUPPORTED_FORMATS
from covgraph.core.errors import UnsupportedFormatError
from covgraph.core.logging import get_logger
from covgraph.coverage.models import CoverageMap, CoverageParseError

from .base import CoverageParser, hint_suffix
from .clover import CloverParser
from .json_format import JsonParser
from .php_source import PhpSourceParser
from .serialized import SerializedParser

log = get_logger("coverage.parsers")

# Parser registry - order matters for detection priority.
# A parser that claims the input but fails falls through to the next one.
PARSER_REGISTRY: Sequence[CoverageParser] = (
    CloverParser(),  # <?xml declaration or .xml hint
    JsonParser(),  # .json hint or leading "{"
    PhpSourceParser(),  # .php/.cov snapshot scripts
    SerializedParser(),  # PHP serialize() blobs (always attempted)
)

__all__ = [
    "PARSER_REGISTRY",
    "normalize",
    "hint_suffix",
    "CoverageParser",
    "CloverParser",
    "JsonParser",
    "PhpSourceParser",
    "SerializedParser",
]


def normalize(data: bytes, filename_hint: str = "") -> CoverageMap:
    """Parse a coverage artifact of unknown format into a CoverageMap.

    Args:
        data: Raw artifact bytes.
        filename_hint: File name or extension the bytes came from.

    Returns:
        CoverageMap from the first parser that produced a non-empty result.

    Raises:
        UnsupportedFormatError: If every applicable parser failed.

    Detection strategy:
    1. Try each parser in registry order
    2. Skip parsers that don't claim the input (can_parse)
    3. A parse error or an empty result falls through to the next parser
    """
    attempted: list[str] = []

    for parser in PARSER_REGISTRY:
        if not parser.can_parse(data, filename_hint):
            continue

        attempted.append(parser.format_id)
        try:
            coverage = parser.parse(data)
        except CoverageParseError as e:
            log.debug("format_rejected", format=parser.format_id, reason=str(e))
            continue

        if not coverage.files:
            log.debug("format_empty", format=parser.format_id)
            continue

        log.info("format_detected", format=parser.format_id, files=len(coverage.files))
        return coverage

    raise UnsupportedFormatError.exhausted(filename_hint, attempted, SUPPORTED_FORMATS)
