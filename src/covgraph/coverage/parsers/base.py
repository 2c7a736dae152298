"""Coverage parser protocol."""

from pathlib import PurePosixPath
from typing import Protocol

from covgraph.coverage.models import CoverageMap


def hint_suffix(hint: str) -> str:
    """Lower-cased extension carried by a filename hint.

    Accepts a bare extension (".xml") or a file name ("clover.xml").
    """
    hint = hint.strip().lower()
    if hint.startswith(".") and "." not in hint[1:]:
        return hint
    return PurePosixPath(hint).suffix


class CoverageParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one serialized representation and converts it to
    the canonical CoverageMap. Parsers are pure: bytes in, map out.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'clover', 'json')."""
        ...

    def can_parse(self, data: bytes, hint: str) -> bool:
        """Check whether this parser should be attempted.

        Uses the hint's extension and content sniffing.
        """
        ...

    def parse(self, data: bytes) -> CoverageMap:
        """Parse raw artifact bytes into the canonical model.

        Raises:
            CoverageParseError: If the content is not in this format.
        """
        ...
