"""JSON coverage format parser.

Two shapes are accepted:

Wrapped (takes precedence when a "files" key exists):
{
  "files": {
    "src/Controller/Home.php": {"lines": {"20": 1, "22": 0}}
  }
}

Flat:
{
  "src/Controller/Home.php": {"20": 1, "21": null, "22": 0}
}

Line keys are strings in JSON; null marks a non-executable line.
"""

import json
from collections.abc import Mapping

from covgraph.coverage.lines import lines_from_counts, normalize_counts
from covgraph.coverage.models import CoverageMap, CoverageParseError, LineMap

from .base import hint_suffix


class JsonParser:
    """Parser for JSON coverage maps."""

    @property
    def format_id(self) -> str:
        return "json"

    def can_parse(self, data: bytes, hint: str) -> bool:
        """A .json hint, or content that opens with an object."""
        return hint_suffix(hint) == ".json" or data.strip().startswith(b"{")

    def parse(self, data: bytes) -> CoverageMap:
        """Parse JSON into CoverageMap."""
        try:
            payload = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CoverageParseError(f"Invalid JSON: {e}") from e

        if not isinstance(payload, Mapping):
            raise CoverageParseError("JSON coverage must be an object")

        if "files" in payload:
            return CoverageMap.from_lines(self.format_id, self._parse_wrapped(payload["files"]))

        files = normalize_counts(
            {path: lines for path, lines in payload.items() if isinstance(lines, Mapping)}
        )
        return CoverageMap.from_lines(self.format_id, files)

    def _parse_wrapped(self, files_data: object) -> dict[str, LineMap]:
        if not isinstance(files_data, Mapping):
            raise CoverageParseError('"files" must be an object')

        files: dict[str, LineMap] = {}
        for filename, file_data in files_data.items():
            if not isinstance(file_data, Mapping):
                continue
            lines = file_data.get("lines")
            # "lines": null (or any scalar) carries no line data
            if isinstance(lines, Mapping | list):
                files[filename] = lines_from_counts(lines)
        return files
