"""Clover XML format parser.

Clover is what PHPUnit writes with --coverage-clover (also kover for
Kotlin, OpenClover for Java).

Structure:
<?xml version="1.0" encoding="UTF-8"?>
<coverage generated="...">
  <project timestamp="...">
    <package name="App\\Domain">
      <file name="/app/src/Domain/User.php">
        <class name="User" .../>
        <line num="10" type="method" name="getName" count="3"/>
        <line num="11" type="stmt" count="3"/>
        <line num="14" type="cond" count="0" truecount="0" falsecount="1"/>
        <metrics .../>
      </file>
    </package>
  </project>
</coverage>

Only ``stmt`` lines are executable statements; method and conditional
entries describe the same lines again and are skipped.
"""

import xml.etree.ElementTree as ET

from covgraph.coverage.models import CoverageMap, CoverageParseError, LineMap

from .base import hint_suffix


class CloverParser:
    """Parser for Clover XML format."""

    @property
    def format_id(self) -> str:
        return "clover"

    def can_parse(self, data: bytes, hint: str) -> bool:
        """XML declaration in the content, or an .xml hint."""
        return b"<?xml" in data or hint_suffix(hint) == ".xml"

    def parse(self, data: bytes) -> CoverageMap:
        """Parse Clover XML into CoverageMap."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise CoverageParseError(f"Invalid Clover XML: {e}") from e

        # Strip namespace if present
        for elem in root.iter():
            if isinstance(elem.tag, str) and "}" in elem.tag:
                elem.tag = elem.tag.split("}", 1)[1]

        files: dict[str, LineMap] = {}

        for file_elem in root.iter("file"):
            filename = file_elem.get("name") or file_elem.get("path", "")
            if not filename:
                continue

            lines = files.setdefault(filename, {})
            for line in file_elem.findall("line"):
                if line.get("type") != "stmt":
                    continue
                try:
                    num = int(line.get("num", 0))
                    count = int(line.get("count", 0))
                except ValueError as e:
                    raise CoverageParseError(f"Invalid line entry in {filename}: {e}") from e
                lines[num] = max(count, 0)

        return CoverageMap.from_lines(self.format_id, files)
