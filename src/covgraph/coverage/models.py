"""Canonical coverage data model.

File-centric model: every input format is normalized to a map of file path
to per-line execution counts. A line mapped to None is recorded in the
artifact but not executable; it never counts toward totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LineMap = dict[int, int | None]


class CoverageParseError(Exception):
    """A single normalizer strategy rejected the input.

    Recovered locally by falling through to the next strategy.
    """

    pass


@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Coverage data for a single file.

    Lines are stored as a dict mapping line number → hit count (or None).
    Line numbers are 1-based to match source file conventions.
    """

    path: str  # as recorded in the artifact, not normalized
    lines: LineMap = field(default_factory=dict)

    @property
    def executable_lines(self) -> int:
        """Number of lines eligible for coverage."""
        return sum(1 for hits in self.lines.values() if hits is not None)

    @property
    def covered_lines(self) -> int:
        """Number of lines executed at least once."""
        return sum(1 for hits in self.lines.values() if hits is not None and hits > 0)


@dataclass(frozen=True, slots=True)
class CoverageMap:
    """Normalized coverage artifact.

    Files are keyed by path in discovery order.
    """

    source_format: str  # format id of the strategy that accepted the input
    files: dict[str, FileCoverage] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.files)

    @classmethod
    def from_lines(cls, source_format: str, lines_by_path: dict[str, LineMap]) -> CoverageMap:
        return cls(
            source_format=source_format,
            files={path: FileCoverage(path=path, lines=lines) for path, lines in lines_by_path.items()},
        )
