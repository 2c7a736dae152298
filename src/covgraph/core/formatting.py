"""Summary formatting utilities for consistent terminal output.

Design principles:
- Sample lists stay short ("a, b, c, +2 more")
- Grammatically correct (1 file vs 2 files)
- Percentages render the way they are stored (two decimals max)
"""

from __future__ import annotations

import re
from collections.abc import Sequence

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def format_sample_files(names: Sequence[str], *, max_shown: int = 3) -> str:
    """Format a list of file names, collapsing the tail.

    Examples:
        ["a.php"] -> "a.php"
        ["a.php", "b.php", "c.php", "d.php", "e.php"] -> "a.php, b.php, c.php, +2 more"
    """
    if not names:
        return ""

    result = ", ".join(names[:max_shown])
    if len(names) > max_shown:
        result += f", +{len(names) - max_shown} more"
    return result


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "file")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 file" or "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def format_percent(value: float) -> str:
    """Render a stored percentage without float noise.

    Examples:
        50.0 -> "50%"
        66.67 -> "66.67%"
    """
    return f"{value:g}%"


def sanitize_filename(name: str) -> str:
    """Replace characters unsafe for file names with underscores.

    Examples:
        Domain/User -> Domain_User
    """
    return _UNSAFE_FILENAME_CHARS.sub("_", name)
