"""Small text and sequence helpers."""

import re

_BLANK_LINES = re.compile(r"\n\s*\n")


def trimify(value: str) -> str:
    """Collapse runs of blank lines to one blank line and strip surrounding whitespace."""
    return _BLANK_LINES.sub("\n\n", value).strip()


def deduplicate_preserving_order(items: list[str]) -> list[str]:
    """Remove duplicates, keeping the first occurrence of each item."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
