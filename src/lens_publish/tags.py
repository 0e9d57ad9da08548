"""Hashtag extraction for publication metadata tags."""

import re

from .utils import deduplicate_preserving_order

_HASHTAG = re.compile(r"(?<![\w#])#(\w+)")


def get_tags(content: str) -> list[str]:
    """Extract hashtag tokens from content.

    "#web3 is #fun #web3" yields ["web3", "fun"]. Case is preserved.
    """
    return deduplicate_preserving_order(_HASHTAG.findall(content))
