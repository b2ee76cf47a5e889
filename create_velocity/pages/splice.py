"""Anchor-based text splicing.

Generated configuration files are edited without parsing them: new text is
inserted immediately before a literal anchor, and numeric metadata is
recovered by pattern matching. Callers go through these few functions only,
so a structural parser could replace them later.
"""

from __future__ import annotations

import re

NAV_ORDER_STEP = 10


def insert_before(content: str, anchor: str, text: str, *, last: bool = False) -> str | None:
    """Insert *text* immediately before *anchor*.

    The first occurrence is used unless *last* is set. Returns ``None`` when
    the anchor does not occur in *content*.
    """
    index = content.rfind(anchor) if last else content.find(anchor)
    if index == -1:
        return None
    return content[:index] + text + content[index:]


def insert_into_block(content: str, block_pattern: str, text: str) -> str | None:
    """Insert *text* before the closing brace of the first block matching *block_pattern*.

    *block_pattern* must match the whole block including its closing ``}``.
    Returns ``None`` when no block matches.
    """
    match = re.search(block_pattern, content)
    if match is None:
        return None
    block = match.group(0)
    close = block.rfind("}")
    new_block = block[:close] + text + block[close:]
    return content[: match.start()] + new_block + content[match.end():]


def find_max_integer_after(content: str, label: str) -> int:
    """Return the largest integer written as ``<label>: <n>`` anywhere in *content*, or 0."""
    pattern = re.compile(rf"{re.escape(label)}:\s*(\d+)")
    return max((int(m.group(1)) for m in pattern.finditer(content)), default=0)


def next_nav_order(content: str) -> int:
    """Next navigation order: one step past the current maximum ``order`` value."""
    return find_max_integer_after(content, "order") + NAV_ORDER_STEP


def has_key(content: str, key: str) -> bool:
    """Substring test for ``<key>:``.

    May report a false positive when the text appears in a comment or value.
    """
    return f"{key}:" in content
