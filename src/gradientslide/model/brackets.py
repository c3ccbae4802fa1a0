"""
Balanced delimiter reader used by the LaTeX translator.
"""
from __future__ import annotations

from typing import Dict, Tuple

CLOSING: Dict[str, str] = {"{": "}", "(": ")"}


def read_group(text: str, index: int) -> Tuple[str, int]:
    """
    Read the group opened at ``text[index]``.

    Only delimiters of the same type as the opener change the depth, so
    ``{a(b}`` is a complete brace group.

    Args:
        text: The string to read from.
        index: Position of the opening delimiter ('{' or '(').

    Returns:
        (content, end) where content is the text strictly between the opener
        and its matching closer, and end is the index just past the closer.
        If ``index`` does not point at an opener, returns ("", index).
        An unterminated group returns everything after the opener and
        ``len(text)``.
    """
    if index < 0 or index >= len(text) or text[index] not in CLOSING:
        return "", index

    opener = text[index]
    closer = CLOSING[opener]
    depth = 0
    for pos in range(index, len(text)):
        char = text[pos]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[index + 1:pos], pos + 1

    return text[index + 1:], len(text)
