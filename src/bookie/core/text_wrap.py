"""Greedy word wrapping against a string-width oracle."""

from typing import Callable

StringWidth = Callable[[str], float]


def split_text(text: str, width: float, string_width: StringWidth) -> list[str]:
    """Split ``text`` on single spaces into lines no wider than ``width``.

    Words are never broken: a word wider than ``width`` gets a line of its own.
    Empty input yields an empty list.
    """
    if not text:
        return []

    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if string_width(candidate) > width:
            if current:
                lines.append(current)
                current = word
            else:
                lines.append(word)
        else:
            current = candidate

    if current:
        lines.append(current)
    return lines
