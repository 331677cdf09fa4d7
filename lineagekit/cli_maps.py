"""Parsing of command-line maps and lists, and media type checks."""

from __future__ import annotations

_QUOTE = '"'


def split_string(s: str, sep: str) -> list[str]:
    """Split ``s`` on ``sep``, leaving separators inside double quotes alone.

    Quotes are kept in the returned parts.
    """
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in s:
        if char == _QUOTE:
            in_quotes = not in_quotes
        if char == sep and not in_quotes:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def parse_commandline_map(src: str) -> dict[str, str]:
    """Parse ``key1:value1,key2:value2`` into a dict.

    Keys and values may be double-quoted to protect commas and colons.
    Raises ValueError on a pair that is not of the form ``key:value``.
    """
    result: dict[str, str] = {}
    for pair in split_string(src, ","):
        kv = split_string(pair, ":")
        if len(kv) != 2:
            raise ValueError(f"expected key:value, got :{pair}")
        key, value = (part.strip(_QUOTE) for part in kv)
        result[key] = value
    return result


def parse_commandline_list(text: str) -> list[str]:
    """Parse a comma separated list, trimming whitespace and dropping empties."""
    text = text.strip()
    if not text:
        return []
    return [item for item in (part.strip() for part in text.split(",")) if item]


def is_media_type_json(media_type: str) -> bool:
    """Report whether a media type denotes JSON content."""
    return media_type == "application/json" or media_type.endswith("+json")