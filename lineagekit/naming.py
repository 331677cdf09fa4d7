"""Identifier, type-name and comment helpers for generated Go code."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Sequence

_GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select", "struct",
        "switch", "type", "var",
    }
)

_PREDECLARED = frozenset(
    {
        # types
        "bool", "byte", "complex64", "complex128", "error", "float32",
        "float64", "int", "int8", "int16", "int32", "int64", "rune", "string",
        "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
        # constants
        "true", "false", "iota",
        # zero value
        "nil",
        # functions
        "append", "cap", "close", "complex", "copy", "delete", "imag", "len",
        "make", "new", "panic", "print", "println", "real", "recover",
    }
)

_SEPARATORS = frozenset("-#@!$&=.+:;_~ (){}[]")

_PREFIX_WORDS = {
    "-": "Minus",
    "+": "Plus",
    "&": "And",
    "|": "Or",
    "~": "Tilde",
    "=": "Equal",
    "#": "Hash",
    ".": "Dot",
    "*": "Asterisk",
    "^": "Caret",
    "%": "Percent",
}


def _is_upper(char: str) -> bool:
    return unicodedata.category(char) == "Lu"


def _is_lower(char: str) -> bool:
    return unicodedata.category(char) == "Ll"


def _is_digit(char: str) -> bool:
    return unicodedata.category(char) == "Nd"


def _is_number(char: str) -> bool:
    return unicodedata.category(char).startswith("N")


def _is_letter(char: str) -> bool:
    return unicodedata.category(char).startswith("L")


def _to_upper(char: str) -> str:
    upper = char.upper()
    return upper if len(upper) == 1 else char


def _to_lower(char: str) -> str:
    lower = char.lower()
    return lower if len(lower) == 1 else char


def uppercase_first_character(s: str) -> str:
    """Upper-case the first character of ``s``."""
    if not s:
        return ""
    return _to_upper(s[0]) + s[1:]


def uppercase_first_character_with_pkg_name(s: str) -> str:
    """Upper-case the first character of an identifier that may carry a ``pkg.`` prefix."""
    if not s:
        return ""
    segments = s.split(".")
    prefix = ""
    if len(segments) == 2:
        prefix = segments[0] + "."
        s = segments[1]
    if not s:
        raise ValueError(f"empty identifier after package name in {prefix!r}")
    return prefix + _to_upper(s[0]) + s[1:]


def lowercase_first_character(s: str) -> str:
    """Lower-case the first character of ``s``."""
    if not s:
        return ""
    return _to_lower(s[0]) + s[1:]


def to_camel_case(s: str) -> str:
    """Convert a delimiter-separated string to CamelCase.

    Upper-case letters and digits are kept, lower-case letters are kept and
    capitalised after a separator (or at the start); everything else is dropped.
    """
    out: list[str] = []
    cap_next = True
    for char in s.strip(" "):
        if _is_upper(char) or _is_digit(char):
            out.append(char)
        if _is_lower(char):
            out.append(_to_upper(char) if cap_next else char)
        cap_next = char in _SEPARATORS
    return "".join(out)


def is_go_keyword(s: str) -> bool:
    """Report whether ``s`` is a Go keyword."""
    return s in _GO_KEYWORDS


def is_predeclared_go_identifier(s: str) -> bool:
    """Report whether ``s`` is a predeclared Go identifier."""
    return s in _PREDECLARED


def _is_valid_char_for_go_id(index: int, char: str) -> bool:
    if index == 0 and _is_number(char):
        return False
    return _is_letter(char) or char == "_" or _is_number(char)


def is_go_identity(s: str) -> bool:
    """Report whether ``s`` consists of identifier characters and is a keyword."""
    if not all(_is_valid_char_for_go_id(i, c) for i, c in enumerate(s)):
        return False
    return is_go_keyword(s)


def is_valid_go_identity(s: str) -> bool:
    """Report whether ``s`` may name a variable, constant or type."""
    if is_go_identity(s):
        return False
    return not is_predeclared_go_identifier(s)


def sanitize_go_identity(s: str) -> str:
    """Replace illegal characters with ``_`` and escape keywords and predeclared names."""
    sanitized = "".join(
        c if _is_valid_char_for_go_id(i, c) else "_" for i, c in enumerate(s)
    )
    if is_go_keyword(sanitized) or is_predeclared_go_identifier(sanitized):
        sanitized = "_" + sanitized
    if not is_valid_go_identity(sanitized):
        raise RuntimeError(f"could not sanitize identifier {s!r}")
    return sanitized


def sanitize_enum_names(
    enum_names: Sequence[str], enum_values: Sequence[str]
) -> dict[str, str]:
    """Map sanitised, de-duplicated enum names to their values.

    Values without a name of their own use the value as the name. Names that
    collide after sanitising get a numeric suffix.
    """
    deduped: dict[str, str] = {}
    for i, value in enumerate(enum_values):
        name = enum_names[i] if i < len(enum_names) else value
        deduped.setdefault(name, value)

    counts: dict[str, int] = {}
    result: dict[str, str] = {}
    for name, value in deduped.items():
        sanitized = sanitize_go_identity(schema_name_to_type_name(name))
        if sanitized in counts:
            result[sanitized + str(counts[sanitized])] = value
        else:
            result[sanitized] = value
        counts[sanitized] = counts.get(sanitized, 0) + 1
    return result


def _type_name_prefix(name: str) -> str:
    if not name:
        return "Empty"
    prefix = ""
    for char in name:
        if char == "$":
            if name == "$":
                return "DollarSign"
            continue
        word = _PREFIX_WORDS.get(char)
        if word is not None:
            prefix += word
            continue
        if not prefix and _is_digit(char):
            return "N"
        return prefix
    return prefix


def schema_name_to_type_name(name: str) -> str:
    """Convert a schema name into a valid CamelCase Go type name."""
    return _type_name_prefix(name) + to_camel_case(name)


def path_to_type_name(path: Iterable[str]) -> str:
    """Join CamelCased path elements with ``_`` into a type name."""
    return "_".join(to_camel_case(part) for part in path)


def _to_go_comment(text: str, prefix: str) -> str:
    if not text.strip():
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = []
    for i, line in enumerate(text.split("\n")):
        marker = "//"
        if i == 0 and prefix:
            marker += " " + prefix
        lines.append(f"{marker} {line}")
    return "\n".join(lines).removesuffix("\n// ")


def string_to_go_comment(text: str) -> str:
    """Render a possibly multi-line string as Go line comments."""
    return _to_go_comment(text, "")


def string_with_type_name_to_go_comment(text: str, type_name: str) -> str:
    """Render a string as Go line comments, the first line led by ``type_name``."""
    return _to_go_comment(text, type_name)


def deprecation_comment(reason: str) -> str:
    """Render a ``Deprecated:`` comment with an optional reason."""
    content = "Deprecated:"
    if reason:
        content += f" {reason}"
    return _to_go_comment(content, "")