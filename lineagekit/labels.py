"""Overlay building, label sanitising and small string helpers."""

from __future__ import annotations

import os
import random
import string
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Union

PREFIX = "C:\\" if os.name == "nt" else "/"

_LETTERS = string.ascii_lowercase + string.ascii_uppercase
_LABEL_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_MUST_QUOTE = frozenset({"string", "number", "int", "uint", "float", "byte"})

FileSource = Union[str, "os.PathLike[str]", Mapping[str, bytes]]


def _iter_files(root: FileSource):
    if isinstance(root, Mapping):
        for name, data in root.items():
            yield PurePosixPath(name).parts, bytes(data)
        return
    base = Path(root)
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames.sort()
        for filename in sorted(filenames):
            full = Path(dirpath) / filename
            yield full.relative_to(base).parts, full.read_bytes()


def to_overlay(prefix: str, root: FileSource) -> dict[str, bytes]:
    """Map every file under ``root`` to its contents, keyed under ``prefix``.

    ``root`` is a directory or a mapping of slash-separated names to bytes.
    Raises ValueError if ``prefix`` is not an absolute path.
    """
    if not os.path.isabs(prefix):
        raise ValueError(
            f"must provide absolute path prefix when generating cue overlay, got {prefix!r}"
        )
    return {os.path.join(prefix, *parts): data for parts, data in _iter_files(root)}


def rand_seq(n: int) -> str:
    """Return ``n`` random (non-cryptographic) ASCII letters."""
    return "".join(random.choice(_LETTERS) for _ in range(n))


def must_quote(name: str) -> bool:
    """Report whether ``name`` collides with a builtin type name and needs quoting."""
    return name in _MUST_QUOTE


def sanitize_label_string(s: str) -> str:
    """Drop every character not allowed in a label: keeps ASCII letters, digits and ``_``."""
    return "".join(char for char in s if char in _LABEL_CHARS)