"""Reading and writing txtar archives: a comment followed by named files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

_MARKER = b"-- "
_MARKER_END = b" --"
_NEWLINE_MARKER = b"\n-- "
_OUTPUT_PREFIX = "out"

PathLike = Union[str, "os.PathLike[str]"]


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


def _fix_nl(data: bytes) -> bytes:
    if not data or data.endswith(b"\n"):
        return data
    return data + b"\n"


def _comment_lines(comment: bytes):
    for line in comment.split(b"\n"):
        yield line[:-1] if line.endswith(b"\r") else line


@dataclass
class File:
    """One named file inside an archive."""

    name: str
    data: bytes = b""


@dataclass
class Archive:
    """A txtar archive: free-form comment text and an ordered list of files."""

    comment: bytes = b""
    files: list[File] = field(default_factory=list)

    def has_tag(self, key: str) -> bool:
        """Report whether a comment line consists of ``#key`` alone."""
        wanted = _encode("#" + key)
        return any(line.strip() == wanted for line in _comment_lines(self.comment))

    def value(self, key: str) -> Optional[str]:
        """Return the trimmed value of the first ``#key: value`` comment line, or None."""
        prefix = _encode("#" + key + ":")
        for line in _comment_lines(self.comment):
            if line.startswith(prefix):
                return _decode(line[len(prefix):].strip())
        return None

    def bool_value(self, key: str) -> bool:
        """Report whether ``#key: true`` is set in the comment."""
        return self.value(key) == "true"

    def without_outputs(self) -> "Archive":
        """Return a copy holding only the files whose names do not start with ``out``."""
        return Archive(
            comment=self.comment,
            files=[
                File(f.name, f.data)
                for f in self.files
                if not f.name.startswith(_OUTPUT_PREFIX)
            ],
        )


def _is_marker(data: bytes) -> tuple[str, bytes]:
    if not data.startswith(_MARKER):
        return "", b""
    after = b""
    newline = data.find(b"\n")
    if newline >= 0:
        data, after = data[:newline], data[newline + 1:]
    if not (data.endswith(_MARKER_END) and len(data) >= len(_MARKER) + len(_MARKER_END)):
        return "", b""
    name = _decode(data[len(_MARKER):len(data) - len(_MARKER_END)]).strip()
    return name, after


def _find_file_marker(data: bytes) -> tuple[bytes, str, bytes]:
    pos = 0
    while True:
        name, after = _is_marker(data[pos:])
        if name:
            return data[:pos], name, after
        found = data.find(_NEWLINE_MARKER, pos)
        if found < 0:
            return _fix_nl(data), "", b""
        pos = found + 1


def parse(data: Union[bytes, str]) -> Archive:
    """Parse txtar content into an Archive."""
    if isinstance(data, str):
        data = _encode(data)
    archive = Archive()
    archive.comment, name, rest = _find_file_marker(data)
    while name:
        content, next_name, rest = _find_file_marker(rest)
        archive.files.append(File(name, content))
        name = next_name
    return archive


def parse_file(path: PathLike) -> Archive:
    """Read and parse the txtar file at ``path``."""
    return parse(Path(path).read_bytes())


def format_archive(archive: Archive) -> bytes:
    """Serialise an archive; the comment and every file end with a newline."""
    chunks = [_fix_nl(archive.comment)]
    for f in archive.files:
        chunks.append(_encode(f"-- {f.name} --\n"))
        chunks.append(_fix_nl(f.data))
    return b"".join(chunks)


def dedupe(archive: Archive) -> None:
    """Drop files with repeated names, keeping the last of each, in place.

    The surviving files are left in reverse order; callers sort afterwards.
    """
    seen: set[str] = set()
    kept: list[File] = []
    for f in reversed(archive.files):
        if f.name not in seen:
            kept.append(f)
        seen.add(f.name)
    archive.files = kept


def clean_outputs(root: PathLike) -> list[Path]:
    """Strip output files from every ``.txtar`` file under ``root``.

    Returns the paths of the archives that were rewritten. Raises
    FileNotFoundError if ``root`` does not exist.
    """
    base = Path(root)
    if not base.exists():
        raise FileNotFoundError(f"no such file or directory: {str(base)!r}")
    if base.is_file():
        candidates = [base]
    else:
        candidates = sorted(p for p in base.rglob("*.txtar") if p.is_file())
    rewritten: list[Path] = []
    for path in candidates:
        if path.suffix != ".txtar":
            continue
        cleaned = parse_file(path).without_outputs()
        path.write_bytes(format_archive(cleaned))
        rewritten.append(path)
    return rewritten