"""Golden-output recording and comparison against txtar archives."""

from __future__ import annotations

import difflib
import io
import os
import posixpath
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Optional, Union

from lineagekit.envvars import VAR_UPDATE_GOLDEN
from lineagekit.txtar import Archive, File, dedupe

_TESTDATA = "/testdata/"
_TXTAR_EXT = ".txtar"
_EXEMPLAR_PREFIX = "exemplar_"

PathLike = Union[str, "os.PathLike[str]"]


def _join(*parts: str) -> str:
    """Join slash-separated elements, ignoring empty ones, and clean the result."""
    kept = [p for p in parts if p]
    if not kept:
        return ""
    return posixpath.normpath(posixpath.join(*kept))


class GoldenMismatch(AssertionError):
    """Recorded output disagrees with the golden files of an archive."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("\n".join(self.messages))


class _OutputBuffer(io.BytesIO):
    """A byte buffer that also accepts text, encoded as UTF-8."""

    def write(self, data: Union[bytes, bytearray, str]) -> int:  # type: ignore[override]
        if isinstance(data, str):
            data = data.encode("utf-8")
        return super().write(data)


class GoldenRecorder:
    """Collects named outputs of one test case and merges them into an archive.

    Outputs are named ``out/<name>`` for the main output and
    ``out/<name>/<sub>`` for named ones.
    """

    def __init__(
        self,
        name: str,
        directory: PathLike = ".",
        allow_fileset_divergence: bool = False,
    ):
        self.prefix = _join("out", name)
        self.directory = os.fspath(directory)
        self.allow_fileset_divergence = allow_fileset_divergence
        self._buffers: dict[str, _OutputBuffer] = {}
        self._main: Optional[_OutputBuffer] = None

    def write(self, data: Union[bytes, str]) -> int:
        """Append to the main output; returns the number of bytes written."""
        if self._main is None:
            self._main = _OutputBuffer()
            self._buffers[self.prefix] = self._main
        return self._main.write(data)

    def writer(self, name: str) -> _OutputBuffer:
        """Return the buffer for output ``name``; an empty name means the main output."""
        full = self.prefix if not name else _join(self.prefix, name)
        existing = self._buffers.get(full)
        if existing is not None:
            return existing
        buf = _OutputBuffer()
        self._buffers[full] = buf
        if full == self.prefix:
            self._main = buf
        return buf

    def rel(self, filename: PathLike) -> str:
        """Return ``filename`` relative to the test directory, slash separated.

        Falls back to the base name when no relative path can be formed.
        """
        target = os.fspath(filename)
        if os.path.isabs(target) != os.path.isabs(self.directory):
            return os.path.basename(target)
        try:
            rel = os.path.relpath(target, self.directory)
        except ValueError:
            return os.path.basename(target)
        return Path(rel).as_posix()

    def outputs(self) -> dict[str, bytes]:
        """Return every recorded output by full name, in creation order."""
        return {name: buf.getvalue() for name, buf in self._buffers.items()}

    def merge(self, archive: Archive, update: bool = False) -> bool:
        """Compare recorded outputs with the archive's golden files.

        The archive's file list is rearranged in place. With ``update`` the
        golden files are replaced by the outputs and stale ones dropped.
        Returns whether the archive changed and should be written back.
        Raises GoldenMismatch, after rearranging, if outputs disagree.
        """
        outputs = self.outputs()
        original = archive.files
        index = {f.name: i for i, f in enumerate(original)}
        this_prefix = {f.name for f in original if f.name.startswith(self.prefix)}
        messages: list[str] = []
        changed = False

        k = len(original)
        for name in outputs:
            if name in index:
                k = index[name]
                break
        files = list(original[:k])

        for name, result in outputs.items():
            gold = File(name)
            files.append(gold)
            if name in index:
                gold.data = original[index[name]].data
                del index[name]
                this_prefix.discard(name)
                if gold.data == result:
                    continue
            elif not self.allow_fileset_divergence and not update:
                if name.endswith("/err"):
                    messages.append(
                        f"error for result {name.removesuffix('/err')}:\n"
                        f"{result.decode('utf-8', errors='replace')}"
                    )
                else:
                    messages.append(
                        f"result {name} does not exist (rerun with {VAR_UPDATE_GOLDEN}=1 to fix)"
                    )
                continue

            if update:
                changed = True
                gold.data = result
                continue

            diff = "".join(
                difflib.unified_diff(
                    gold.data.decode("utf-8", errors="replace").splitlines(keepends=True),
                    result.decode("utf-8", errors="replace").splitlines(keepends=True),
                    fromfile="gold",
                    tofile="result",
                )
            )
            messages.append(f"result for {name} differs:\n{diff}")

        files.extend(f for f in original[k:] if f.name in index)
        archive.files = files

        if not self.allow_fileset_divergence and this_prefix:
            if not update:
                extra = "\n\t".join(sorted(this_prefix))
                messages.append(
                    f"output not generated by test (rerun with {VAR_UPDATE_GOLDEN}=1 to fix):"
                    f"\n\t{extra}\n"
                )
            else:
                changed = True
                seen: set[str] = set()
                filtered: list[File] = []
                for f in reversed(archive.files):
                    if not f.name.startswith(self.prefix) or (
                        f.name not in this_prefix and f.name not in seen
                    ):
                        filtered.append(f)
                    seen.add(f.name)
                archive.files = filtered

        if changed:
            dedupe(archive)
            archive.files.sort(key=lambda f: (f.name.startswith("out/"), f.name))

        if messages:
            raise GoldenMismatch(messages)
        return changed


def exemplar_name_from_path(path: PathLike) -> str:
    """Return the exemplar name of an ``exemplar_<name>.txtar`` file, else ``""``."""
    name = os.path.basename(os.fspath(path))
    if not name or not name.endswith(_TXTAR_EXT) or not name.startswith(_EXEMPLAR_PREFIX):
        return ""
    return name[len(_EXEMPLAR_PREFIX):-len(_TXTAR_EXT)]


def test_name_from_path(path: PathLike) -> str:
    """Return the part of a txtar path after ``testdata/``, without the extension.

    Raises ValueError if the path is not a ``.txtar`` file under a testdata directory.
    """
    text = Path(os.fspath(path)).as_posix()
    if not text.endswith(_TXTAR_EXT):
        raise ValueError(f"not a txtar file: {text!r}")
    pos = text.find(_TESTDATA)
    if pos >= 0:
        start = pos + len(_TESTDATA)
    elif text.startswith(_TESTDATA[1:]):
        start = len(_TESTDATA) - 1
    else:
        raise ValueError(f"path {text!r} is not under a testdata directory")
    return text[start:-len(_TXTAR_EXT)]


test_name_from_path.__test__ = False  # type: ignore[attr-defined]


def _walk(directory: Path) -> Iterator[Path]:
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        child = directory / entry.name
        if entry.is_dir():
            yield from _walk(child)
        else:
            yield child


def iter_txtar_cases(root: PathLike) -> Iterator[tuple[str, Path]]:
    """Yield ``(test_name, path)`` for each ``.txtar`` file under ``root``, in lexical order."""
    for path in _walk(Path(root)):
        if path.suffix == _TXTAR_EXT:
            yield test_name_from_path(path), path


def skip_reason(
    archive: Archive,
    test_name: str,
    skip: Optional[Mapping[str, str]] = None,
    todo: Optional[Mapping[str, str]] = None,
    short: bool = False,
) -> Optional[str]:
    """Return why a case should be skipped, or None to run it."""
    if archive.has_tag("skip"):
        return "case is tagged #skip"
    if short and archive.has_tag("slow"):
        return "case is tagged #slow, skipping for -short"
    for table in (skip, todo):
        if table is not None and test_name in table:
            return table[test_name]
    return None