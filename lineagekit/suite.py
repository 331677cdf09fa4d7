"""Running test cases stored in txtar archives and checking their golden outputs."""

from __future__ import annotations

import difflib
import json
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from lineagekit.envvars import EnvSettings
from lineagekit.golden import (
    GoldenMismatch,
    GoldenRecorder,
    iter_txtar_cases,
    skip_reason,
)
from lineagekit.labels import PREFIX, FileSource, to_overlay
from lineagekit.txtar import Archive, File, format_archive, parse_file

PathLike = Union[str, "os.PathLike[str]"]

_THEMA_PKG_PARTS = ("cue.mod", "pkg", "github.com", "grafana", "thema")


class SuiteCase:
    """One txtar case: its archive plus the outputs the test writes.

    Output named ``<sub>`` is compared with ``out/<suite name>/<sub>`` in
    the archive; the main output with ``out/<suite name>``.
    """

    def __init__(
        self,
        archive: Archive,
        test_name: str,
        name: str = "",
        directory: PathLike = ".",
        thema_files: Optional[FileSource] = None,
    ):
        self.archive = archive
        self.test_name = test_name
        self.thema_files = thema_files
        self.directory = os.fspath(directory)
        self._recorder = GoldenRecorder(name, directory)
        self.prefix = self._recorder.prefix
        self.has_gold = any(
            f.name == self.prefix or f.name.startswith(self.prefix + "/")
            for f in archive.files
        )

    def write(self, data: Union[bytes, str]) -> int:
        """Append to the main output; returns the number of bytes written."""
        return self._recorder.write(data)

    def writer(self, name: str):
        """Return the buffer for output ``name``; an empty name means the main output."""
        return self._recorder.writer(name)

    def write_file(self, name: str, content: Any) -> None:
        """Write ``== <base name>`` and then ``content`` to the main output.

        Text and bytes are written as they are; for a ``.json`` name any
        other value is rendered as JSON indented by two spaces.
        """
        self.write(f"== {os.path.basename(name)}\n")
        if isinstance(content, (bytes, bytearray, str)):
            self.write(bytes(content) if not isinstance(content, str) else content)
        elif name.endswith(".json"):
            self.write(json.dumps(content, indent=2))
        else:
            raise TypeError(
                f"cannot format {type(content).__name__} content for file {name!r}"
            )

    def rel(self, filename: PathLike) -> str:
        """Return ``filename`` relative to the case directory, slash separated."""
        return self._recorder.rel(filename)

    def has_tag(self, key: str) -> bool:
        """Report whether the archive comment holds a ``#key`` line."""
        return self.archive.has_tag(key)

    def value(self, key: str) -> Optional[str]:
        """Return the value of a ``#key: value`` comment line, or None."""
        return self.archive.value(key)

    def bool_value(self, key: str) -> bool:
        """Report whether ``#key: true`` is set in the comment."""
        return self.archive.bool_value(key)

    def outputs(self) -> dict[str, bytes]:
        """Return every recorded output by full name, in creation order."""
        return self._recorder.outputs()


def _merge(
    archive: Archive, outputs: Mapping[str, bytes], update: bool
) -> tuple[bool, list[str]]:
    original = archive.files
    index = {f.name: i for i, f in enumerate(original)}
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
            if gold.data == result or gold.data.rstrip(b"\n") == result:
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
    return changed, messages


@dataclass
class TxtarSuite:
    """Runs a function over every ``.txtar`` case under ``root``.

    ``root`` must lie inside a ``testdata`` directory; case names are the
    paths after it. With ``update`` (default: the THEMA_UPDATE_GOLDEN
    variable) differing golden files are rewritten instead of reported.
    """

    root: PathLike
    name: str
    thema_files: Optional[FileSource] = None
    skip: Mapping[str, str] = field(default_factory=dict)
    todo: Mapping[str, str] = field(default_factory=dict)
    short: bool = False
    update: Optional[bool] = None

    def run(self, func: Callable[[SuiteCase], Any]) -> dict[str, Optional[str]]:
        """Run ``func`` on each case and check its outputs.

        Returns a mapping of case name to skip reason (None for cases that
        ran). Raises GoldenMismatch after all cases if any output differed.
        """
        update = (
            EnvSettings.from_environ().update_golden_files
            if self.update is None
            else self.update
        )
        results: dict[str, Optional[str]] = {}
        failures: list[str] = []
        for test_name, path in iter_txtar_cases(self.root):
            archive = parse_file(path)
            reason = skip_reason(archive, test_name, self.skip, self.todo, self.short)
            results[test_name] = reason
            if reason is not None:
                continue

            case = SuiteCase(
                archive,
                test_name,
                name=self.name,
                directory=Path(path).resolve().parent,
                thema_files=self.thema_files,
            )
            func(case)

            changed, messages = _merge(archive, case.outputs(), update)
            failures.extend(f"{test_name}: {message}" for message in messages)
            if changed:
                Path(path).write_bytes(format_archive(archive))

        if failures:
            raise GoldenMismatch(failures)
        return results


def vanilla_overlay(
    archive: Archive,
    thema_files: Optional[FileSource] = None,
    args: Optional[Sequence[str]] = None,
) -> tuple[list[str], dict[str, bytes]]:
    """Build load arguments and a file overlay rooted at the filesystem root.

    Without ``args``, every file at the archive's top level becomes an
    argument. The thema files, if given, are placed under
    ``cue.mod/pkg/github.com/grafana/thema``.
    """
    auto = not args
    load_args = list(args or ())
    overlay: dict[str, bytes] = {}
    for f in archive.files:
        if auto and "/" not in f.name:
            load_args.append(f.name)
        overlay[os.path.join(PREFIX, *f.name.split("/"))] = f.data
    if thema_files is not None:
        overlay.update(to_overlay(os.path.join(PREFIX, *_THEMA_PKG_PARTS), thema_files))
    return load_args, overlay