import os

import pytest

from lineagekit.golden import GoldenMismatch
from lineagekit.labels import PREFIX
from lineagekit.suite import SuiteCase, TxtarSuite, vanilla_overlay
from lineagekit.txtar import Archive, File, parse, parse_file


def _make_case(tmp_path, rel, text):
    path = tmp_path / "testdata" / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_run_matching_output_passes(tmp_path):
    _make_case(tmp_path, "grp/a.txtar", "-- in.cue --\nx: 1\n-- out/bind --\nhello\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=False)
    seen = []

    def body(case):
        seen.append(case.test_name)
        case.write("hello\n")

    assert suite.run(body) == {"grp/a": None}
    assert seen == ["grp/a"]


def test_trailing_newline_in_gold_is_tolerated(tmp_path):
    _make_case(tmp_path, "a.txtar", "-- out/bind --\nhello\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=False)
    assert suite.run(lambda case: case.write("hello")) == {"a": None}


def test_mismatch_raises_with_case_name(tmp_path):
    _make_case(tmp_path, "a.txtar", "-- out/bind --\nhello\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=False)
    with pytest.raises(GoldenMismatch) as info:
        suite.run(lambda case: case.write("goodbye\n"))
    assert "a: result for out/bind differs" in str(info.value)


def test_missing_gold_is_a_mismatch(tmp_path):
    _make_case(tmp_path, "a.txtar", "-- in.cue --\nx: 1\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=False)
    with pytest.raises(GoldenMismatch) as info:
        suite.run(lambda case: case.writer("sub").write("data\n"))
    assert "out/bind/sub" in str(info.value)


def test_update_rewrites_archive(tmp_path):
    path = _make_case(tmp_path, "a.txtar", "-- in.cue --\nx: 1\n-- out/bind --\nold\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=True)
    suite.run(lambda case: case.write("new\n"))
    archive = parse_file(path)
    assert [f.name for f in archive.files] == ["in.cue", "out/bind"]
    assert archive.files[1].data == b"new\n"
    # A second run without update now passes.
    suite.update = False
    assert suite.run(lambda case: case.write("new\n")) == {"a": None}


def test_unchanged_archive_not_rewritten(tmp_path):
    text = "comment\n-- out/bind --\nsame\n"
    path = _make_case(tmp_path, "a.txtar", text)
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", update=True)
    suite.run(lambda case: case.write("same\n"))
    assert path.read_text() == text


def test_skip_tag_and_todo(tmp_path):
    _make_case(tmp_path, "a.txtar", "#skip\n-- out/bind --\nx\n")
    _make_case(tmp_path, "b.txtar", "-- out/bind --\nx\n")
    _make_case(tmp_path, "c.txtar", "-- out/bind --\nx\n")
    suite = TxtarSuite(
        root=tmp_path / "testdata",
        name="bind",
        todo={"b": "later"},
        update=False,
    )
    ran = []

    def body(case):
        ran.append(case.test_name)
        case.write("x\n")

    results = suite.run(body)
    assert results["a"] == "case is tagged #skip"
    assert results["b"] == "later"
    assert results["c"] is None
    assert ran == ["c"]


def test_slow_skipped_only_when_short(tmp_path):
    _make_case(tmp_path, "a.txtar", "#slow\n-- out/bind --\nx\n")
    suite = TxtarSuite(root=tmp_path / "testdata", name="bind", short=True, update=False)
    assert suite.run(lambda case: case.write("x\n")) == {
        "a": "case is tagged #slow, skipping for -short"
    }
    suite.short = False
    assert suite.run(lambda case: case.write("x\n")) == {"a": None}


def test_missing_root_raises(tmp_path):
    suite = TxtarSuite(root=tmp_path / "testdata" / "nope", name="bind")
    with pytest.raises(FileNotFoundError):
        suite.run(lambda case: None)


def test_case_tags_values_and_gold():
    archive = parse(b"#lineagePath: lin\n#flag: true\n#noformat\n-- out/bind/x --\n1\n")
    case = SuiteCase(archive, "t", name="bind")
    assert case.value("lineagePath") == "lin"
    assert case.bool_value("flag") is True
    assert case.has_tag("noformat") is True
    assert case.has_tag("skip") is False
    assert case.has_gold is True
    assert SuiteCase(archive, "t", name="bin").has_gold is False


def test_case_writers_and_write_file():
    case = SuiteCase(Archive(), "t", name="bind")
    case.write_file("dir/data.json", {"a": 1})
    case.writer("err").write("boom")
    case.writer("err").write("!")
    outputs = case.outputs()
    assert outputs["out/bind"] == b'== data.json\n{\n  "a": 1\n}'
    assert outputs["out/bind/err"] == b"boom!"
    with pytest.raises(TypeError):
        case.write_file("x.cue", {"a": 1})


def test_case_rel(tmp_path):
    case = SuiteCase(Archive(), "t", name="bind", directory=tmp_path)
    assert case.rel(tmp_path / "sub" / "f.cue") == "sub/f.cue"


def test_vanilla_overlay_auto_args():
    archive = Archive(files=[File("a.cue", b"x"), File("sub/b.cue", b"y")])
    args, overlay = vanilla_overlay(archive)
    assert args == ["a.cue"]
    assert overlay[os.path.join(PREFIX, "a.cue")] == b"x"
    assert overlay[os.path.join(PREFIX, "sub", "b.cue")] == b"y"


def test_vanilla_overlay_explicit_args_and_thema_files():
    archive = Archive(files=[File("a.cue", b"x")])
    args, overlay = vanilla_overlay(archive, {"lineage.cue": b"z"}, ["./sub"])
    assert args == ["./sub"]
    key = os.path.join(
        PREFIX, "cue.mod", "pkg", "github.com", "grafana", "thema", "lineage.cue"
    )
    assert overlay[key] == b"z"
    assert len(overlay) == 2