import pytest

from lineagekit.txtar import (
    Archive,
    File,
    clean_outputs,
    dedupe,
    format_archive,
    parse,
    parse_file,
)


SAMPLE = (
    b"#lineagePath: lin\n"
    b"#skip\n"
    b"#slow: true\n"
    b"-- in.cue --\n"
    b"name: \"x\"\n"
    b"-- out/bind --\n"
    b"Schema count: 1\n"
)


def test_format_fixed_bytes():
    archive = Archive(comment=b"note", files=[File("a.txt", b"hello")])
    assert format_archive(archive) == b"note\n-- a.txt --\nhello\n"


def test_parse_sample_structure():
    archive = parse(SAMPLE)
    assert archive.comment == b"#lineagePath: lin\n#skip\n#slow: true\n"
    assert [f.name for f in archive.files] == ["in.cue", "out/bind"]
    assert archive.files[0].data == b"name: \"x\"\n"
    assert archive.files[1].data == b"Schema count: 1\n"


def test_round_trip():
    assert format_archive(parse(SAMPLE)) == SAMPLE


def test_parse_accepts_str():
    assert parse(SAMPLE.decode()) == parse(SAMPLE)


def test_parse_adds_missing_final_newline():
    archive = parse(b"-- a --\nhello")
    assert archive.comment == b""
    assert archive.files == [File("a", b"hello\n")]


def test_incomplete_marker_is_file_content():
    archive = parse(b"-- a --\n-- not a marker\nline\n")
    assert len(archive.files) == 1
    assert archive.files[0].data == b"-- not a marker\nline\n"


def test_comment_only():
    archive = parse(b"just text")
    assert archive.files == []
    assert archive.comment == b"just text\n"


def test_has_tag():
    archive = parse(SAMPLE)
    assert archive.has_tag("skip")
    assert not archive.has_tag("noformat")
    assert not archive.has_tag("slow")


def test_value_and_bool_value():
    archive = parse(SAMPLE)
    assert archive.value("lineagePath") == "lin"
    assert archive.value("missing") is None
    assert archive.bool_value("slow")
    assert not archive.bool_value("lineagePath")
    assert not archive.bool_value("missing")


def test_without_outputs_keeps_inputs():
    archive = parse(SAMPLE)
    cleaned = archive.without_outputs()
    assert [f.name for f in cleaned.files] == ["in.cue"]
    assert cleaned.comment == archive.comment
    assert len(archive.files) == 2


def test_dedupe_keeps_last_occurrence():
    archive = Archive(
        files=[File("a", b"1"), File("b", b"2"), File("a", b"3")]
    )
    dedupe(archive)
    names = [f.name for f in archive.files]
    assert sorted(names) == ["a", "b"]
    assert {f.name: f.data for f in archive.files}["a"] == b"3"


def test_parse_file(tmp_path):
    path = tmp_path / "case.txtar"
    path.write_bytes(SAMPLE)
    assert parse_file(path) == parse(SAMPLE)


def test_clean_outputs_rewrites_archives(tmp_path):
    sub = tmp_path / "nested"
    sub.mkdir()
    first = tmp_path / "one.txtar"
    second = sub / "two.txtar"
    other = tmp_path / "notes.txt"
    first.write_bytes(SAMPLE)
    second.write_bytes(SAMPLE)
    other.write_bytes(SAMPLE)

    rewritten = clean_outputs(tmp_path)

    assert sorted(rewritten) == sorted([first, second])
    for path in (first, second):
        assert [f.name for f in parse_file(path).files] == ["in.cue"]
    assert other.read_bytes() == SAMPLE


def test_clean_outputs_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        clean_outputs(tmp_path / "absent")