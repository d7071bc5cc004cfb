"""CLI integration tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from linegrep.cli import EXIT_ERROR, EXIT_MATCHED, EXIT_NO_MATCH, _parse_args, main


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from an empty directory so no config file is picked up."""
    monkeypatch.chdir(tmp_path)


def _make_tree(root: Path) -> None:
    (root / "a.txt").write_text("alpha\nbeta\n")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("Alpha\ngamma\nalphabet\n")
    (sub / "c.log").write_text("alpha log\n")


def test_single_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "sample.txt"
    f.write_bytes(b"Lorem\nIpsum\r\nDOLOR")
    assert main(["or", str(f)]) == EXIT_MATCHED
    assert capsys.readouterr().out == "Lorem\n"


def test_insensitive_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "sample.txt"
    f.write_text("Lorem\nIpsum\nDOLOR")
    assert main(["-i", "or", str(f)]) == EXIT_MATCHED
    assert capsys.readouterr().out == "Lorem\nDOLOR"


def test_no_match_exit_status(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "sample.txt"
    f.write_text("nothing here\n")
    assert main(["zzz", str(f)]) == EXIT_NO_MATCH
    assert capsys.readouterr().out == ""


def test_invert_and_count(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = tmp_path / "sample.txt"
    f.write_text("one\ntwo\nthree\n")
    assert main(["-vc", "^t", str(f)]) == EXIT_MATCHED
    assert capsys.readouterr().out == "1\n"


def test_multiple_files_prefixed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    assert main(["alpha", "a.txt", "sub/b.txt"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "a.txt:alpha\nsub/b.txt:alphabet\n"


def test_directory_without_recursive(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    assert main(["alpha", "sub"]) == EXIT_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "linegrep: sub is a directory\n"


def test_recursive_count(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    assert main(["-rc", "alpha", "."]) == EXIT_MATCHED
    lines = sorted(capsys.readouterr().out.splitlines())
    assert lines == ["./a.txt:1", "./sub/b.txt:1", "./sub/c.log:1"]


def test_recursive_exclude(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    assert main(["-r", "--exclude", "*.log", "alpha", "sub"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "alphabet\n"


def test_recursive_respect_gitignore(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    (tmp_path / "sub" / ".gitignore").write_text("*.log\n")
    assert main(["-r", "--respect-gitignore", "alpha log", "sub"]) == EXIT_NO_MATCH
    assert capsys.readouterr().out == ""


def test_missing_file_reported_and_others_processed(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _make_tree(tmp_path)
    assert main(["beta", "missing.txt", "a.txt"]) == EXIT_ERROR
    captured = capsys.readouterr()
    # Only one path resolved to a target, so output is unprefixed.
    assert captured.out == "beta\n"
    assert captured.err == "linegrep: missing.txt: No such file or directory\n"


def test_invalid_pattern_fails_before_any_io(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(*_args: object, **_kwargs: object) -> None:
        raise AssertionError("paths must not be resolved for an invalid pattern")

    monkeypatch.setattr("linegrep.cli.resolve", _fail)
    assert main(["(unbalanced", "missing.txt"]) == EXIT_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith('linegrep: Invalid pattern "(unbalanced"')
    assert "missing.txt" not in captured.err


def test_defaults_to_stdin(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"foo\nbar\nfood\n")))
    assert main(["foo"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "foo\nfood\n"


def test_explicit_stdin_with_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    _make_tree(tmp_path)
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"beta from stdin\n")))
    assert main(["beta", "-", "a.txt"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "(standard input):beta from stdin\na.txt:beta\n"


def test_config_file_sets_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".linegrep.toml").write_text("[search]\ninsensitive = true\n")
    assert main(["^alpha$", "sub/b.txt"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "Alpha\n"


def test_no_config_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".linegrep.toml").write_text("[search]\ninsensitive = true\n")
    assert main(["--no-config", "^alpha$", "sub/b.txt"]) == EXIT_NO_MATCH
    assert capsys.readouterr().out == ""


def test_config_recursive_from_pyproject(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "pyproject.toml").write_text(
        '[tool.linegrep]\nrecursive = true\nexclude = ["*.txt"]\n'
    )
    assert main(["alpha", "sub"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "alpha log\n"


def test_explicit_exclude_overrides_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _make_tree(tmp_path)
    (tmp_path / "linegrep.toml").write_text(
        '[file-discovery]\nrecursive = true\nexclude = ["*.txt"]\n'
    )
    assert main(["--exclude", "*.log", "alpha", "sub"]) == EXIT_MATCHED
    assert capsys.readouterr().out == "alphabet\n"


def test_explicit_flag_detection() -> None:
    options, explicit_flags = _parse_args(["-ri", "--exclude", "x/", "pat", "a", "b"])
    assert options.pattern == "pat"
    assert options.files == ["a", "b"]
    assert explicit_flags == {"recursive", "insensitive", "exclude"}


def test_default_files_is_stdin() -> None:
    options, explicit_flags = _parse_args(["pat"])
    assert options.files == ["-"]
    assert explicit_flags == set()


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("linegrep v")


def test_bad_config_value_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_tree(tmp_path)
    (tmp_path / "linegrep.toml").write_text('exclude = "*.log"\n')
    assert main(["alpha", "a.txt"]) == EXIT_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("linegrep: ")
    assert "`exclude` must be a list of strings" in captured.err
