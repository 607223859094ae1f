# tests/test_cli.py
import io
import logging
import os
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from treecontext import cli
from treecontext.config import Settings


def _make_file(p: Path, content: str = "x"):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("treecontext")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    cli._handler = None


def test_text_output_to_stdout_and_diagnostics_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_file(tmp_path / "a.txt", "AA")

    code = cli.main(["-d", str(tmp_path)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.startswith("--- Directory Tree ---\n")
    assert "File: a.txt" in captured.out
    assert "Processing directory" not in captured.out
    assert f"INFO: Processing directory: {tmp_path.resolve()}" in captured.err
    assert "INFO: Respecting .gitignore files." in captured.err


def test_xml_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_file(tmp_path / "dirA/f1.txt", "one")

    code = cli.main(["--directory", str(tmp_path), "--format", "xml"])

    captured = capsys.readouterr()
    assert code == 0
    doc = ET.fromstring(captured.out)
    assert doc.get("rootPath") == str(tmp_path.resolve())
    assert doc.find("fileContents/file").get("path") == "dirA/f1.txt"


def test_nonexistent_directory_exits_1_without_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    missing = tmp_path / "missing"

    code = cli.main(["-d", str(missing)])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "ERROR: Could not access directory" in captured.err


def test_file_as_directory_exits_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "file.txt"
    _make_file(f)

    code = cli.main(["-d", str(f)])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "is not a valid directory" in captured.err


def test_exclude_and_gitignore_flags(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_file(tmp_path / ".gitignore", "*.log\n")
    _make_file(tmp_path / "app.log", "log")
    _make_file(tmp_path / "keep.py", "py")
    _make_file(tmp_path / "drop.tmp", "tmp")

    cli.main(["-d", str(tmp_path), "-x", "*.tmp"])
    default = capsys.readouterr()
    assert "File: keep.py" in default.out
    assert "app.log" not in default.out
    assert "drop.tmp" not in default.out
    assert "Applying exclude patterns: ['*.tmp']" in default.err

    cli.main(["-d", str(tmp_path), "-x", "*.tmp", "--respect-gitignore", "false"])
    no_gitignore = capsys.readouterr()
    assert "File: app.log" in no_gitignore.out
    assert "drop.tmp" not in no_gitignore.out
    assert "Respecting .gitignore files." not in no_gitignore.err


def test_max_depth_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    _make_file(tmp_path / "a/b/c.txt")

    cli.main(["-d", str(tmp_path), "-m", "1"])

    out = capsys.readouterr().out
    assert "  a/" in out.splitlines()
    assert "b/" not in out
    assert "c.txt" not in out


def test_quiet_hides_info(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    (tmp_path / "blob.bin").write_bytes(b"\x00\x01")

    cli.main(["-d", str(tmp_path), "-q"])

    err = capsys.readouterr().err
    assert "Processing directory" not in err
    assert "Skipping binary" not in err


def test_repeated_runs_are_identical(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    for rel in ["x/1.txt", "y/2.txt", "3.txt"]:
        _make_file(tmp_path / rel, rel)

    cli.main(["-d", str(tmp_path)])
    first = capsys.readouterr().out
    cli.main(["-d", str(tmp_path)])
    second = capsys.readouterr().out

    assert first == second


def test_settings_defaults():
    settings = Settings.from_args([])

    assert settings == Settings()
    assert settings.directory == "."
    assert settings.output_format == "text"
    assert settings.max_depth == 0
    assert settings.exclude == ()
    assert settings.respect_gitignore is True
    assert settings.log_level == logging.INFO


def test_exclude_accepts_many_and_repeats():
    settings = Settings.from_args(["-x", "a", "b", "--exclude", "c"])

    assert settings.exclude == ("a", "b", "c")


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["--respect-gitignore"], True),
        (["--respect-gitignore", "true"], True),
        (["--respect-gitignore", "no"], False),
        (["--respect-gitignore", "0"], False),
    ],
)
def test_respect_gitignore_values(argv, expected):
    assert Settings.from_args(argv).respect_gitignore is expected


@pytest.mark.parametrize(
    "argv",
    [
        ["-m", "-1"],
        ["-m", "two"],
        ["-f", "json"],
        ["--respect-gitignore", "maybe"],
        ["-q", "-v"],
    ],
)
def test_usage_errors_exit_2(argv, capsys: pytest.CaptureFixture[str]):
    with pytest.raises(SystemExit) as excinfo:
        Settings.from_args(argv)
    assert excinfo.value.code == 2


def test_run_writes_to_given_stream(tmp_path: Path):
    _make_file(tmp_path / "a.txt", "A")
    buf = io.StringIO()

    code = cli.run(Settings(directory=str(tmp_path), output_format="xml"), out=buf)

    assert code == 0
    assert buf.getvalue().startswith("<projectContext ")


def test_xml_output_with_control_characters_is_well_formed(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    (tmp_path / "log.txt").write_bytes(b"colored \x1b[31mred\x1b[0m\n\x07bell\x0cform\tok\n")

    code = cli.main(["-d", str(tmp_path), "-f", "xml"])

    assert code == 0
    doc = ET.fromstring(capsys.readouterr().out)
    assert doc.find("fileContents/file").text == "colored [31mred[0m\nbellform\tok\n"


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Needs a filesystem that accepts arbitrary name bytes")
def test_undecodable_file_name_is_written_lossily(tmp_path: Path):
    (tmp_path / os.fsdecode(b"bad\xff.txt")).write_text("body", encoding="utf-8")

    for output_format in ("text", "xml"):
        buf = io.StringIO()
        code = cli.run(Settings(directory=str(tmp_path), output_format=output_format), out=buf)

        assert code == 0
        # Must survive a strict encoder
        encoded = buf.getvalue().encode("utf-8")
        assert "bad\ufffd.txt".encode("utf-8") in encoded
