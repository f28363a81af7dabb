"""End-to-end tests for the parbuild CLI.

A small Python script stands in for the compiler and linker: it writes the
file named after -o, and exits with status 3 when asked to compile a source
whose name contains "broken".
"""

import re
import shlex
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from parbuild import __version__
from parbuild.cli import main

FAKE_TOOL = """\
import sys
from pathlib import Path

args = sys.argv[1:]
if any("broken" in arg for arg in args):
    sys.exit(3)
out = Path(args[args.index("-o") + 1])
out.parent.mkdir(parents=True, exist_ok=True)
out.write_text(" ".join(args))
"""


def _text(console) -> str:
    return re.sub(r"(?m)^\d\d:\d\d\.\d\d ", "", console.file.getvalue())


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A project directory with parbuild.ini and three sources."""
    src = tmp_path / "src"
    src.mkdir()
    for name in ("main.c", "a.c", "b.c"):
        (src / name).write_text(f"/* {name} */\n")
    (src / "demo.h").write_text("#pragma once\n")

    script = tmp_path / "fake_tool.py"
    script.write_text(FAKE_TOOL)
    tool = f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"

    (tmp_path / "parbuild.ini").write_text(
        f"""\
[project]
name = demo
sources =
    main.c
    a.c
    b.c
headers = demo.h
install_prefix = {tmp_path / "prefix"}

[toolchain]
compiler = {tool}
compiler_arguments = -c -O2  ; passed to every compile
linker = {tool}

[layout]
source_dir = {src}
build_dir = {tmp_path / "build"}
dist_dir = {tmp_path / "dist"}
"""
    )
    return tmp_path


def _config_args(workspace: Path) -> list[str]:
    return ["-C", str(workspace / "parbuild.ini")]


class TestCli:
    """Running parbuild from the command line."""

    def test_build(self, workspace, console):
        """A parallel build produces objects, the target and exported headers."""
        status = main([*_config_args(workspace), "build", "-j", "2"])

        assert status == 0
        assert sorted(p.name for p in (workspace / "build").iterdir()) == ["a.c.o", "b.c.o", "main.c.o"]
        assert (workspace / "dist" / "bin" / "demo").exists()
        assert (workspace / "dist" / "include" / "demo.h").exists()
        text = _text(console)
        assert "[I] Using 2 jobs" in text
        assert "[I] Compiled successfully." in text

    def test_default_command_is_build(self, workspace, console):
        assert main(_config_args(workspace)) == 0
        assert (workspace / "dist" / "bin" / "demo").exists()

    def test_build_then_clean(self, workspace, console):
        assert main([*_config_args(workspace), "-j", "3"]) == 0
        assert main([*_config_args(workspace), "clean"]) == 0
        assert list((workspace / "build").iterdir()) == []
        assert not (workspace / "dist" / "bin" / "demo").exists()

    def test_command_after_jobs_option(self, workspace, console):
        """`-j 2 clean` cleans; the options do not select the default command."""
        assert main([*_config_args(workspace), "build"]) == 0
        console.file.truncate(0)
        console.file.seek(0)

        assert main([*_config_args(workspace), "-j", "2", "clean"]) == 0
        text = _text(console)
        assert "= = = [CLEAN]" in text
        assert "[COMPILING]" not in text
        assert list((workspace / "build").iterdir()) == []

    def test_compile_failure_status(self, workspace, console):
        """The failing compiler's status becomes the exit status."""
        ini = workspace / "parbuild.ini"
        ini.write_text(ini.read_text().replace("    b.c\n", "    broken.c\n"))
        (workspace / "src" / "broken.c").write_text("oops\n")

        assert main([*_config_args(workspace), "build"]) == 3
        assert not (workspace / "dist" / "bin" / "demo").exists()
        assert "[E] Compiler returned non-zero value: 3. Aborting." in _text(console)

    def test_unknown_command(self, workspace, console):
        assert main([*_config_args(workspace), "deploy"]) == 127
        assert "Command not found: `deploy`. Run `parbuild help` to list available commands." in _text(console)

    def test_help(self, workspace, console):
        assert main([*_config_args(workspace), "help"]) == 0
        assert " - build - " in _text(console)

    def test_missing_project_file(self, tmp_path, console):
        assert main(["-C", str(tmp_path / "nope.ini")]) == 2
        assert "Project file not found" in _text(console)

    def test_invalid_project_file(self, tmp_path, console):
        ini = tmp_path / "parbuild.ini"
        ini.write_text("[project]\nname = demo\n")
        assert main(["-C", str(ini)]) == 2
        assert "[E] Configuration error: No sources listed" in _text(console)

    def test_project_file_not_utf8(self, tmp_path, console):
        ini = tmp_path / "parbuild.ini"
        ini.write_bytes(b"[project]\nsources = \xff.c\n")
        assert main(["-C", str(ini)]) == 2
        assert "[E] Configuration error: Failed to parse" in _text(console)

    def test_keyboard_interrupt(self, workspace, console):
        with patch("parbuild.cli.dispatch", side_effect=KeyboardInterrupt):
            assert main(_config_args(workspace)) == 130
        assert "[W] Build interrupted" in _text(console)

    def test_unexpected_error(self, workspace, console):
        with patch("parbuild.cli.dispatch", side_effect=RuntimeError("boom")):
            assert main([*_config_args(workspace), "--verbose"]) == 1
        text = _text(console)
        assert "[E] Unexpected error: RuntimeError: boom" in text
        assert "Traceback" in text

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
