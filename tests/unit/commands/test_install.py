"""Tests for install and uninstall."""

import re
from pathlib import Path

from parbuild.commands import InstallCommand, UninstallCommand
from parbuild.config import ProjectType
from parbuild.paths import header_dist_path, install_target_path, target_path


def _text(console) -> str:
    return re.sub(r"(?m)^\d\d:\d\d\.\d\d ", "", console.file.getvalue())


def _populate_dist(config) -> None:
    target = target_path(config)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text("binary")
    for header in config.header_files:
        path = header_dist_path(header, config)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {header}")


class TestInstall:
    """Copying the dist tree to the prefix."""

    def test_install_and_uninstall(self, project, console):
        config = project.with_overrides(header_files=("hello.h",))
        _populate_dist(config)
        prefix = Path(config.install_prefix)

        assert InstallCommand().run([], [], config) == 0
        assert (prefix / "bin" / "hello").read_text() == "binary"
        assert (prefix / "include" / "hello.h").read_text() == "// hello.h"
        text = _text(console)
        assert "= = = [INSTALL]" in text
        assert "[FAILED]" not in text
        assert "[I] Installation complete." in text

        assert UninstallCommand().run([], [], config) == 0
        assert not (prefix / "bin" / "hello").exists()
        assert not (prefix / "include" / "hello.h").exists()
        text = _text(console)
        assert "= = = [UNINSTALL]" in text
        assert "[I] Uninstalled." in text

    def test_library_goes_to_lib(self, project, console):
        config = project.with_overrides(project_type=ProjectType.STATIC_LIBRARY, output="libhello.a")
        _populate_dist(config)
        InstallCommand().run([], [], config)
        assert install_target_path(config) == Path(config.install_prefix) / "lib" / "libhello.a"
        assert install_target_path(config).exists()

    def test_failed_copy_continues(self, project, console):
        """A missing target is reported and headers are still installed."""
        config = project.with_overrides(header_files=("hello.h",))
        header = header_dist_path("hello.h", config)
        header.parent.mkdir(parents=True, exist_ok=True)
        header.write_text("// hello.h")

        assert InstallCommand().run([], [], config) == 0
        lines = _text(console).splitlines()
        assert lines[1].endswith("[FAILED]")
        assert lines[2].endswith("(1/1)... [OK]")
        assert (Path(config.install_prefix) / "include" / "hello.h").exists()

    def test_uninstall_missing_files(self, project, console):
        config = project.with_overrides(header_files=("hello.h",))
        assert UninstallCommand().run([], [], config) == 0
        assert _text(console).count("[FAILED]") == 2
