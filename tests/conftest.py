"""Pytest configuration and fixtures for parbuild tests.

Provides:
- console: captures parbuild.output in a StringIO-backed Rich console
- project: a BuildConfiguration rooted in tmp_path with a few source files
- toolchain: a fake compiler/linker invoker that records every command

Stdio and logging restoration mirror the guards needed on Python 3.13, where
tests that close captured streams otherwise break teardown.
"""

import logging
import sys
import threading
from io import StringIO
from pathlib import Path
from typing import Sequence

import pytest
from rich.console import Console

from parbuild import output
from parbuild.config import BuildConfiguration


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.fixture(autouse=True)
def _restore_logging():  # noqa: PT004
    """Drop root logger handlers installed by the CLI during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def console():
    """Route parbuild output into a buffer; read it with console.file.getvalue()."""
    buffer = Console(file=StringIO(), width=200, soft_wrap=True, highlight=False)
    output.set_console(buffer)
    output.set_verbose(True)
    yield buffer
    output.set_console(None)
    output.set_verbose(True)


@pytest.fixture
def project(tmp_path: Path) -> BuildConfiguration:
    """A configuration whose directories all live under tmp_path."""
    src = tmp_path / "src"
    (src / "util").mkdir(parents=True)
    for name in ("main.c", "a.c", "b.c", "util/strings.c"):
        (src / name).write_text(f"/* {name} */\n")
    (src / "hello.h").write_text("#pragma once\n")

    return BuildConfiguration(
        source_dir=str(src),
        build_dir=str(tmp_path / "build"),
        dist_dir=str(tmp_path / "dist"),
        install_prefix=str(tmp_path / "prefix"),
        compiler="cc -c",
        linker="ld",
        output="hello",
    )


class FakeToolchain:
    """Invoker standing in for cc, ld and ar.

    Every command is recorded. A command succeeds by writing the file named
    after "-o"; commands whose last argument ends with one of fail_on return
    fail_status instead. Link and archive commands return link_status.
    """

    def __init__(self, fail_on: Sequence[str] = (), fail_status: int = 1, link_status: int = 0):
        self.fail_on = tuple(fail_on)
        self.fail_status = fail_status
        self.link_status = link_status
        self.calls: list[list[str]] = []
        self.threads: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, argv: Sequence[str]) -> int:
        argv = [str(arg) for arg in argv]
        with self._lock:
            self.calls.append(argv)
            self.threads.append(threading.current_thread().name)

        is_compile = argv[0] == "cc"
        if is_compile and self.fail_on and argv[-1].endswith(self.fail_on):
            return self.fail_status
        if not is_compile and self.link_status != 0:
            return self.link_status

        out = Path(argv[argv.index("-o") + 1])
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(" ".join(argv))
        return 0

    @property
    def compiled(self) -> list[str]:
        """Source paths passed to the compiler, in call order."""
        return [call[-1] for call in self.calls if call[0] == "cc"]

    @property
    def link_calls(self) -> list[list[str]]:
        """Linker and archiver invocations."""
        return [call for call in self.calls if call[0] != "cc"]


@pytest.fixture
def toolchain() -> FakeToolchain:
    """A fake toolchain where everything succeeds."""
    return FakeToolchain()


@pytest.fixture
def make_toolchain():
    """Factory for fake toolchains with failures, e.g. make_toolchain(fail_on=["b.c"])."""
    return FakeToolchain
