"""Shared fixtures: a recording process runner and a simulated toolchain."""

from concurrent.futures import Future
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from gnuplatex.config import GnuplatexConfig
from gnuplatex.utils.process_runner import ProcessResult

Responder = Callable[[List[str], Path], ProcessResult]


def _ok(args: List[str], cwd: Path) -> ProcessResult:
    return ProcessResult(args=args, returncode=0)


class FakeRunner:
    """
    Drop-in for ProcessRunner that records every call and resolves futures
    immediately with whatever the responder returns (or raises).
    """

    def __init__(self, responder: Optional[Responder] = None):
        self.responder = responder or _ok
        self.calls = []

    def _record(self, method: str, args, cwd) -> List[str]:
        args = [str(arg) for arg in args]
        self.calls.append((method, args, Path(cwd)))
        return args

    def _resolved(self, fn, *args, **kwargs) -> Future:
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def run(self, args, cwd) -> ProcessResult:
        args = self._record("run", args, cwd)
        return self.responder(args, Path(cwd))

    def spawn(self, args, cwd) -> Future:
        args = self._record("spawn", args, cwd)
        return self._resolved(self.responder, args, Path(cwd))

    def launch(self, args, cwd) -> Future:
        args = self._record("launch", args, cwd)
        return self._resolved(self.responder, args, Path(cwd))

    def submit(self, fn, *args, **kwargs) -> Future:
        return self._resolved(fn, *args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    def commands(self, method: str) -> List[List[str]]:
        return [args for called, args, _ in self.calls if called == method]


class SimulatedToolchain:
    """
    Responder that fakes pdflatex and convert by writing their output files.

    Attributes:
        failing_pages: Page indices for which the rasterizer fails
        compiler_returncode: Exit status reported by the compiler
    """

    def __init__(self, failing_pages=(), compiler_returncode: int = 0):
        self.failing_pages = set(failing_pages)
        self.compiler_returncode = compiler_returncode

    def __call__(self, args: List[str], cwd: Path) -> ProcessResult:
        program = args[0]
        if program == "pdflatex":
            stem = Path(args[-1]).stem
            (cwd / f"{stem}.aux").write_text("\\relax\n")
            if self.compiler_returncode == 0:
                (cwd / f"{stem}.log").write_text("This is pdfTeX\nOutput written.\n")
                (cwd / f"{stem}.pdf").write_bytes(b"%PDF-1.4 simulated\n")
            else:
                (cwd / f"{stem}.log").write_text(
                    f"./{stem}.tex:21: LaTeX Error: File `missing.tex' not found.\n"
                )
            return ProcessResult(args=args, returncode=self.compiler_returncode)

        if program == "convert":
            page = int(args[3].rsplit("[", 1)[1].rstrip("]"))
            if page in self.failing_pages:
                return ProcessResult(args=args, returncode=1, stderr="convert: no images defined")
            (cwd / args[-1]).write_bytes(b"\x89PNG simulated")
            return ProcessResult(args=args, returncode=0)

        return ProcessResult(args=args, returncode=0)


@pytest.fixture
def config() -> GnuplatexConfig:
    return GnuplatexConfig()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def toolchain_runner() -> FakeRunner:
    return FakeRunner(SimulatedToolchain())


@pytest.fixture
def make_runner():
    """Factory for runners with a custom simulated toolchain."""

    def _make(**kwargs) -> FakeRunner:
        return FakeRunner(SimulatedToolchain(**kwargs))

    return _make
