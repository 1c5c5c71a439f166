"""
External Process Runner

Runs external programs either synchronously or as futures on a thread pool.
The post-build pipeline decides which futures it waits for; everything it
spawns without waiting keeps running on the pool.
"""

import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence


@dataclass
class ProcessResult:
    """
    Outcome of one external process.

    Attributes:
        args: Command line that was run
        returncode: Exit status
        stdout: Captured standard output
        stderr: Captured standard error
    """

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.args)


class ProcessRunner:
    """
    Thread-pool backed process runner.

    ``run`` blocks until the process exits. ``spawn`` and ``submit`` return a
    Future immediately. ``launch`` starts a process without waiting for it to
    exit, for programs such as PDF viewers that stay open.

    Failures to start a program (missing executable, bad cwd) raise OSError
    from ``run`` and surface as the exception of the Future otherwise.
    """

    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="gnuplatex"
        )

    def run(self, args: Sequence[str], cwd: Path) -> ProcessResult:
        """Run a process to completion and capture its output."""
        args = [str(arg) for arg in args]
        result = subprocess.run(
            args,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Tool output is not always valid UTF-8
        )
        return ProcessResult(
            args=args,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    def spawn(self, args: Sequence[str], cwd: Path) -> "Future[ProcessResult]":
        """Run a process on the pool."""
        return self._executor.submit(self.run, args, cwd)

    def launch(self, args: Sequence[str], cwd: Path) -> "Future[subprocess.Popen]":
        """Start a detached process on the pool; the Future resolves once it has started."""
        args = [str(arg) for arg in args]
        return self._executor.submit(
            subprocess.Popen,
            args,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """Schedule any callable on the pool."""
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ProcessRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
