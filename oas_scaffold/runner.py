"""Run external commands as pipeline stages.

Each command is awaited to completion and its outcome returned as a
StageResult; nothing here raises on a non-zero exit, a missing executable,
or a timeout. The pipeline decides what a failed stage means.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

# Exit code shells use for "command not found"
NOT_FOUND_EXIT = 127
TIMEOUT_EXIT = -1


@dataclass(frozen=True)
class StageResult:
    name: str
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.argv)

    def output_tail(self, lines: int = 20) -> str:
        """Last lines of combined output, for failure reports."""
        combined = "\n".join(x.rstrip() for x in (self.stdout, self.stderr) if x and x.strip())
        return "\n".join(combined.splitlines()[-lines:])


class Runner(Protocol):
    def __call__(
        self,
        name: str,
        argv: Sequence[str],
        *,
        cwd: Path,
        timeout: float | None = None,
    ) -> StageResult: ...


def resolve_argv(argv: Sequence[str]) -> list[str]:
    """Resolve argv[0] via PATH.

    On Windows npm is a .cmd shim, which subprocess cannot execute directly,
    so it is run through cmd.exe /c.
    """
    argv = list(argv)
    cmd = argv[0]
    if any(sep and sep in cmd for sep in (os.path.sep, os.path.altsep)):
        return argv

    resolved = shutil.which(cmd)
    if resolved is None:
        return argv

    if os.name == "nt" and Path(resolved).suffix.lower() in {".cmd", ".bat"}:
        comspec = os.environ.get("ComSpec", "cmd.exe")
        return [comspec, "/d", "/c", resolved, *argv[1:]]
    return [resolved, *argv[1:]]


def run_stage(
    name: str,
    argv: Sequence[str],
    *,
    cwd: Path,
    timeout: float | None = None,
) -> StageResult:
    """Run one command to completion and capture its output."""
    argv = tuple(argv)
    try:
        cp = subprocess.run(
            resolve_argv(argv),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return StageResult(name, argv, TIMEOUT_EXIT, stderr=f"timed out after {timeout:.1f}s")
    except FileNotFoundError:
        return StageResult(name, argv, NOT_FOUND_EXIT, stderr=f"Command not found: {argv[0]!r}")
    except OSError as exc:
        return StageResult(name, argv, NOT_FOUND_EXIT, stderr=f"Failed to execute {argv[0]!r}: {exc}")

    return StageResult(name, argv, cp.returncode, cp.stdout or "", cp.stderr or "")


def init_command(npm: str) -> list[str]:
    return [npm, "init", "-y"]


def install_command(npm: str, package_dir: Path, packages: Sequence[str]) -> list[str]:
    return [npm, "--prefix", str(package_dir), "i", *packages]


def npm_run_command(npm: str, package_dir: Path, script: str) -> list[str]:
    return [npm, "--prefix", str(package_dir), "run", script]
