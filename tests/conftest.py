"""Shared fixtures for oas_scaffold tests.

Every test runs in its own temporary working directory, and external npm
commands are replaced by a recording fake runner.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import pytest

from oas_scaffold.runner import StageResult


PETSTORE_YAML = """\
openapi: 3.0.0
info:
  title: Petstore
  version: '2.0.0'
paths:
  /pets:
    get:
      summary: List pets
      responses:
        '200':
          description: OK
"""


# ---------------------------------------------------------------------------
# Working directory
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch) -> Path:
    """Run each test from a fresh directory so api-spec/ lands in tmp_path."""
    monkeypatch.chdir(tmp_path)
    for name in ("OUTPUT_ROOT", "NPM", "STUB_PORT", "STAGE_TIMEOUT"):
        monkeypatch.delenv(f"OAS_SCAFFOLD_{name}", raising=False)
    return tmp_path


@pytest.fixture
def spec_yaml(workdir) -> Path:
    path = workdir / "spec.yaml"
    path.write_text(PETSTORE_YAML)
    return path


@pytest.fixture
def write_spec(workdir):
    """Write a spec file with the given name and text, return its path."""
    def _write(name: str, text: str) -> Path:
        path = workdir / name
        path.write_text(text)
        return path
    return _write


# ---------------------------------------------------------------------------
# Fake runner
# ---------------------------------------------------------------------------

class FakeRunner:
    """Records stage calls; `npm init -y` writes a minimal package.json.

    Stages listed in fail_on return exit code 1. With writes_generator_config,
    generate:swagger leaves openapitools.json in the --prefix directory, as
    openapi-generator-cli does when npm runs it there.
    """

    def __init__(self, fail_on: Sequence[str] = (), writes_generator_config: bool = False):
        self.fail_on = set(fail_on)
        self.writes_generator_config = writes_generator_config
        self.calls: list[tuple[str, tuple[str, ...], Path]] = []

    def __call__(self, name, argv, *, cwd, timeout=None) -> StageResult:
        argv = tuple(argv)
        self.calls.append((name, argv, Path(cwd)))
        if name in self.fail_on:
            return StageResult(name, argv, 1, stdout="", stderr=f"{name} exploded")
        if name == "generate:swagger" and self.writes_generator_config:
            prefix = Path(argv[argv.index("--prefix") + 1])
            (prefix / "openapitools.json").write_text('{"generator-cli": {"version": "5.1.0"}}')
        if name == "init":
            manifest = {
                "name": Path(cwd).name,
                "version": "1.0.0",
                "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
            }
            (Path(cwd) / "package.json").write_text(json.dumps(manifest))
        return StageResult(name, argv, 0, stdout=f"{name} ok")

    @property
    def names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner():
    """Factory for fake runners that fail on the named stages."""
    return FakeRunner
