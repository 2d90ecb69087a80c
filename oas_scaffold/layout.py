"""Versioned directory layout.

The version directory is assembled under a hidden staging directory in the
output root and moved into place with a single rename, so an interrupted
scaffold never leaves a half-built <root>/<version> behind.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .errors import VersionExistsError

OPEN_API_DIR = "open-api"
STUB_DIR = "swagger-stub"
HTML_DOCS_DIR = "html-docs"

SUBDIRS: tuple[str, ...] = (OPEN_API_DIR, STUB_DIR, HTML_DOCS_DIR)

MANIFEST_NAME = "package.json"
README_NAME = "README.md"
GENERATOR_CONFIG_NAME = "openapitools.json"


@dataclass(frozen=True)
class VersionLayout:
    """Paths of one versioned tree: <root>/<token>/..."""

    root: Path
    token: str

    @property
    def version_dir(self) -> Path:
        return self.root / self.token

    @property
    def manifest_path(self) -> Path:
        return self.version_dir / MANIFEST_NAME

    @property
    def generator_config_path(self) -> Path:
        return self.root / GENERATOR_CONFIG_NAME


def ensure_absent(layout: VersionLayout) -> None:
    """Refuse to scaffold over an existing version directory."""
    if os.path.lexists(layout.version_dir):
        raise VersionExistsError(
            f"Version {layout.token} already exists. "
            "Please update your OpenAPI file's version number and try again."
        )


def make_directories(base: Path) -> list[Path]:
    """Create the generator output directories under base."""
    created = []
    for name in SUBDIRS:
        path = base / name
        path.mkdir(parents=True, exist_ok=False)
        created.append(path)
    return created


def copy_spec(spec_path: Path, base: Path, filename: str) -> Path:
    """Copy the spec byte-for-byte into base/open-api/ under its versioned name."""
    target = base / OPEN_API_DIR / filename
    shutil.copyfile(spec_path, target)
    return target


@contextmanager
def staged(layout: VersionLayout) -> Iterator[Path]:
    """Yield a staging copy of the version directory, committed on clean exit.

    The staging directory is removed on any exception. The commit re-checks
    that the target is absent, then renames the staged tree into place.
    """
    layout.root.mkdir(parents=True, exist_ok=True)
    staging_root = Path(tempfile.mkdtemp(prefix=f".{layout.token}-", dir=layout.root))
    stage_dir = staging_root / layout.token
    stage_dir.mkdir()
    try:
        yield stage_dir
        ensure_absent(layout)
        os.rename(stage_dir, layout.version_dir)
    finally:
        shutil.rmtree(staging_root, ignore_errors=True)


def move_generator_config(candidates: list[Path], target: Path) -> Path | None:
    """Move the first existing openapitools.json candidate to target."""
    for candidate in candidates:
        if candidate.is_file() and candidate.resolve() != target.resolve():
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(candidate, target)
            return target
    return None
