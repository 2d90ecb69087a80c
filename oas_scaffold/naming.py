"""Convert a spec version into a directory-safe token.

Pattern: v{version with dots as dashes}

Examples:
  1.2.3          -> v1-2-3
  '2.0.0'        -> v2-0-0
  1.0.0-beta     -> v1-0-0-beta
  1.10 (unquoted, read as text) -> v1-10
  010            -> v010

The token names the output directory and is appended to the spec file stem:
  petstore.yaml + v1-2-3 -> petstore-v1-2-3.yaml
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .errors import VersionNotFoundError

# Anything that would split the token into more than one path segment
_UNSAFE = re.compile(r"[\\/\s]+")


def version_token(version: Any) -> str:
    """Build a token like 'v1-2-3' from a raw version value."""
    if version is None or isinstance(version, (bool, dict, list)):
        raise VersionNotFoundError("No version number found. Aborting!")

    text = str(version).replace("'", "").replace('"', "").strip()
    if not text:
        raise VersionNotFoundError("No version number found. Aborting!")

    text = text.replace(".", "-")
    text = _UNSAFE.sub("-", text)
    return "v" + text


def versioned_filename(spec_path: Path, token: str) -> str:
    """Embed the token before the extension: 'spec.yaml' -> 'spec-v1-2-3.yaml'."""
    return f"{spec_path.stem}-{token}{spec_path.suffix}"


def versioned_stem(spec_path: Path, token: str) -> str:
    """Like versioned_filename, without the extension."""
    return f"{spec_path.stem}-{token}"
