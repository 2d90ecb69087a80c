"""Validate and load the OpenAPI spec file.

Checks the -f argument, parses YAML or JSON, and extracts the version field.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import SpecFileError

OPENAPI_EXTENSIONS = frozenset({"yaml", "yml", "json"})

_HINT = "Please pass in an OpenAPI file with the '-f' flag."

_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps numbers as the text written in the file.

    Unquoted `version: 1.10` stays "1.10" instead of the float 1.1.
    """


TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def validate_spec_path(value: str | Path | None) -> Path:
    """Check the -f argument names an existing YAML or JSON file."""
    if not value:
        raise SpecFileError(f"No file was passed in. {_HINT}")

    path = Path(value)
    if not path.is_file():
        raise SpecFileError(f"Invalid file was passed in. Could not find {value}. {_HINT}")

    extension = path.suffix
    if extension[1:].lower() not in OPENAPI_EXTENSIONS:
        raise SpecFileError(
            f"Filetype {extension or '(none)'} is not a valid OpenAPI file type. {_HINT}"
        )
    return path


def load_spec(path: Path) -> dict[str, Any]:
    """Load the OpenAPI spec from disk, numbers kept as their source text."""
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                spec = json.load(f, parse_float=str, parse_int=str)
            else:
                spec = yaml.load(f, Loader=TextScalarLoader)
    except (OSError, UnicodeDecodeError) as error:
        raise SpecFileError(f"Could not read {path}: {error}") from error
    except (json.JSONDecodeError, yaml.YAMLError) as error:
        raise SpecFileError(f"Could not parse {path}: {error}") from error

    if not isinstance(spec, dict):
        raise SpecFileError(f"{path} does not contain a mapping at the document root.")
    return spec


def get_version(spec: dict[str, Any]) -> Any:
    """Return info.version, or a root-level version key, or None."""
    info = spec.get("info")
    if isinstance(info, dict) and info.get("version") is not None:
        return info["version"]
    return spec.get("version")


def get_title(spec: dict[str, Any]) -> str | None:
    """Extract info.title from the spec."""
    info = spec.get("info")
    if isinstance(info, dict) and info.get("title"):
        return str(info["title"])
    return None
