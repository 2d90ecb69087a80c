"""Runtime settings.

Read from OAS_SCAFFOLD_* environment variables; CLI options override them.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from .errors import ConfigError

ENV_PREFIX = "OAS_SCAFFOLD_"

DEFAULT_OUTPUT_ROOT = Path("api-spec")
DEFAULT_STUB_PORT = 9999


@dataclass(frozen=True)
class Settings:
    output_root: Path = DEFAULT_OUTPUT_ROOT
    npm: str = "npm"
    stub_port: int = DEFAULT_STUB_PORT
    stage_timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment, falling back to defaults."""
        env = os.environ if environ is None else environ

        def get(name: str) -> str:
            return (env.get(ENV_PREFIX + name) or "").strip()

        kwargs: dict = {}
        if get("OUTPUT_ROOT"):
            kwargs["output_root"] = Path(get("OUTPUT_ROOT"))
        if get("NPM"):
            kwargs["npm"] = get("NPM")
        if get("STUB_PORT"):
            kwargs["stub_port"] = _parse_port(get("STUB_PORT"))
        if get("STAGE_TIMEOUT"):
            kwargs["stage_timeout"] = _parse_timeout(get("STAGE_TIMEOUT"))
        return cls(**kwargs)

    def with_overrides(self, **changes) -> Settings:
        """Return a copy with the non-None values in changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}STUB_PORT must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"{ENV_PREFIX}STUB_PORT out of range: {port}")
    return port


def _parse_timeout(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}STAGE_TIMEOUT must be a number, got {value!r}") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"{ENV_PREFIX}STAGE_TIMEOUT must be a positive finite number, got {value!r}")
    return seconds
