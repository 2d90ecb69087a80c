"""Exceptions raised while scaffolding.

Everything the CLI reports to the user derives from ScaffoldError.
External command failures are not exceptions; see runner.StageResult.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for errors reported to the user."""


class SpecFileError(ScaffoldError):
    """The -f argument is missing, unreadable, or not an OpenAPI file."""


class VersionNotFoundError(ScaffoldError):
    """The spec file carries no usable version field."""


class VersionExistsError(ScaffoldError):
    """The versioned output directory is already present."""


class ConfigError(ScaffoldError):
    """An environment setting could not be parsed."""
