"""Build the npm script map and the README template context.

The scripts are consumed from inside the version directory, so every path
here is relative to it: the spec lives in open-api/, generators write to
swagger-stub/, html-docs/ and markdown-docs/.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

# Pinned generator toolchain installed into every version directory
PINNED_PACKAGES: tuple[str, ...] = (
    "@openapitools/openapi-generator-cli@2.2.8",
    "@stoplight/prism-cli@4.2.3",
    "concurrently@6.1.0",
    "rimraf@3.0.2",
    "make-dir-cli@3.0.0",
    "wait-on@5.3.0",
    "replace-in-files-cli@1.0.0",
    "tidy-markdown@2.0.3",
    "widdershins@4.0.1",
)

# Scripts run by the pipeline after installation, in order
GENERATE_SCRIPTS: tuple[str, ...] = (
    "generate:swagger",
    "generate:docs",
    "generate:markdown",
)

STUB_GENERATOR = "nodejs-express-server"
DOCS_GENERATOR = "html2"

# Comment lines widdershins leaves in its output
_WIDDERSHINS_COMMENTS = (
    "<!-- backwards compatibility -->",
    "<!-- Generator: Widdershins v4.0.1 -->",
)


def _chain(*commands: str) -> str:
    """Join commands so a failing step short-circuits the rest."""
    return " && ".join(commands)


def _run(script: str) -> str:
    return f"npm run {script}"


def _markdown_scripts(spec_file: str, stem: str) -> dict[str, str]:
    dirty = f"markdown-docs/{stem}_dirty.md"
    clean = f"markdown-docs/{stem}.md"
    strings = " ".join(f'--string="{c}"' for c in _WIDDERSHINS_COMMENTS)
    return {
        "make:markdown": "make-dir markdown-docs",
        "delete:markdown": "rimraf markdown-docs",
        "generate:markdown": _chain(
            _run("delete:markdown"),
            _run("make:markdown"),
            f"widdershins open-api/{spec_file} -o {dirty} --omitHeader --expandBody"
            " --language_tabs 'javascript:JavaScript'",
            _run("markdown:prepare"),
        ),
        "markdown:tidy": f"tidy-markdown < ./{dirty} > ./{clean}",
        "markdown:remove-comments": f"replace-in-files {strings} --replacement='' ./{clean}",
        "markdown:remove-empty-links": f'replace-in-files --string="[]()" --replacement=\'\' {clean}',
        "markdown:remove-aside": f'replace-in-files --string="</aside>" --replacement=\'**\' {clean}',
        "markdown:replace-warnings": (
            f'replace-in-files --regex="<aside[^>]*>" --replacement=\'**\' {clean}'
        ),
        "markdown:remove-dirty": f"rimraf {dirty}",
        "markdown:prepare": _chain(
            _run("markdown:tidy"),
            _run("markdown:remove-comments"),
            _run("markdown:remove-empty-links"),
            _run("markdown:remove-aside"),
            _run("markdown:replace-warnings"),
            _run("markdown:remove-dirty"),
        ),
    }


def build_scripts(spec_file: str, stem: str, stub_port: int = 9999) -> Mapping[str, str]:
    """Build the full, read-only script map for a version directory.

    spec_file is the versioned file name inside open-api/, stem the same name
    without its extension.
    """
    api_docs_url = f"http://localhost:{stub_port}/api-docs"
    scripts: dict[str, str] = {
        "make:swagger": "make-dir swagger-stub",
        "delete:swagger": "rimraf swagger-stub",
        "generate:swagger": _chain(
            _run("delete:swagger"),
            _run("make:swagger"),
            f"openapi-generator-cli generate -i open-api/{spec_file} -g {STUB_GENERATOR}"
            f" -o swagger-stub --additional-properties=serverPort={stub_port}",
        ),
        "make:docs": "make-dir html-docs",
        "delete:docs": "rimraf html-docs",
        "generate:docs": _chain(
            _run("delete:docs"),
            _run("make:docs"),
            f"openapi-generator-cli generate -i open-api/{spec_file} -g {DOCS_GENERATOR} -o html-docs",
        ),
    }
    scripts.update(_markdown_scripts(spec_file, stem))
    scripts.update({
        "generate": _chain(*(_run(s) for s in GENERATE_SCRIPTS)),
        "start:swagger": "cd swagger-stub && npm start",
        "start:prism": f"prism mock open-api/{spec_file}",
        "start:browser": f"wait-on {api_docs_url} && start {api_docs_url}",
        "start": (
            'concurrently -n swagger,prism,browser'
            ' "npm run start:swagger" "npm run start:prism" "npm run start:browser"'
        ),
    })
    return MappingProxyType(scripts)


def build_readme_context(
    title: str | None,
    token: str,
    spec_file: str,
    version_dir: str,
    scripts: Mapping[str, str],
) -> dict[str, Any]:
    """Assemble the context dict for README.md.j2."""
    return {
        "title": title or "OpenAPI",
        "version": token,
        "spec_file": spec_file,
        "version_dir": version_dir,
        "scripts": sorted(scripts.items()),
        "script_count": len(scripts),
        "packages": PINNED_PACKAGES,
    }
