"""Write the manifest and render templates into a version directory.

Takes the script map from scripts.py and produces package.json and README.md.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import jinja2

from .layout import MANIFEST_NAME, README_NAME

TEMPLATE_DIR = Path(__file__).parent / "templates"


def write_manifest(package_dir: Path, scripts: Mapping[str, str]) -> Path:
    """Merge scripts into package_dir/package.json with a single write.

    Keeps whatever `npm init` put there; script names already present are
    overwritten by the map.
    """
    manifest_path = package_dir / MANIFEST_NAME
    manifest: dict[str, Any] = {}
    if manifest_path.exists():
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))

    manifest["scripts"] = {**manifest.get("scripts", {}), **scripts}
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return manifest_path


def render_readme(package_dir: Path, context: dict[str, Any]) -> Path:
    """Render the README template and write it to package_dir/README.md."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("README.md.j2")
    output = template.render(**context)

    output_path = package_dir / README_NAME
    output_path.write_text(output, encoding="utf-8")
    return output_path
