"""Scaffold pipeline.

Validate -> ExtractVersion -> CheckNotExists -> Scaffold -> Relocate ->
Install -> GenerateStub -> GenerateDocs -> GenerateMarkdown -> Cleanup.

Input and domain errors raise ScaffoldError subclasses before anything is
written. External stages never raise: the first failing stage stops the run
and is recorded in the returned ScaffoldReport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .codegen import render_readme, write_manifest
from .config import Settings
from .layout import (
    GENERATOR_CONFIG_NAME,
    VersionLayout,
    copy_spec,
    ensure_absent,
    make_directories,
    move_generator_config,
    staged,
)
from .loader import get_title, get_version, load_spec, validate_spec_path
from .naming import version_token, versioned_filename, versioned_stem
from .runner import (
    Runner,
    StageResult,
    init_command,
    install_command,
    npm_run_command,
    run_stage,
)
from .scripts import GENERATE_SCRIPTS, PINNED_PACKAGES, build_readme_context, build_scripts

_GENERATE_MESSAGES: dict[str, str] = {
    "generate:swagger": "Generating Server Stub. Please Wait...",
    "generate:docs": "Generating HTML Documentation. Please Wait...",
    "generate:markdown": "Generating Markdown Documentation. Please Wait...",
}


@dataclass
class ScaffoldReport:
    token: str
    version_dir: Path
    stages: list[StageResult] = field(default_factory=list)
    committed: bool = False
    generator_config: Path | None = None

    @property
    def failed(self) -> StageResult | None:
        for stage in self.stages:
            if not stage.ok:
                return stage
        return None

    @property
    def failed_index(self) -> int | None:
        """1-based position of the failed stage in run order."""
        for index, stage in enumerate(self.stages, start=1):
            if not stage.ok:
                return index
        return None

    @property
    def ok(self) -> bool:
        return self.failed is None


class _StageFailed(Exception):
    """Abandons the staging directory after a failed stage."""


def _run(
    report: ScaffoldReport,
    runner: Runner,
    name: str,
    argv: list[str],
    cwd: Path,
    settings: Settings,
) -> bool:
    result = runner(name, argv, cwd=cwd, timeout=settings.stage_timeout)
    report.stages.append(result)
    return result.ok


def scaffold(
    spec_file: str | Path | None,
    settings: Settings | None = None,
    *,
    install: bool = True,
    runner: Runner = run_stage,
) -> ScaffoldReport:
    """Scaffold <root>/<version>/ from spec_file and run the generators.

    With install=False the run stops after the version directory is in
    place: no npm install, no generation, no cleanup.
    """
    settings = settings or Settings()
    print("Starting OpenAPI Stub Generation...")

    spec_path = validate_spec_path(spec_file)

    print("Getting Version Number...")
    spec = load_spec(spec_path)
    token = version_token(get_version(spec))
    print(f"Version Number Found: {token}")

    layout = VersionLayout(settings.output_root, token)
    ensure_absent(layout)

    spec_name = versioned_filename(spec_path, token)
    scripts = build_scripts(spec_name, versioned_stem(spec_path, token), settings.stub_port)
    report = ScaffoldReport(token=token, version_dir=layout.version_dir)

    try:
        with staged(layout) as stage_dir:
            print("Making Directories...")
            make_directories(stage_dir)

            if not _run(report, runner, "init", init_command(settings.npm), stage_dir, settings):
                raise _StageFailed

            print("Adding NPM Scripts...")
            write_manifest(stage_dir, scripts)
            render_readme(
                stage_dir,
                build_readme_context(
                    get_title(spec), token, spec_name, layout.version_dir.as_posix(), scripts,
                ),
            )

            print("Moving / Copying Files...")
            copy_spec(spec_path, stage_dir, spec_name)
    except _StageFailed:
        return report
    report.committed = True

    if not install:
        return report

    cwd = Path.cwd()
    print("Installing NPM Modules. Please Wait...")
    argv = install_command(settings.npm, layout.version_dir, PINNED_PACKAGES)
    if not _run(report, runner, "install", argv, cwd, settings):
        return report

    for script in GENERATE_SCRIPTS:
        print(_GENERATE_MESSAGES[script])
        argv = npm_run_command(settings.npm, layout.version_dir, script)
        if not _run(report, runner, script, argv, cwd, settings):
            return report

    print("Cleaning Up...")
    report.generator_config = move_generator_config(
        [layout.version_dir / GENERATOR_CONFIG_NAME, cwd / GENERATOR_CONFIG_NAME],
        layout.generator_config_path,
    )
    if report.generator_config is None:
        print(f"No {GENERATOR_CONFIG_NAME} to move.")
    return report
