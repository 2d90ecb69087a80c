"""Command line interface: oas-scaffold -f <spec file>."""

from pathlib import Path
from typing import Optional

import typer

from .config import Settings
from .errors import ScaffoldError
from .pipeline import ScaffoldReport, scaffold
from .scripts import PINNED_PACKAGES

app = typer.Typer(
    add_completion=False,
    help="Scaffold a versioned npm workspace (server stub, HTML and Markdown docs) from an OpenAPI file.",
)


def _report_failure(report: ScaffoldReport) -> None:
    stage = report.failed
    total = len(report.stages)
    typer.secho(
        f"Stage {report.failed_index}/{total} '{stage.name}' failed with exit code {stage.returncode}.",
        fg=typer.colors.RED,
        err=True,
    )
    typer.echo(f"  command: {stage.command}", err=True)
    tail = stage.output_tail()
    if tail:
        typer.echo(tail, err=True)
    if report.committed:
        typer.echo(f"{report.version_dir} was left in place for inspection.", err=True)


@app.command()
def main(
    file: Optional[str] = typer.Option(
        None, "-f", "--file", metavar="FILE", help="OpenAPI spec file (.yaml, .yml or .json).",
    ),
    output_root: Optional[Path] = typer.Option(
        None, "--output-root", help="Directory holding the versioned trees (default: api-spec).",
    ),
    install: bool = typer.Option(
        True, "--install/--no-install", help="Install the toolchain and run the generators.",
    ),
) -> None:
    """Scaffold api-spec/<version>/ from an OpenAPI file and generate stubs and docs."""
    try:
        settings = Settings.from_env().with_overrides(output_root=output_root)
        report = scaffold(file, settings, install=install)
    except ScaffoldError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from None

    if not report.ok:
        _report_failure(report)
        raise typer.Exit(code=1)

    version_dir = report.version_dir.as_posix()
    if install:
        typer.secho("Stub Generation Complete!", fg=typer.colors.GREEN)
        typer.echo(
            f"Run 'npm --prefix {version_dir} start' to start the API mocking"
            " and Swagger documentation servers."
        )
    else:
        typer.secho(f"Scaffolded {version_dir}.", fg=typer.colors.GREEN)
        packages = " ".join(PINNED_PACKAGES)
        typer.echo(f"Install the toolchain with 'npm --prefix {version_dir} i {packages}'.")


def run() -> None:
    app()
