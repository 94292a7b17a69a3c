"""
MicroAPI command line interface.

Commands:
- generate: Synthesize controllers and dtos from a declaration graph
- check: Report diagnostics without writing anything
- targets: List available rendering targets
"""

from __future__ import annotations

import logging
import platform
import shutil
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from microapi._version import get_version
from microapi.core.errors import MicroApiError
from microapi.core.ir import Diagnostic
from microapi.core.loader import load_graph
from microapi.synth import (
    SynthesisConfig,
    SynthesisResult,
    SynthesisRunner,
    TargetRegistry,
    load_synthesis_config,
)
from microapi.synth.config import CONFIG_FILE_NAME

app = typer.Typer(
    help="Synthesize web controllers and dtos from annotated declarations",
    no_args_is_help=True,
)

console = Console()

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"microapi version {get_version()}")
        typer.echo(f"  Python: {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """MicroAPI CLI main callback for global options."""
    configure_logging(verbose)


def _load_config(
    config_path: Path,
    target: str | None = None,
    workers: int | None = None,
    output: Path | None = None,
    clean: bool | None = None,
) -> SynthesisConfig:
    """Load microapi.toml and apply command-line overrides."""
    config = load_synthesis_config(config_path)
    config = config.with_overrides(target=target, max_workers=workers)
    updates: dict[str, object] = {}
    if output is not None:
        updates["directory"] = str(output.resolve())
    if clean is not None:
        updates["clean"] = clean
    if updates:
        config = config.model_copy(update={"output": config.output.model_copy(update=updates)})
    return config


def _run(graph_path: Path, config: SynthesisConfig) -> SynthesisResult:
    """Load the graph and run one synthesis pass; exit 1 on a fatal error."""
    try:
        graph = load_graph(graph_path)
        runner = SynthesisRunner(config)
        return runner.run(graph)
    except MicroApiError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    """Print diagnostics as a table."""
    if not diagnostics:
        return

    table = Table(title="Diagnostics")
    table.add_column("Code", style="bold", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Location", style="dim")
    table.add_column("Message")

    for diagnostic in diagnostics:
        severity = (
            "[red]error[/red]" if diagnostic.is_error else "[yellow]warning[/yellow]"
        )
        location = diagnostic.location or diagnostic.subject or ""
        table.add_row(
            diagnostic.code.value,
            severity,
            escape(str(location)),
            escape(diagnostic.message),
        )

    console.print(table)


def _print_summary(result: SynthesisResult) -> None:
    errors = len(result.errors)
    warnings = len(result.warnings)
    style = "red" if errors else ("yellow" if warnings else "green")
    console.print(f"[{style}]{errors} error(s), {warnings} warning(s)[/{style}]")


@app.command()
def generate(
    graph_path: Annotated[
        Path, typer.Argument(help="Declaration graph JSON document", metavar="GRAPH")
    ],
    config_path: Annotated[
        Path, typer.Option("--config", "-c", help="Configuration file")
    ] = Path(CONFIG_FILE_NAME),
    target: Annotated[
        str | None,
        typer.Option("--target", "-t", help="Rendering target (overrides microapi.toml)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory (overrides microapi.toml)"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Declarations synthesized in parallel"),
    ] = None,
    clean: Annotated[
        bool | None,
        typer.Option("--clean/--no-clean", help="Clean output directory before writing"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="List generated units without writing files"),
    ] = False,
) -> None:
    """
    Generate controllers and dtos.

    Configuration is read from the [synthesis] section of microapi.toml.

    Examples:
        microapi generate graph.json                 # Render with configured target
        microapi generate graph.json -t fastapi      # FastAPI routers and models
        microapi generate graph.json -o ./generated  # Custom output directory
        microapi generate graph.json --dry-run       # Preview output keys
    """
    try:
        config = _load_config(config_path, target, workers, output, clean)
    except MicroApiError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    result = _run(graph_path, config)
    print_diagnostics(result.diagnostics)

    output_dir = config.get_output_path(config_path.resolve().parent)

    if dry_run:
        typer.echo(f"Dry run - {len(result.units)} unit(s) for {output_dir}:")
        for unit in result.units:
            typer.echo(f"  {unit.output_key} -> {unit.file_name}")
        typer.echo("No files were written (dry run mode)")
    else:
        if config.output.clean and output_dir.exists():
            logger.debug("Cleaning %s", output_dir)
            shutil.rmtree(output_dir)
        written = result.write(output_dir)
        typer.echo(f"Generated {len(written)} file(s) to {output_dir}")

    _print_summary(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def check(
    graph_path: Annotated[
        Path, typer.Argument(help="Declaration graph JSON document", metavar="GRAPH")
    ],
    config_path: Annotated[
        Path, typer.Option("--config", "-c", help="Configuration file")
    ] = Path(CONFIG_FILE_NAME),
) -> None:
    """Run synthesis and report diagnostics without writing files."""
    try:
        config = _load_config(config_path)
    except MicroApiError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    result = _run(graph_path, config)
    print_diagnostics(result.diagnostics)

    if not result.diagnostics:
        typer.echo(f"OK: {len(result.units)} unit(s), no diagnostics.")
        return

    _print_summary(result)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def targets() -> None:
    """List available rendering targets."""
    default = SynthesisConfig().target

    table = Table(title="Targets")
    table.add_column("Name", style="bold")
    table.add_column("Implementation")
    table.add_column("Default")

    for name in sorted(TargetRegistry.list_targets()):
        target_cls = TargetRegistry.get(name)
        table.add_row(
            name,
            target_cls.__name__ if target_cls else "",
            "yes" if name == default else "",
        )

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
