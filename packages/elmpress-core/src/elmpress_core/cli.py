"""CLI entry point for elmpress."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from elmpress_core.config import ElmPressConfig, load_config
from elmpress_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from elmpress_core.converter import (
    BuildFailure,
    ConfigurationError,
    read_verbatim,
    write_verbatim,
)
from elmpress_core.interfaces import TransformPlugin
from elmpress_core.plugins import PluginLoader, PluginNotFoundError
from elmpress_core.site import SiteBuilder

app = typer.Typer(
    name="elmpress",
    help="Compile Elm sources into a static site with an external compiler.",
)

config_app = typer.Typer(help="Manage elmpress configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: ElmPressConfig | None = None
_config_path: str | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _configure_logging(level: str, fmt: str) -> None:
    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    logging.basicConfig(level=_LOG_LEVELS[level], handlers=[handler], force=True)


def _get_config() -> ElmPressConfig:
    """Load the configuration on first use and configure logging from it."""
    global _config
    if _config is None:
        try:
            _config = load_config(_config_path)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        _configure_logging(_config.log_level, _config.log_format)
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to elmpress.yaml")
    ] = None,
) -> None:
    """Global options."""
    # Read on first use by a command; `config init` never reads it.
    global _config, _config_path
    _config = None
    _config_path = config


def _load_transforms(cfg: ElmPressConfig) -> list[TransformPlugin]:
    try:
        return PluginLoader(cfg).load_transforms()
    except PluginNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _report_failure(exc: BuildFailure | ConfigurationError) -> None:
    if isinstance(exc, BuildFailure):
        rprint(f"[red]Build failed:[/red] {escape(str(exc))}")
        if exc.stderr:
            rprint(Panel(escape(exc.stderr.rstrip()), title="Compiler output", border_style="red"))
    else:
        rprint(f"[red]Configuration error:[/red] {escape(str(exc))}")


@app.command()
def build(
    source: Annotated[str | None, typer.Option("--source", "-s", help="Site source directory")] = None,
    destination: Annotated[str | None, typer.Option("--destination", "-d", help="Output directory")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be built")] = False,
) -> None:
    """Build the site, compiling every claimed source file."""
    cfg = _get_config()
    overrides = {}
    if source is not None:
        overrides["source_dir"] = source
    if destination is not None:
        overrides["destination"] = destination
    if overrides:
        cfg = cfg.model_copy(update={"build": cfg.build.model_copy(update=overrides)})

    if not Path(cfg.build.source_dir).is_dir():
        rprint(f"[red]Error:[/red] source directory not found: {cfg.build.source_dir}")
        raise typer.Exit(1)

    builder = SiteBuilder(cfg.build, _load_transforms(cfg))

    if dry_run:
        planned = builder.plan()
        if not planned:
            rprint("[yellow]No source files found.[/yellow]")
            raise typer.Exit(0)
        source_root = builder.source_dir.resolve()
        table = Table(title="Dry Run: files that would be built")
        table.add_column("Source", style="cyan")
        table.add_column("Destination", style="green")
        table.add_column("Action")
        for item in planned:
            action = type(item.transform).__name__ if item.transform else "copy"
            table.add_row(
                str(item.source.relative_to(source_root)),
                str(item.destination),
                action,
            )
        rprint(table)
        return

    try:
        report = builder.build()
    except (BuildFailure, ConfigurationError) as e:
        _report_failure(e)
        raise typer.Exit(1)

    table = Table(title="Site Build")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Converted", str(report.converted))
    table.add_row("Copied", str(report.copied))
    table.add_row("Errors", str(len(report.errors)))
    table.add_row("Duration", f"{report.duration:.2f}s")
    rprint(table)

    for err in report.errors:
        rprint(f"  [red]error:[/red] {err.file}: {escape(err.error)}")
    if report.errors:
        raise typer.Exit(1)


@app.command()
def convert(
    file: str = typer.Argument(..., help="Path to the source file to compile"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write the result to file"),
) -> None:
    """Compile a single source file."""
    cfg = _get_config()
    path = Path(file)
    if not path.is_file():
        rprint(f"[red]Error:[/red] file not found: {file}")
        raise typer.Exit(1)

    builder = SiteBuilder(cfg.build, _load_transforms(cfg))
    transform = builder.route(path.suffix)
    if transform is None:
        rprint(f"[red]Error:[/red] no transform plugin claims '{path.suffix}' files")
        raise typer.Exit(1)

    content = read_verbatim(path)
    try:
        result = transform.convert(content)
    except (BuildFailure, ConfigurationError) as e:
        _report_failure(e)
        raise typer.Exit(1)

    if output:
        write_verbatim(output, result)
        rprint(f"[green]Written to[/green] {output}")
    else:
        typer.echo(result.encode("utf-8", errors="surrogateescape"), nl=False)


@app.command()
def plugins() -> None:
    """List available transform plugins."""
    cfg = _get_config()
    loader = PluginLoader(cfg)
    table = Table(title="Transform Plugins")
    table.add_column("Name", style="cyan")
    table.add_column("Origin")
    table.add_column("Enabled", justify="center")
    for name in loader.discover():
        origin = "built-in" if name in PluginLoader.BUILTINS else "entry point"
        enabled = "yes" if name in cfg.plugins.transforms else "-"
        table.add_row(name, origin, enabled)
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default elmpress.yaml in current directory."""
    target = Path("elmpress.yaml")
    if target.exists() and not force:
        rprint("[yellow]elmpress.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
