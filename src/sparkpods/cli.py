"""sparkpods CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sparkpods import __version__
from sparkpods._constants import DEFAULT_CONFIG, SERVICE_ACCOUNT_TOKEN_PATH
from sparkpods.composition import CompositionResult, compose
from sparkpods.config import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigValidationError,
    load_config,
)
from sparkpods.k8s import ConfigurationError, EnvironmentProbe

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="sparkpods",
    help="Resolve Spark executor pod capabilities and control-plane access on Kubernetes",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def resolve_config_path(config_file: Path | None) -> Path:
    """Resolve config file path, using ./sparkpods.yaml as default."""
    if config_file is not None:
        return config_file

    default = Path(DEFAULT_CONFIG)
    if default.exists():
        return default

    print_error(f"No config file specified and ./{DEFAULT_CONFIG} not found")
    raise typer.Exit(1)


def parse_conf_overrides(conf: list[str] | None) -> dict[str, str]:
    """Parse repeated ``--conf key=value`` options."""
    overrides: dict[str, str] = {}
    for item in conf or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            print_error(f"Invalid --conf {item!r} (expected key=value)")
            raise typer.Exit(1)
        overrides[key.strip()] = value
    return overrides


def configure_logging(verbose: bool) -> None:
    # Composition warnings are rendered by the command itself
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]OK[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]ERROR[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]WARN[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]...[/blue] {message}")


def _format_param(value: object) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items()) or "-"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "-"
    return "-" if value is None else str(value)


def render_result(result: CompositionResult) -> None:
    """Print a composition result as rich tables."""
    access = result.access
    console.print("\n[bold]Control plane[/bold]")
    console.print(f"  Access:    {access.mode.value}")
    console.print(f"  Endpoint:  {access.endpoint}")
    console.print(f"  Namespace: {access.namespace}")

    console.print("\n[bold]Executor capabilities[/bold]")
    if result.capabilities:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Capability", no_wrap=True)
        table.add_column("Parameters")
        for i, descriptor in enumerate(result.capabilities, 1):
            params = descriptor.to_dict()["params"]
            table.add_row(
                str(i),
                descriptor.kind.value,
                "\n".join(f"{k}: {_format_param(v)}" for k, v in params.items()) or "-",
            )
        console.print(table)
    else:
        print_info("No optional capabilities enabled")

    console.print("\n[bold]Shuffle service[/bold]")
    if result.shuffle.enabled and result.shuffle.handle is not None:
        handle = result.shuffle.handle
        print_success(f"Enabled (namespace {handle.namespace})")
        console.print(f"  Labels:         {_format_param(dict(handle.labels))}")
        console.print(f"  Authentication: {handle.authentication_enabled}")
    else:
        print_info("Disabled")

    if result.warnings:
        console.print("\n[bold]Warnings[/bold]")
        for warning in result.warnings:
            print_warning(escape(f"[{warning.code.value}] {warning.message}"))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"sparkpods version {__version__}")


@app.command()
def probe(
    token_path: Annotated[
        Path,
        typer.Option(
            "--token-path",
            help="Service account token path used as the in-cluster marker",
        ),
    ] = Path(SERVICE_ACCOUNT_TOKEN_PATH),
) -> None:
    """Report whether this process runs inside a Kubernetes cluster."""
    if EnvironmentProbe(token_path=token_path).probe():
        print_success(f"In cluster ({token_path} present)")
    else:
        print_info(f"Outside cluster ({token_path} absent)")


@app.command()
def resolve(
    config_file: Annotated[
        Path | None,
        typer.Argument(
            help=f"Path to configuration YAML file (default: ./{DEFAULT_CONFIG})",
        ),
    ] = None,
    conf: Annotated[
        list[str] | None,
        typer.Option(
            "--conf",
            "-c",
            help="Override a setting (key=value); may be repeated",
        ),
    ] = None,
    in_cluster: Annotated[
        bool | None,
        typer.Option(
            "--in-cluster/--external",
            help="Force the access strategy instead of probing the environment",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the composition as JSON",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging",
        ),
    ] = False,
) -> None:
    """Resolve executor capabilities and control-plane access.

    Loads the configuration, probes the environment (unless forced with
    --in-cluster/--external) and prints the composition the scheduler
    backend would receive.
    """
    configure_logging(verbose)
    config_file = resolve_config_path(config_file)
    overrides = parse_conf_overrides(conf)

    try:
        config = load_config(config_file, overrides=overrides)
    except ConfigFileNotFoundError as e:
        print_error(f"File not found: {e}")
        raise typer.Exit(1)  # noqa: B904
    except ConfigValidationError as e:
        print_error("Config validation failed:")
        for err in e.errors:
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [red]•[/red] {escape(loc)}: {escape(err['msg'])}")
        raise typer.Exit(1)  # noqa: B904
    except ConfigError as e:
        print_error(escape(f"Config error: {e}"))
        raise typer.Exit(1)  # noqa: B904
    logger.debug("Loaded %d settings from %s", len(config), config_file)

    try:
        result = compose(config, in_cluster=in_cluster)
    except ConfigurationError as e:
        print_error(escape(str(e)))
        raise typer.Exit(1)  # noqa: B904

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(Panel(f"Resolved: [bold]{config_file}[/bold]", expand=False))
    render_result(result)


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
