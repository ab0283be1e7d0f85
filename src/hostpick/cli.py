"""hostpick CLI."""

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from hostpick.config import DEFAULT_CONFIG_PATH, HostpickConfig, get_config_template, load_config
from hostpick.launcher import LaunchError, connect as launch_ssh
from hostpick.metadata import try_load_metadata
from hostpick.ranking import rank
from hostpick.sshconfig import ConfigLoader, LoadResult
from hostpick.types import HostEntry
from hostpick.validation import validate_registry

app = typer.Typer(help="hostpick - Search and pick hosts from your SSH config")
console = Console()


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    logging.getLogger("paramiko").setLevel(logging.WARNING)


def get_config(config_path: Path | None) -> HostpickConfig:
    """Load settings, exiting with an error message if they are invalid."""
    path = config_path or Path(DEFAULT_CONFIG_PATH).expanduser()
    try:
        return load_config(path)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        console.print(f"[red]Error:[/red] Invalid config {path}: {e}")
        raise typer.Exit(1)


def load_registry(config: HostpickConfig, ssh_config: Path | None = None) -> LoadResult:
    """Run the ingestion pipeline for the configured root file."""
    warnings = []
    metadata = None
    metadata_path = config.metadata_path()
    if metadata_path is not None:
        metadata, warning = try_load_metadata(metadata_path)
        if warning:
            warnings.append(warning)

    root = ssh_config or config.ssh_config_path()
    loader = ConfigLoader(home=config.home_dir(), metadata=metadata)
    result = loader.load(str(root))
    result.warnings = warnings + result.warnings
    return result


def print_warnings(result: LoadResult):
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


def hosts_table(entries: list[HostEntry]) -> Table:
    table = Table()
    table.add_column("")
    table.add_column("Alias")
    table.add_column("Host")
    table.add_column("User")
    table.add_column("Port")
    table.add_column("Tags")
    table.add_column("Source")

    for entry in entries:
        source = entry.source_file
        if entry.readonly:
            source = f"[dim]{source}[/dim]"
        table.add_row(
            "*" if entry.pinned else "",
            entry.alias,
            entry.host,
            entry.user,
            str(entry.port),
            ", ".join(entry.tags),
            source,
        )
    return table


ConfigOption = typer.Option(None, "--config", "-c", help="hostpick settings file")
SSHConfigOption = typer.Option(None, "--ssh-config", "-F", help="Root SSH config file")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


@app.command("list")
def list_hosts(
    query: str = typer.Argument("", help="Fuzzy search query"),
    config_path: Path | None = ConfigOption,
    ssh_config: Path | None = SSHConfigOption,
    verbose: bool = VerboseOption,
):
    """List hosts, best matches first when a query is given."""
    setup_logging(verbose)
    config = get_config(config_path)
    result = load_registry(config, ssh_config)
    print_warnings(result)

    entries = rank(result.entries, query)
    if not entries:
        console.print("No matching hosts." if query.strip() else "No hosts found.")
        return
    console.print(hosts_table(entries))


@app.command()
def files(
    config_path: Path | None = ConfigOption,
    ssh_config: Path | None = SSHConfigOption,
    verbose: bool = VerboseOption,
):
    """Show the config files that are read, in processing order."""
    setup_logging(verbose)
    config = get_config(config_path)
    loader = ConfigLoader(home=config.home_dir())
    paths, warnings = loader.resolve_files(str(ssh_config or config.ssh_config_path()))

    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for i, path in enumerate(paths):
        marker = "[bold]root[/bold]" if i == 0 else "include"
        console.print(f"{marker}\t{path}", soft_wrap=True)


@app.command()
def check(
    config_path: Path | None = ConfigOption,
    ssh_config: Path | None = SSHConfigOption,
    verbose: bool = VerboseOption,
):
    """Validate alias, host and port of every loaded host."""
    setup_logging(verbose)
    config = get_config(config_path)
    result = load_registry(config, ssh_config)
    print_warnings(result)

    errors = validate_registry(result.entries)
    if errors:
        console.print(f"[red]Found {len(errors)} invalid host(s):[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise typer.Exit(1)

    console.print(f"[green]{len(result.entries)} host(s) OK.[/green]")


@app.command()
def connect(
    query: str = typer.Argument(..., help="Alias or fuzzy search query"),
    config_path: Path | None = ConfigOption,
    ssh_config: Path | None = SSHConfigOption,
    verbose: bool = VerboseOption,
):
    """Open an SSH session to the best matching host."""
    setup_logging(verbose)
    config = get_config(config_path)
    result = load_registry(config, ssh_config)
    print_warnings(result)

    exact = [e for e in result.entries if query in e.aliases]
    candidates = exact or rank(result.entries, query)
    if not candidates:
        console.print(f"[red]Error:[/red] No host matches '{query}'.")
        raise typer.Exit(1)

    target = candidates[0]
    console.print(f"Connecting to [bold]{target.alias}[/bold]...")
    try:
        code = launch_ssh(target.alias, config.ssh_binary)
    except LaunchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    raise typer.Exit(code)


@app.command()
def init(
    config_path: Path | None = ConfigOption,
):
    """Write a settings template."""
    path = config_path or Path(DEFAULT_CONFIG_PATH).expanduser()

    if path.exists():
        console.print(f"[yellow]Warning:[/yellow] {path} already exists.")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit(0)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(get_config_template())
    console.print(f"[green]Wrote {path}[/green]")


if __name__ == "__main__":
    app()
