"""Command-line interface for gumup build mode."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .build import BuildNamespace, UnitCache
from .config import GumupConfig, load_config
from .constants import VERSION
from .observability import LogContext, configure_logging, get_logger
from .utils.exceptions import GumupError

app = typer.Typer(
    name="gumup",
    help="gumup - order and concatenate unit files by their declared dependencies",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

FilesArgument = typer.Argument(..., help="Entry unit files", exists=True, dir_okay=False)
UnitPathOption = typer.Option(
    None, "--unit-path", "-u", help="Directory to look up required units in (repeatable)"
)
SuffixOption = typer.Option(None, "--suffix", help="Unit file suffix (default: .js)")
ConfigOption = typer.Option(None, "--config", "-c", help="Configuration file")
LogLevelOption = typer.Option(
    None, "--log-level", help="Log verbosity: TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR"
)
JsonLogsOption = typer.Option(False, "--json-logs", help="Write logs as JSON")


def _prepare(
    files: list[Path],
    unit_paths: list[Path] | None,
    suffix: str | None,
    config_file: Path | None,
    log_level: str | None,
    json_logs: bool,
) -> tuple[GumupConfig, BuildNamespace]:
    """Load configuration, set up logging and register the entry files."""
    config = load_config(config_file)
    if unit_paths:
        config.build.unit_paths = list(unit_paths)
    if suffix:
        config.build.suffix = suffix

    configure_logging(
        level=log_level or config.logging.level,
        json_logs=json_logs or config.logging.format == "json",
        log_file=config.logging.file,
    )

    unit_cache = UnitCache(
        config.build.unit_paths,
        suffix=config.build.suffix,
        encoding=config.build.encoding,
    )
    namespace = BuildNamespace(unit_cache)
    for file_name in files:
        namespace.add(file_name)

    return config, namespace


def _fail(error: Exception) -> typer.Exit:
    err_console.print(f"[red]ERROR:[/red] {error}")
    return typer.Exit(code=1)


@app.command()
def order(
    files: list[Path] = FilesArgument,
    unit_paths: list[Path] | None = UnitPathOption,
    suffix: str | None = SuffixOption,
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Show the order in which unit files must be concatenated.

    Examples:
        gumup order src/app/main.js -u src
        gumup order src/app/main.js src/app/admin.js -c gumup.yaml
    """
    with LogContext(command="order"):
        try:
            _, namespace = _prepare(files, unit_paths, suffix, config_file, log_level, json_logs)
            ordered = namespace.resolve_units()
        except (GumupError, OSError) as e:
            raise _fail(e) from e

    table = Table(title="Concatenation order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Unit", style="cyan")
    table.add_column("File", style="green")

    for index, unit in enumerate(ordered, start=1):
        table.add_row(str(index), unit.name, unit.file_name)

    console.print(table)


@app.command()
def build(
    files: list[Path] = FilesArgument,
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (default: stdout)"
    ),
    unit_paths: list[Path] | None = UnitPathOption,
    suffix: str | None = SuffixOption,
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Concatenate unit files in dependency order.

    Examples:
        gumup build src/app/main.js -u src -o dist/app.js
        gumup build src/app/main.js -c gumup.yaml > dist/app.js
    """
    with LogContext(command="build"):
        try:
            config, namespace = _prepare(
                files, unit_paths, suffix, config_file, log_level, json_logs
            )
            content = namespace.concatenate(
                separator=config.build.separator,
                banner=config.build.banner,
            )
            if output_file is not None:
                output_file.parent.mkdir(parents=True, exist_ok=True)
                output_file.write_text(content, encoding=config.build.encoding)
        except (GumupError, OSError) as e:
            raise _fail(e) from e

        if output_file is None:
            typer.echo(content, nl=False)
            return

        logger.info("Build written", output=str(output_file), files=len(namespace.graph.nodes))

    err_console.print(f"[green]Wrote {output_file}[/green]")


@app.command()
def graph(
    files: list[Path] = FilesArgument,
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="DOT output file (default: stdout)"
    ),
    unit_paths: list[Path] | None = UnitPathOption,
    suffix: str | None = SuffixOption,
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Output the resolved dependency graph in DOT format (for Graphviz).

    Examples:
        gumup graph src/app/main.js -u src | dot -Tsvg > deps.svg
    """
    with LogContext(command="graph"):
        try:
            _, namespace = _prepare(files, unit_paths, suffix, config_file, log_level, json_logs)
            dependency_graph = namespace.graph
        except (GumupError, OSError) as e:
            raise _fail(e) from e

        cache = namespace.unit_cache
        dot = dependency_graph.to_dot(
            labels={name: cache[name].file_name for name in dependency_graph.nodes}
        )
        logger.debug("Rendered dependency graph", nodes=len(dependency_graph.nodes))

    if output_file is None:
        typer.echo(dot)
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(dot + "\n", encoding="utf-8")
    err_console.print(f"[green]Wrote {output_file}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel.fit(
            "[bold]gumup[/bold]\n\n"
            f"Version: [cyan]{VERSION}[/cyan]\n\n"
            "[bold]Features:[/bold]\n"
            "- Unit declarations with exact and wildcard requirements\n"
            "- Dependency graph with cycle detection\n"
            "- Runtime initialization in dependency order\n"
            "- Unit picking and dependency injection\n"
            "- File ordering and concatenation",
            title="About",
            border_style="blue",
        )
    )
