"""Command-line interface for polyloc"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .analysis import summarize_functions
from .core import Scanner
from .config import load_config
from .exceptions import PolylocError
from .file_ops import discover_files
from .formatters import FORMATTERS, RichFormatter, TreeFormatter, export, get_formatter
from .logging_config import setup_logging

app = typer.Typer(
    name="polyloc",
    help="polyloc - Multi-language line counter with function extraction",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _split_types(types: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten repeated and comma-separated --type values."""
    if not types:
        return None
    return [name.strip() for value in types for name in value.split(",") if name.strip()]


@app.command()
def main(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory (or single file) to scan",
    ),
    types: Optional[List[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Only count these languages (name, alias or extension; repeatable)",
    ),
    functions: bool = typer.Option(
        False,
        "--functions",
        "-f",
        help="Extract functions, methods, classes and structs",
    ),
    func_analysis: bool = typer.Option(
        False,
        "--func-analysis",
        help="Extract functions and estimate their complexity",
    ),
    warn_size: Optional[int] = typer.Option(
        None,
        "--warn-size",
        help="Warn about files with more code lines than this",
        min=1,
    ),
    git_dates: bool = typer.Option(
        False,
        "--git-dates",
        help="Use the last commit time instead of the file mtime",
    ),
    no_parallel: bool = typer.Option(
        False,
        "--no-parallel",
        help="Analyze files sequentially",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: CPU count)",
        min=1,
        max=64,
    ),
    export_path: Optional[Path] = typer.Option(
        None,
        "--export",
        "-e",
        help="Write the result to FILE (.json, .jsonl, .csv or .html)",
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        help="Output format: rich (default), json, jsonl, csv, html",
    ),
    tree: bool = typer.Option(
        False,
        "--tree",
        help="Show files as a directory tree (rich output only)",
    ),
    binary: bool = typer.Option(
        False,
        "--binary",
        "-b",
        help="Include binary files in the tree view",
    ),
    detailed: bool = typer.Option(
        False,
        "--detailed",
        "-d",
        help="Add a per-extension breakdown (rich output only)",
    ),
    include_hidden: bool = typer.Option(
        False,
        "--include-hidden",
        help="Scan files and directories starting with '.'",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Glob pattern to skip, on top of .locignore (repeatable)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Count code, comment and blank lines per language.

    [bold cyan]Examples:[/bold cyan]

      polyloc src/

      polyloc . -t py -t rs --functions

      polyloc . --func-analysis --export report.json

      polyloc . --tree -b

      polyloc . -d --export report.html

      polyloc . --format json | jq .metadata
    """
    if version:
        console.print(f"[bold cyan]polyloc[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    if fmt not in FORMATTERS:
        console.print(f"[red]Error:[/red] --format must be one of: {', '.join(sorted(FORMATTERS))}")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        # CLI overrides (highest priority); None means "not given"
        extract = True if (functions or func_analysis) else None
        settings = load_config(
            config_file=config,
            language_filter=_split_types(types),
            extract_functions=extract,
            estimate_complexity=True if func_analysis else None,
            warn_size_threshold=warn_size,
            timestamp_source="git" if git_dates else None,
            parallel=False if no_parallel else None,
            workers=workers,
        )
        logger.debug(f"Loaded settings: {settings}")

        files = discover_files(directory, include_hidden=include_hidden, extra_ignores=exclude or ())
        root = directory if directory.is_dir() else directory.parent
        scanner = Scanner(settings, root=root)
        result = scanner.scan(files)

        summary = summarize_functions(result) if result.function_extraction_enabled else None

        if fmt != "rich":
            formatter = get_formatter(fmt)
        elif tree:
            formatter = TreeFormatter(root, show_binary=binary, detailed=detailed)
        else:
            formatter = RichFormatter(detailed=detailed)
        formatter.render(result, summary)

        if export_path is not None:
            export(result, export_path, summary)
            if fmt == "rich":
                console.print(f"[green]Exported[/green] {export_path}")

    except PolylocError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        console.print("\n[yellow]Scan interrupted[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    app()
