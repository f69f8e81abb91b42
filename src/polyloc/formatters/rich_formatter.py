"""Rich terminal formatter for polyloc."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analysis import COMPLEXITY_WARNING, FunctionSummary
from ..exceptions import ScanIssue
from ..models import NO_EXTENSION, ScanResult
from ..scanning.languages import LANGUAGES
from ..scanning.models import FunctionRecord
from .base import BaseFormatter

console = Console()

# Issues listed before the rest are folded into a count.
MAX_ISSUES_SHOWN = 20


def _language_label(language_id: str) -> str:
    spec = LANGUAGES.get(language_id)
    return spec.name if spec is not None else language_id


def _complexity_label(complexity: Optional[int]) -> str:
    if complexity is None:
        return "[dim]-[/dim]"
    if complexity > 2 * COMPLEXITY_WARNING:
        return f"[red bold]{complexity}[/red bold]"
    elif complexity > COMPLEXITY_WARNING:
        return f"[red]{complexity}[/red]"
    elif complexity > COMPLEXITY_WARNING // 2:
        return f"[yellow]{complexity}[/yellow]"
    else:
        return f"[green]{complexity}[/green]"


def _percent(part: int, whole: int) -> str:
    return f"{part / whole * 100:.1f}%" if whole else "0.0%"


def extension_table(result: ScanResult) -> Table:
    """Per-extension breakdown, largest line count first."""
    table = Table(title="Lines by Extension", expand=False)
    table.add_column("Extension", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Binary", justify="right", style="yellow")
    table.add_column("Code", justify="right", style="green")
    table.add_column("Comment", justify="right", style="blue")
    table.add_column("Blank", justify="right", style="dim")
    table.add_column("Total", justify="right", style="bold")
    table.add_column("Share", justify="right")
    whole = result.totals.total
    for extension, totals in result.extension_totals().items():
        label = extension if extension == NO_EXTENSION else f".{extension}"
        table.add_row(
            escape(label),
            str(totals.files),
            str(totals.binary_files),
            str(totals.code),
            str(totals.comment),
            str(totals.blank),
            str(totals.total),
            _percent(totals.total, whole),
        )
    return table


class RichFormatter(BaseFormatter):
    """Per-language table, summary panel, issues and function rankings.

    With ``detailed`` the per-extension breakdown follows the language table.
    """

    def __init__(self, detailed: bool = False):
        self.detailed = detailed

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        self._print_languages(result)
        if self.detailed:
            console.print(extension_table(result))
            console.print()
        self._print_summary(result)
        if summary is not None:
            self._print_functions(summary)
        self._print_issues(result)

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        # Rich output goes directly to console; return empty string
        self.render(result, summary)
        return ""

    # -- private helpers --

    def _print_languages(self, result: ScanResult) -> None:
        show_functions = result.function_extraction_enabled
        table = Table(title="Lines of Code by Language", expand=False)
        table.add_column("Language", style="cyan")
        table.add_column("Files", justify="right")
        table.add_column("Code", justify="right", style="green")
        table.add_column("Comment", justify="right", style="blue")
        table.add_column("Blank", justify="right", style="dim")
        table.add_column("Total", justify="right", style="bold")
        if show_functions:
            table.add_column("Functions", justify="right", style="magenta")

        ordered = sorted(result.language_totals.items(), key=lambda item: (-item[1].code, item[0]))
        for language_id, totals in ordered:
            if totals.files == 0:
                continue
            row = [
                _language_label(language_id),
                str(totals.files),
                str(totals.code),
                str(totals.comment),
                str(totals.blank),
                str(totals.total),
            ]
            if show_functions:
                row.append(str(totals.functions))
            table.add_row(*row)

        totals = result.totals
        footer = ["[bold]Total[/bold]", str(totals.files), str(totals.code),
                  str(totals.comment), str(totals.blank), str(totals.total)]
        if show_functions:
            footer.append(str(result.total_functions))
        table.add_section()
        table.add_row(*footer)

        console.print(table)
        console.print()

    def _print_summary(self, result: ScanResult) -> None:
        totals = result.totals
        summary_text = (
            f"[bold]{totals.files}[/bold] text files  |  "
            f"[green]{totals.code}[/green] code ({_percent(totals.code, totals.total)})  |  "
            f"[blue]{totals.comment}[/blue] comment ({_percent(totals.comment, totals.total)})  |  "
            f"[dim]{totals.blank}[/dim] blank"
        )
        if result.binary_file_count:
            summary_text += f"  |  {result.binary_file_count} binary skipped"
        if result.function_extraction_enabled:
            summary_text += (
                f"\n[magenta]{result.total_functions}[/magenta] functions, "
                f"[magenta]{result.total_classes}[/magenta] classes"
            )
        console.print(Panel(summary_text, title="[bold cyan]Summary[/bold cyan]", expand=False))
        console.print()

    def _function_table(self, title: str, functions: tuple[FunctionRecord, ...]) -> Table:
        table = Table(title=title, expand=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("Function", style="yellow", ratio=2)
        table.add_column("Location", ratio=3)
        table.add_column("Lines", justify="right", width=7)
        table.add_column("Complexity", justify="right", width=11)
        for i, fn in enumerate(functions, 1):
            name = f"{fn.parent_name}.{fn.name}" if fn.parent_name else fn.name
            table.add_row(
                str(i),
                name,
                f"{fn.path}:{fn.start_line}",
                str(fn.line_count),
                _complexity_label(fn.complexity),
            )
        return table

    def _print_functions(self, summary: FunctionSummary) -> None:
        if summary.function_count == 0:
            console.print("[yellow]No functions found.[/yellow]")
            console.print()
            return

        lines = [
            f"Mean length: [bold]{summary.mean_length:.1f}[/bold] lines "
            f"(median {summary.median_length:.0f})",
            f"Documented: [bold]{summary.documented_ratio * 100:.0f}%[/bold]  |  "
            f"Async: [bold]{summary.async_count}[/bold]",
        ]
        if summary.mean_complexity is not None:
            lines.append(
                f"Complexity: mean [bold]{summary.mean_complexity:.1f}[/bold], "
                f"median {summary.median_complexity:.0f}, p90 {summary.p90_complexity:.0f}"
            )
        console.print(Panel("\n".join(lines), title="[bold cyan]Functions[/bold cyan]", expand=False))
        console.print()

        console.print(self._function_table("Largest Functions", summary.largest))
        console.print()
        if summary.most_complex:
            console.print(
                self._function_table(f"Complexity Above {COMPLEXITY_WARNING}", summary.most_complex)
            )
            console.print()

    def _print_issues(self, result: ScanResult) -> None:
        issues: list[ScanIssue] = list(result.errors) + list(result.warnings)
        if not issues:
            return
        console.print(
            f"[bold]Issues:[/bold] [red]{len(result.errors)}[/red] errors, "
            f"[yellow]{len(result.warnings)}[/yellow] warnings"
        )
        for issue in issues[:MAX_ISSUES_SHOWN]:
            color = "red" if issue in result.errors else "yellow"
            console.print(f"  [{color}]-[/{color}] {escape(str(issue))}", highlight=False)
        hidden = len(issues) - MAX_ISSUES_SHOWN
        if hidden > 0:
            console.print(f"  [dim]... and {hidden} more[/dim]")
        console.print()
