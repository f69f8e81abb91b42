"""Directory tree view for polyloc.

Files are laid out under their directories relative to the scan root, each
tagged with its line count. Binary files are hidden unless asked for.
"""

from pathlib import PurePath
from typing import Optional, Union

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ..analysis import FunctionSummary
from ..models import ScanResult
from ..scanning.models import FileRecord
from .base import BaseFormatter
from .rich_formatter import extension_table

console = Console()

# Directory name -> subtree, file name -> record.
TreeNode = dict[str, Union["TreeNode", FileRecord]]


def _relative_parts(path: str, root: PurePath) -> tuple[str, ...]:
    pure = PurePath(path)
    try:
        return pure.relative_to(root).parts
    except ValueError:
        # Outside the root: keep the path, minus its drive or leading slash.
        return tuple(part for part in pure.parts if part != pure.anchor)


def build_tree(files, root=".") -> TreeNode:
    """Nest file records by directory.

    Args:
        files: FileRecords to place
        root: Scan root; paths are shown relative to it

    Returns:
        Nested dict of directory names to subtrees and file names to records
    """
    root = PurePath(root)
    tree: TreeNode = {}
    for record in files:
        parts = _relative_parts(record.path, root)
        if not parts:
            parts = (PurePath(record.path).name,)
        node = tree
        for directory in parts[:-1]:
            child = node.setdefault(directory, {})
            if not isinstance(child, dict):
                # A file and a directory with the same name cannot coexist on disk.
                raise ValueError(f"{record.path}: {directory} is both a file and a directory")
            node = child
        node[parts[-1]] = record
    return tree


def _subtree_lines(node: TreeNode) -> int:
    total = 0
    for value in node.values():
        if isinstance(value, dict):
            total += _subtree_lines(value)
        elif not value.stats.binary:
            total += value.stats.total
    return total


def _file_label(name: str, record: FileRecord, show_functions: bool) -> Text:
    if record.stats.binary:
        label = Text(name, style="yellow")
        label.append(" [binary]", style="dim")
        return label

    label = Text(name, style="cyan" if record.stats.total == 0 else "green")
    label.append(f" ({record.stats.total} lines)", style="dim")
    if show_functions and record.functions:
        label.append(f" [{record.function_count} fn]", style="magenta")
    if record.last_modified is not None:
        label.append(f" [{record.last_modified.strftime('%Y-%m-%d')}]", style="blue")
    if record.oversized:
        label.append(" LARGE", style="bold red")
    return label


class TreeFormatter(BaseFormatter):
    """Render a scan result as a directory tree followed by a short summary."""

    def __init__(self, root=".", show_binary: bool = False, detailed: bool = False):
        self.root = PurePath(root)
        self.show_binary = show_binary
        self.detailed = detailed

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        files = [f for f in result.files if self.show_binary or not f.stats.binary]
        tree = Tree(Text(str(self.root), style="bold blue"), guide_style="dim")
        self._add_nodes(tree, build_tree(files, self.root), result.function_extraction_enabled)
        console.print(tree)
        console.print()

        if self.detailed:
            console.print(extension_table(result))
            console.print()

        self._print_totals(result)

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        # Tree output goes directly to console; return empty string
        self.render(result, summary)
        return ""

    # -- private helpers --

    def _add_nodes(self, branch: Tree, node: TreeNode, show_functions: bool) -> None:
        # Directories first, then files, each alphabetically.
        directories = sorted(k for k, v in node.items() if isinstance(v, dict))
        files = sorted(k for k, v in node.items() if not isinstance(v, dict))
        for name in directories:
            subtree = node[name]
            label = Text(f"{name}/", style="bold blue")
            label.append(f" ({_subtree_lines(subtree)} lines)", style="dim")
            self._add_nodes(branch.add(label), subtree, show_functions)
        for name in files:
            branch.add(_file_label(name, node[name], show_functions))

    def _print_totals(self, result: ScanResult) -> None:
        totals = result.totals
        console.print(f"[bold]Total lines:[/bold] {totals.total}")
        console.print(f"[bold]Text files:[/bold] {totals.files}")
        if result.binary_file_count:
            console.print(f"[bold]Binary files skipped:[/bold] {result.binary_file_count}")
        if result.function_extraction_enabled:
            console.print(
                f"[bold]Functions:[/bold] {result.total_functions}  "
                f"[bold]Classes:[/bold] {result.total_classes}"
            )
        oversized = sum(1 for f in result.files if f.oversized)
        if oversized:
            console.print(f"[bold red]Oversized files:[/bold red] {oversized}")
        console.print()
