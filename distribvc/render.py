"""
Rendering functions for distribvc output.

This module handles all pretty-printing and table formatting.
Services return domain objects, this module makes them human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from rich.markup import escape
from typing import Dict, List, Optional

from .domain import Branch, Commit, FileStatus, RepositoryStatus

console = Console()

STATUS_STYLES = {
    FileStatus.STAGED: "green",
    FileStatus.MODIFIED: "yellow",
    FileStatus.UNTRACKED: "red",
}


def _table(title: Optional[str] = None) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )


def render_status(status: RepositoryStatus, out: Optional[Console] = None) -> None:
    """
    Render repository status as staged and unstaged tables.

    Args:
        status: Status to display
        out: Console to print to (module console if None)
    """
    out = out or console
    out.print(f"On branch [bold cyan]{escape(status.branch)}[/bold cyan]")

    if status.clean:
        out.print("[green]Working directory clean. No changes to commit.[/green]")
        return

    for title, entries in (("Staged Changes", status.staged_files),
                           ("Unstaged Changes", status.unstaged_files)):
        if not entries:
            continue
        table = _table(title)
        table.add_column("Path", style="cyan")
        table.add_column("Status")
        for path, state in entries.items():
            style = STATUS_STYLES.get(state, "")
            table.add_row(escape(path), f"[{style}]{state.value}[/{style}]" if style else state.value)
        out.print(table)


def render_log(commits: List[Commit], out: Optional[Console] = None) -> None:
    """Render the commit history, oldest first."""
    out = out or console
    if not commits:
        out.print("[yellow]No commits yet.[/yellow]")
        return

    table = _table("Commit History")
    table.add_column("Commit", style="cyan", no_wrap=True)
    table.add_column("Date", style="dim")
    table.add_column("Author", style="green")
    table.add_column("Message")
    table.add_column("Changes", style="yellow")

    for commit in commits:
        changes = "\n".join(
            f"{c.change_type.value}: {escape(c.file_path)}" for c in commit.changes
        )
        table.add_row(
            commit.short_id,
            commit.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            escape(commit.author),
            escape(commit.message),
            changes,
        )
    out.print(table)


def render_branches(branches: Dict[str, Branch], current: Optional[str], out: Optional[Console] = None) -> None:
    """Render the branch list, marking the current branch."""
    out = out or console
    table = _table("Branches")
    table.add_column("", no_wrap=True)
    table.add_column("Branch", style="cyan")
    table.add_column("Commits", justify="right")
    table.add_column("Head", style="dim")

    for name, branch in branches.items():
        head = branch.head_commit_id
        table.add_row(
            "*" if name == current else "",
            name,
            str(len(branch.commit_history)),
            head[:8] if head else "-",
        )
    out.print(table)
