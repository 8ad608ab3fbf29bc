"""
Handles the 'log' command.
"""

import sys
import click

from ..cli_utils import standard_command, add_common_options, get_service, open_repository
from ..render import render_log


@click.command(name='log')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def log_handler(table, directory, verbose, quiet, format):
    """Show the commits of the current branch, oldest first.

    Commits whose records cannot be read are skipped with a warning.
    """
    if table is None:
        table = sys.stdout.isatty()

    service = get_service()
    repository = open_repository(directory, service)
    commits = service.log(repository)

    if table:
        render_log(commits)
        return None

    return (commit.to_summary() for commit in commits)
