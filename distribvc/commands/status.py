"""
Handles the 'status' command for displaying repository status.

- Interactive terminal: tables by default
- Piped/redirected: one record per path
"""

import sys
import click

from ..cli_utils import standard_command, add_common_options, get_service, open_repository
from ..render import render_status


@click.command(name='status')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def status_handler(table, directory, verbose, quiet, format):
    """Show staged files and working tree changes.

    \b
    A file can be both staged and modified when it was edited
    again after staging.

    Examples:

    \b
        distribvc status
        distribvc status --no-table -f json
    """
    if table is None:
        table = sys.stdout.isatty()

    service = get_service()
    repository = open_repository(directory, service)
    status = service.status(repository)

    if table:
        render_status(status)
        return None

    return status.entries()
