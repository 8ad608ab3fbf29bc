"""
Branch commands: list/create branches and switch the current one.

Switching only moves the current-branch pointer. The working tree and
the staging area are left as they are.
"""

import sys
import click

from ..cli_utils import standard_command, add_common_options, get_service, open_repository
from ..render import render_branches


def _branch_record(name, branch, current):
    return {
        'name': name,
        'current': name == current,
        'commits': len(branch.commit_history),
        'head': branch.head_commit_id,
    }


@click.command(name='branch')
@click.argument('name', required=False)
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def branch_handler(name, table, directory, verbose, quiet, format):
    """List branches, or create branch NAME.

    New branches start with an empty history.

    Examples:

    \b
        distribvc branch
        distribvc branch experiment
    """
    service = get_service()
    repository = open_repository(directory, service)

    if name:
        branch = service.create_branch(repository, name)
        return _branch_record(name, branch, repository.ledger.current_name)

    if table is None:
        table = sys.stdout.isatty()

    branches = repository.branches
    current = repository.ledger.current_name
    if table:
        render_branches(branches, current)
        return None
    return [_branch_record(n, b, current) for n, b in branches.items()]


@click.command(name='switch')
@click.argument('name')
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def switch_handler(name, directory, verbose, quiet, format):
    """Make NAME the current branch."""
    service = get_service()
    repository = open_repository(directory, service)
    branch = service.switch_branch(repository, name)
    click.echo(f"Switched to branch {name}", err=True)
    return _branch_record(name, branch, name)
