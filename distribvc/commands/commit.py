"""
Handles the 'commit' command.
"""

import click

from ..cli_utils import standard_command, add_common_options, get_service, open_repository


@click.command(name='commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--author', default=None, help='Author (default: general.author from config, else login name)')
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def commit_handler(message, author, directory, verbose, quiet, format):
    """Record the staged files as a new commit on the current branch.

    \b
    Prints "No changes to commit." and exits 0 when nothing is staged.

    Examples:

    \b
        distribvc commit -m "Add todo list"
        distribvc commit -m "Fix typo" --author alice
    """
    service = get_service()
    repository = open_repository(directory, service)
    commit = service.commit(repository, message, author)

    if commit is None:
        click.echo("No changes to commit.", err=True)
        return None

    click.echo(f"Commit created: {commit.id}", err=True)
    return commit.to_summary()
