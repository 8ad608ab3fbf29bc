"""
Handles the 'init' command for creating a repository.
"""

import click

from ..cli_utils import standard_command, add_common_options, get_service


@click.command(name='init')
@click.argument('path', default='.', required=False, type=click.Path(file_okay=False))
@add_common_options('verbose', 'quiet', 'format')
@standard_command
def init_handler(path, verbose, quiet, format):
    """Create an empty repository in PATH (default: current directory).

    \b
    Creates the metadata directory and a default ignore file.
    Fails if a repository already exists there.

    Examples:

    \b
        distribvc init
        distribvc init ~/projects/notes
    """
    repository = get_service().init(path)
    if not quiet:
        click.echo(f"Initialized empty repository in {repository.repo_path}", err=True)
    return repository.to_dict()
