"""
Handles the 'add' command for staging files.

Streams one record per file considered, then a summary record.
"""

import click

from ..cli_utils import standard_command, add_common_options, get_service, open_repository
from ..exit_codes import PartialSuccessError
from ..format_utils import format_output, get_format_from_env


@click.command(name='add')
@click.argument('paths', nargs=-1, required=True)
@add_common_options('directory', 'verbose', 'quiet', 'format')
@standard_command
def add_handler(paths, directory, verbose, quiet, format):
    """Stage PATHS for the next commit.

    \b
    Paths are relative to the repository root or absolute.
    Directories are staged recursively. Ignored, missing and
    out-of-tree paths are skipped.

    Examples:

    \b
        distribvc add README.md src
        distribvc add -C ~/projects/notes todo.txt
    """
    service = get_service()
    repository = open_repository(directory, service)
    summary = service.stage(repository, paths)

    records = [detail.to_dict() for detail in summary.details]
    records.append(summary.to_dict())

    if not summary.success:
        # Per-path records go out before the error so failures are visible
        if not quiet:
            for line in format_output(records, format or get_format_from_env('jsonl')):
                click.echo(line)
        raise PartialSuccessError(
            f"{summary.failed} file(s) could not be staged",
            succeeded=summary.staged,
            failed=summary.failed,
        )

    return records
