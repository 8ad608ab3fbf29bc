#!/usr/bin/env python3

import click

from distribvc.commands.init import init_handler
from distribvc.commands.add import add_handler
from distribvc.commands.commit import commit_handler
from distribvc.commands.status import status_handler
from distribvc.commands.log import log_handler
from distribvc.commands.branch import branch_handler, switch_handler


@click.group()
@click.version_option(package_name='distribvc')
def cli():
    """distribvc - Local snapshot-based version control.

    Stage files, commit them as immutable snapshots on a branch, and
    inspect status and history. Data goes to stdout (JSON lines when
    piped, tables on a terminal); messages go to stderr.
    """
    pass


cli.add_command(init_handler)
cli.add_command(add_handler)
cli.add_command(commit_handler)
cli.add_command(status_handler)
cli.add_command(log_handler)
cli.add_command(branch_handler)
cli.add_command(switch_handler)


def main():
    cli()

if __name__ == "__main__":
    main()
