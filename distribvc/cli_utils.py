"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from pathlib import Path
from typing import Any, Generator

from .config import load_config, setup_logging
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)
from .format_utils import FORMATS, format_output, get_format_from_env
from .services import Repository, RepositoryService


def get_service() -> RepositoryService:
    """RepositoryService configured from the user's config file."""
    return RepositoryService(config=load_config())


def open_repository(directory: str, service: RepositoryService) -> Repository:
    """Load the repository rooted at directory."""
    return service.load(Path(directory))


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Logging on stderr (level from config, DEBUG with --verbose)
    - Clean data output on stdout in jsonl/json/yaml
    - --quiet/-q to suppress data output
    - Consistent error handling and exit codes

    The wrapped command returns a generator, list or dict of records
    to print, or None if it handled its own output.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)
        output_format = kwargs.get('format', None) or get_format_from_env('jsonl')

        config = load_config()
        log_config = config.get('logging', {})
        setup_logging(
            'DEBUG' if verbose else log_config.get('level', 'WARNING'),
            log_config.get('format') or '%(levelname)s: %(message)s',
        )

        try:
            result = func(*args, **kwargs)

            if quiet:
                if isinstance(result, Generator):
                    for _ in result:
                        pass
            elif result is None:
                pass
            else:
                if isinstance(result, dict):
                    result = [result]
                for line in format_output(result, output_format):
                    click.echo(line)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            _report_error(e, e.exit_code, quiet)
        except Exception as e:
            _report_error(e, get_exit_code_for_exception(e), quiet)

    return wrapper


def _report_error(exc: Exception, exit_code: int, quiet: bool) -> None:
    click.echo(f"Error: {exc}", err=True)
    if not quiet:
        error_obj: dict[str, Any] = {
            "error": str(exc),
            "type": type(exc).__name__,
            "exit_code": exit_code,
        }
        if hasattr(exc, 'succeeded'):
            error_obj['succeeded'] = exc.succeeded
            error_obj['failed'] = exc.failed
        click.echo(json.dumps(error_obj, ensure_ascii=False))
    sys.exit(exit_code)


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug logging on stderr'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress data output'),
    'format': click.option('-f', '--format',
                           type=click.Choice(list(FORMATS)),
                           help='Output format (default: jsonl, or from DISTRIBVC_FORMAT env)'),
    'directory': click.option('-C', '--directory', default='.',
                              type=click.Path(file_okay=False),
                              help='Repository root (default: current directory)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('directory', 'verbose')
        def my_command(directory, verbose):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
