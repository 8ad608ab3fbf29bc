"""
Exit codes for distribvc commands.

0-2 keep their usual shell meaning; the VCS error taxonomy uses the
sysexits range (64-78).
"""
from .errors import (
    AlreadyExistsError, InvalidOperationError, IOFailureError, NotFoundError,
)

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2          # click reports bad arguments with this code

ALREADY_EXISTS = 64      # repository or branch exists
NOT_FOUND = 65           # no repository, commit or branch
INVALID_OPERATION = 66   # not allowed in the current state
DATA_ERROR = 70          # bad value, e.g. an invalid branch name
PARTIAL_SUCCESS = 71     # add: some paths failed
IO_ERROR = 74
INTERRUPTED = 130        # SIGINT

EXCEPTION_EXIT_CODES = {
    AlreadyExistsError: ALREADY_EXISTS,
    NotFoundError: NOT_FOUND,
    InvalidOperationError: INVALID_OPERATION,
    IOFailureError: IO_ERROR,
    FileNotFoundError: NOT_FOUND,
    OSError: IO_ERROR,
    ValueError: DATA_ERROR,
    KeyboardInterrupt: INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Exit code for exc, using the nearest mapped class in its MRO."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_EXIT_CODES:
            return EXCEPTION_EXIT_CODES[cls]
    return GENERAL_ERROR


class CommandError(Exception):
    """Raised by a command handler to exit with a specific code."""

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class PartialSuccessError(CommandError):
    """Some paths were staged and some failed."""

    def __init__(self, message: str, succeeded: int = 0, failed: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.succeeded = succeeded
        self.failed = failed
