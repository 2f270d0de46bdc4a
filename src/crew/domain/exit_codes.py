"""Exit code taxonomy for worker processes."""

import signal as signals
import typing as t

from .exceptions import ProcessExitError

FATAL_SIGNAL_CODE: t.Final = 128

EXIT_CODE_DESCRIPTIONS: t.Final[dict[int, str]] = {
    1: "Uncaught Fatal Exception",
    3: "Parse Error",
    4: "Evaluation Failure",
    5: "Fatal Error",
    6: "Non-function Internal Exception Handler",
    7: "Exception Handler Run-Time Failure",
    8: "Uncaught Exception",
    9: "Invalid Argument",
    10: "Run-Time Failure",
    12: "Invalid Debug Argument",
    FATAL_SIGNAL_CODE: "Fatal Signal",
}

UNKNOWN_ERROR: t.Final = "Unknown Error"


def describe_exit_code(code: int) -> str:
    """Human readable description of an exit code."""
    return EXIT_CODE_DESCRIPTIONS.get(code, UNKNOWN_ERROR)


def signal_name(signum: int) -> str:
    """Name of a signal number, falling back to ``SIG<n>`` for unknown ones."""
    try:
        return signals.Signals(signum).name
    except ValueError:
        return f"SIG{signum}"


def split_returncode(returncode: int) -> tuple[int, str | None]:
    """Split an asyncio return code into (exit code, signal name).

    asyncio reports death-by-signal as a negative return code. Those are
    folded into the fatal signal code so they map through the taxonomy.
    """
    if returncode < 0:
        return FATAL_SIGNAL_CODE, signal_name(-returncode)
    return returncode, None


def exit_error(path: str, code: int, signal: str | None = None) -> ProcessExitError:
    """Build the error describing a non-zero exit of the process at ``path``."""
    message = f"{describe_exit_code(code)} File: {path}"
    if signal is not None:
        message = f"{message} (signal {signal})"
    return ProcessExitError(message, path=path, code=code, signal=signal)
