"""Loguru-based logging setup.

Loguru ships a single global logger. This module owns its sink configuration
so the rest of the package can simply call ``get_logger(__name__)`` and get a
logger bound to the calling module.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)
_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]} - {message}"

_configured = False


def configure_logger(
    level: LogLevel | str = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
    sink: t.Any = None,
) -> None:
    """Replace loguru's sinks with one configured for the environment.

    Development gets colourised output with full tracebacks, production gets
    one JSON object per line, testing gets plain text.

    Args:
        level: Minimum level to emit
        environment: Runtime environment deciding the output format
        sink: Where to write. Defaults to stderr so stdout stays free for
              command output.
    """
    global _configured

    level = LogLevel(level)
    sink = sink if sink is not None else sys.stderr

    logger.remove()
    logger.configure(extra={"name": "crew"})

    match environment:
        case Environment.DEVELOPMENT:
            logger.add(
                sink,
                level=level.value,
                format=_DEVELOPMENT_FORMAT,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )
        case Environment.PRODUCTION:
            logger.add(sink, level=level.value, serialize=True, backtrace=False)
        case Environment.TESTING:
            logger.add(sink, level=level.value, format=_PLAIN_FORMAT, colorize=False)

    _configured = True


def is_configured() -> bool:
    """True once sinks have been configured and not reset since."""
    return _configured


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return the global logger bound to ``name``.

    Configures logging with defaults on first use so library code works
    without an explicit ``setup_logging`` call.
    """
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Drop all sinks and forget the configuration.

    The next ``get_logger`` call configures defaults again. Used by tests to
    isolate logging state.
    """
    global _configured

    logger.remove()
    _configured = False
