"""Logging configuration for seed-farm.

Logs always go to stderr: stdout belongs to the dashboard (``watch``,
``status``) and to command results.
"""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Third-party loggers that flood stderr with RPC payloads below WARNING
NOISY_LOGGERS = ("web3", "urllib3", "asyncio")

PACKAGE_PREFIX = "seed_farm."


class FarmFormatter(logging.Formatter):
    """Formatter that drops the package prefix and colors the level name.

    ``seed_farm.sync.poller`` is shown as ``sync.poller``. ANSI colors are
    only emitted when ``use_color`` is set, so redirected logs stay plain.
    """

    COLORS = {
        TRACE: "\033[90m",
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        name, levelname = record.name, record.levelname
        record.name = name.removeprefix(PACKAGE_PREFIX)
        color = self.COLORS.get(record.levelno)
        if self.use_color and color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.name, record.levelname = name, levelname


def resolve_level(name: str) -> int:
    """Map a level name (case-insensitive) to its numeric value.

    Raises:
        ValueError: If ``name`` is not one of ``LEVELS``.
    """
    try:
        return LEVELS[name.upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {name!r}; expected one of {', '.join(LEVELS)}"
        ) from None


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logging on stderr at ``log_level``.

    Below TRACE the web3/urllib3/asyncio loggers are held at WARNING;
    TRACE lets every RPC request and response through.
    """
    level = resolve_level(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(FarmFormatter(use_color=sys.stderr.isatty()))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    noisy_level = TRACE if level == TRACE else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Usually __name__ of the calling module

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
