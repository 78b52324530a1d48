import logging
import sys
from typing import Any

from loguru import logger

from minietl.config import get_settings

# Access-log paths hit on every poll of the dashboard or a load balancer
QUIET_PATHS = ("/health", "/api/etl ")

DEBUG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level> {extra}"
)
PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} | {message} {extra}"

STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "aiohttp")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (uvicorn, aiohttp) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _drop_poll_noise(record: dict[str, Any]) -> bool:
    """Hide access lines for polled endpoints unless they are DEBUG."""
    message = record.get("message", "")
    if any(path in message for path in QUIET_PATHS):
        return record["level"].no <= logger.level("DEBUG").no
    return True


def setup_logging() -> None:
    """Configure loguru and route stdlib loggers through it."""
    settings = get_settings()
    logger.remove()

    if settings.debug:
        logger.add(sys.stderr, level="DEBUG", format=DEBUG_FORMAT, backtrace=True, diagnose=True)
    else:
        logger.add(
            sys.stderr,
            level="INFO",
            format=PLAIN_FORMAT,
            filter=_drop_poll_noise,
            backtrace=True,
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in STDLIB_LOGGERS:
        logging.getLogger(name).handlers = [InterceptHandler()]


def get_logger(name: str) -> Any:
    """Get a logger bound to a module name."""
    return logger.bind(name=name)
