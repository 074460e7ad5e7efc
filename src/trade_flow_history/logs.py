import os
import sys

from loguru import logger

from .config import LogConfig

_LOGGER_CONFIGURED = False


def configure(config=None, console=True):
    """Configure the global loguru logger once per process.

    Adds a daily file sink under ``config.dir`` and, optionally, a stderr
    sink. Later calls are ignored.

    Args:
        config (LogConfig | None): Sink settings. Defaults to ``LogConfig()``.
        console (bool): Also log to stderr.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return
    config = config or LogConfig()
    os.makedirs(config.dir, exist_ok=True)

    logger.remove()
    logger.add(
        sink=f"{config.dir}/{{time:YYYY-MM-DD}}.log",
        rotation=config.rotation,
        retention=config.retention,
        level=config.level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {thread.name} | {message}",
        enqueue=True,  # simulation and UI threads share the sink
        backtrace=True,
        diagnose=False,
    )
    if console:
        logger.add(sys.stderr, level=config.level)
    _LOGGER_CONFIGURED = True
    logger.info("Logger initialized.")
