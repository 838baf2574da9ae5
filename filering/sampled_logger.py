"""Sampled logger for high-frequency log messages.

Block rollovers happen once every few kilobytes, so both channel ends log them
only at configurable intervals.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


def make_sampled_logger(
    log_format: str,
    log_interval: int = 1000,
    target_logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> Callable[..., None]:
    """Create a sampled logger that logs the first event and every Nth one.

    Args:
        log_format: Format string for the log message. First placeholder receives
                    the event number, remaining placeholders receive format_args.
        log_interval: Log every Nth event (default 1000)
        target_logger: Logger instance to use (default: module logger)
        level: Log level to use (default: DEBUG)

    Returns:
        A function: (*format_args) -> None
    """
    event_counter = 0
    _logger = target_logger or logger

    def log_sampled(*format_args: object) -> None:
        nonlocal event_counter

        event_counter += 1
        should_log = event_counter == 1 or event_counter % log_interval == 0

        if should_log:
            _logger.log(level, log_format, event_counter, *format_args)

    return log_sampled
