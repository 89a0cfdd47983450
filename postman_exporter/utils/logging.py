import logging
import sys

import structlog

LOGGER_NAMESPACE = "postman_exporter"


def get_logger(name: str | None = None):
    """
    Get a logger with postman_exporter prefix.

    Args:
        name: Module name (typically __name__). If None, returns root postman_exporter logger.

    Returns:
        A structlog logger with postman_exporter prefix.
    """
    if name is None:
        return structlog.get_logger(LOGGER_NAMESPACE)
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return structlog.get_logger(name)
    return structlog.get_logger(f"{LOGGER_NAMESPACE}.{name}")


def setup_third_party_logging(debug: bool = False):
    """
    Configure third-party library logging levels.

    Args:
        debug: If True, leave library loggers alone (urllib3 connection logs etc.).
               If False, set third-party loggers to WARNING level.
    """

    if debug:
        return

    for log_name, _ in logging.Logger.manager.loggerDict.items():
        if log_name.startswith(LOGGER_NAMESPACE):
            continue
        logging.getLogger(log_name).setLevel(logging.WARNING)


def format_context(logger, method_name, event_dict):
    """Format bound context into the event message"""
    excluded = {"level", "timestamp", "logger", "stack", "exc_info", "event"}
    context = " ".join(f"{k}={v}" for k, v in event_dict.items() if k not in excluded)

    event = event_dict.get("event", "")
    event_dict["event"] = f"{event} [{context}]" if context else event

    return event_dict


def setup_logging(debug: bool = False, log_level: str = "INFO") -> None:
    """
    Setup logging for the application.

    Args:
        debug: Log request/response detail and keep third-party loggers verbose.
        log_level: Level for the postman_exporter namespace when debug is off.
    """
    root_level = "DEBUG" if debug else "WARNING"
    logging.basicConfig(
        stream=sys.stderr,
        level=root_level,
        format="%(levelname)s:%(name)s: %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            format_context,
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    setup_third_party_logging(debug)

    logging.getLogger(LOGGER_NAMESPACE).setLevel("DEBUG" if debug else log_level.upper())
