"""
Logging Configuration Module

Usage:
    from field_notes.core.logging import setup_logging

    setup_logging(log_level="DEBUG")

    # Then in any module:
    import logging
    logger = logging.getLogger(__name__)
"""
import logging


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure console logging for the whole process.

    Args:
        log_level: Minimum level to log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # requests logs every connection at DEBUG through urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)
