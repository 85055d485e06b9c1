import logging
import sys

APP_LOGGER_NAME = "sales_reports"

log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def get_logger(name: str) -> logging.Logger:
    """Child logger of the application namespace, e.g. ``sales_reports.reports``."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def configure_logging(level: str = "INFO") -> logging.Logger:
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # configure_logging may run once per CLI invocation; keep a single console handler
    for handler in list(app_logger.handlers):
        if getattr(handler, "_sales_reports_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._sales_reports_console = True
    app_logger.addHandler(console_handler)
    return app_logger
