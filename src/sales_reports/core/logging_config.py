import logging
import sys

from .config import LOG_LEVEL


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True  # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, allowed_namespaces=None) -> logging.Logger:
    """
    Attach a stdout handler to the 'sales_reports' logger.

    Modules use logging.getLogger(__name__), so their loggers
    ("sales_reports.features.reports.service", ...) inherit this handler and level.
    Calling this more than once does not stack handlers.
    """
    app_logger = logging.getLogger("sales_reports")
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        if getattr(handler, "_sales_reports_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._sales_reports_console = True
    if allowed_namespaces:
        console_handler.addFilter(NamespaceFilter(allowed_namespaces))
    app_logger.addHandler(console_handler)

    # ReportLab and the Firestore client are chatty at DEBUG
    logging.getLogger("reportlab").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)

    return app_logger


# To see SQL issued by Tortoise while debugging the Tortoise backend:
# logging.getLogger("tortoise.db_client").setLevel(logging.DEBUG)
