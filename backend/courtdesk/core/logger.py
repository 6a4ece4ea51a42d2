"""
Process-wide logging setup.

Modules either import ``logger`` from here or call ``logging.getLogger(__name__)``;
both end up on the same root handler configured by ``configure_logging``.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("courtdesk")


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not any(getattr(h, "_courtdesk", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._courtdesk = True
        root.addHandler(handler)
    root.setLevel(level.upper())
    # uvicorn installs its own access log; ours comes from CorrelationMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
