"""Logging setup shared by the CLI and the web API.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by whichever entry point starts first. The level comes
from ``BLOGWIKI_LOG_LEVEL`` (default ``INFO``). At ``DEBUG`` the resolver and
suggestion engine report query sizes; skipped import files are ``WARNING``.
"""

import logging
import os
import sys

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """Attach a stderr handler to the ``blogwiki`` logger if it has none."""
    logger = logging.getLogger("blogwiki")
    if logger.handlers:
        return

    level = getattr(logging, os.environ.get("BLOGWIKI_LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
