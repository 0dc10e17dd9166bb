"""Logging setup.

Modules obtain their logger with ``logging.getLogger(__name__)``; this
module only configures the root handler once at process start.
"""

import logging
from typing import Optional

from lighthouse.core.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from settings (or an explicit level)."""
    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    logging.getLogger("lighthouse").setLevel(resolved)
    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
