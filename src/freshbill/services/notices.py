from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

# (message, severity) where severity is "information", "warning" or "error",
# matching Textual's App.notify severities.
Notify = Callable[[str, str], None]


def log_notify(message: str, severity: str = "information") -> None:
    """Fallback notifier: route notices to the log when no UI is attached."""
    level = {"error": logging.ERROR, "warning": logging.WARNING}.get(severity, logging.INFO)
    logger.log(level, message)
