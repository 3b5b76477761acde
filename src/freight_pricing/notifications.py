from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

SUCCESS_TITLE = "Success"
ERROR_TITLE = "Error"


class Notifier(Protocol):
    def notify(self, title: str, description: str, *, variant: str = "default") -> None:
        ...


class LoggingNotifier:
    """Notifier that reports outcomes to the application log."""

    def notify(self, title: str, description: str, *, variant: str = "default") -> None:
        level = logging.WARNING if variant == "destructive" else logging.INFO
        logger.log(level, description, extra={"title": title, "variant": variant})


__all__ = ["ERROR_TITLE", "LoggingNotifier", "Notifier", "SUCCESS_TITLE"]
