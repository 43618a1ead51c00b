"""Utilities to configure consistent logging across the function."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any


class AppwriteContextHandler(logging.Handler):
    """Forward log records to the Appwrite function context.

    Records below ERROR go to `context.log`, the rest to `context.error`, so
    they show up in the execution logs of the function.
    """

    def __init__(self, context: Any, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.context = context

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            if record.levelno >= logging.ERROR:
                self.context.error(msg)
            else:
                self.context.log(msg)
        except Exception:
            self.handleError(record)


def configure_logging(
    log_path: Path | None = None,
    level: int = logging.INFO,
    context: Any | None = None,
) -> None:
    """Configure root logging handlers and formatting.

    Args:
        log_path: Optional path to a file where logs will be written.
        level: Logging level (defaults to INFO).
        context: Optional Appwrite function context to forward records to.
            Replaces the stdout handler, since the runtime captures stdout
            into the same execution log.
    """
    handlers: list[logging.Handler] = []
    if context is not None:
        handlers.append(AppwriteContextHandler(context))
    else:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    # force: warm function containers reuse the process between executions
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
        force=True,
    )
