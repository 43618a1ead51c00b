"""Appwrite function entry point.

The runtime calls `main(context)` on every scheduled execution. The response
body reports whether all cache tasks succeeded.
"""
from __future__ import annotations

import logging
from typing import Any

from cache_refresh.config import get_settings
from cache_refresh.db import get_client, get_databases
from cache_refresh.jobs import run_scheduled_tasks
from cache_refresh.logging_config import configure_logging

log = logging.getLogger(__name__)

SUCCESS_MESSAGE = "All scheduled tasks completed."


async def main(context: Any) -> Any:
    """Run every cache task and answer with a JSON success/failure body.

    A configuration error stops the run before any task starts; it and any
    task failure become a 500 response (writes already made are kept).
    """
    configure_logging(context=context)

    try:
        settings = get_settings()
        databases = get_databases(get_client(settings))

        log.info("Running all scheduled tasks...")
        await run_scheduled_tasks(databases, settings)
        log.info("All scheduled tasks completed successfully.")
        return context.res.json({"success": True, "message": SUCCESS_MESSAGE})
    except Exception as e:
        log.exception("A scheduled task failed: %s", e)
        return context.res.json({"success": False, "error": str(e)}, 500)
