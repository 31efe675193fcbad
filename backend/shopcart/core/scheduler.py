"""Background scheduling of the daily refresh-token sweep."""

from __future__ import annotations

import atexit
import logging

from apscheduler.schedulers.background import BackgroundScheduler  # type: ignore[import-untyped]
from apscheduler.triggers.cron import CronTrigger  # type: ignore[import-untyped]
from flask import Flask

log = logging.getLogger(__name__)

SWEEP_JOB_ID = "refresh_token_sweep"
EXTENSION_KEY = "shopcart.scheduler"


def build_scheduler(app: Flask) -> BackgroundScheduler:
    """
    Create a UTC scheduler with the sweep job registered (not started).

    The job runs once a day at ``TOKEN_SWEEP_HOUR:TOKEN_SWEEP_MINUTE``; a run
    that overlaps or was missed is coalesced into one.
    """
    from shopcart.core.container import get_container

    sweeper = get_container(app).sweeper
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        sweeper.sweep,
        CronTrigger(
            hour=int(app.config.get("TOKEN_SWEEP_HOUR", 2)),
            minute=int(app.config.get("TOKEN_SWEEP_MINUTE", 0)),
            timezone="UTC",
        ),
        id=SWEEP_JOB_ID,
        name="Delete expired refresh tokens",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


def init_app(app: Flask) -> None:
    """Start the sweep scheduler unless disabled or testing."""
    if app.testing or not app.config.get("TOKEN_SWEEP_ENABLED", True):
        log.info("refresh_tokens.sweep.scheduler_disabled")
        return

    scheduler = build_scheduler(app)
    scheduler.start()
    app.extensions[EXTENSION_KEY] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False))
    log.info(
        "refresh_tokens.sweep.scheduler_started hour=%s minute=%s",
        app.config.get("TOKEN_SWEEP_HOUR", 2),
        app.config.get("TOKEN_SWEEP_MINUTE", 0),
    )
