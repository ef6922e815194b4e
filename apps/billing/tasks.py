"""
Billing background tasks.

This module contains Django-Q2 tasks for the daily expiration scan.
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.core.cache import cache
from django_q.models import Schedule
from django_q.tasks import async_task, schedule

from .expiration_service import ExpirationScanner

logger = logging.getLogger(__name__)

# Task configuration
TASK_TIME_LIMIT = 1800  # 30 minutes
SCAN_LOCK_KEY = "check_expired_customers_lock"
SCAN_SCHEDULE_NAME = "billing-check-expired-customers"
SCAN_SCHEDULE_CRON = "0 1 * * *"  # 1 AM daily


def check_expired_customers_task() -> dict[str, Any]:
    """
    Suspend customers whose subscription expired.

    Runs daily. Overlapping runs are skipped via a cache lock so a slow
    panel never causes the same customer to be suspended twice in parallel.
    """
    logger.info("🔄 [ExpirationTask] Starting expired customer check")

    if cache.get(SCAN_LOCK_KEY):
        logger.info("⏭️ [ExpirationTask] Expiration scan already running, skipping")
        return {"success": True, "message": "Already running"}

    cache.set(SCAN_LOCK_KEY, True, TASK_TIME_LIMIT)
    try:
        report = ExpirationScanner().scan()
    finally:
        # Always release lock
        cache.delete(SCAN_LOCK_KEY)

    return {"success": True, **report.to_dict()}


def check_expired_customers_async() -> str:
    """Queue the expiration scan."""
    return async_task("apps.billing.tasks.check_expired_customers_task", timeout=TASK_TIME_LIMIT)


def schedule_expiration_scan() -> str:
    """Register the daily expiration scan schedule; returns 'created' or 'already_exists'."""
    if Schedule.objects.filter(name=SCAN_SCHEDULE_NAME).exists():
        return "already_exists"

    schedule(
        "apps.billing.tasks.check_expired_customers_task",
        schedule_type=Schedule.CRON,
        cron=SCAN_SCHEDULE_CRON,
        name=SCAN_SCHEDULE_NAME,
        cluster=settings.Q_CLUSTER.get("name"),
    )
    logger.info(f"✅ [ExpirationTask] Scheduled {SCAN_SCHEDULE_NAME} ({SCAN_SCHEDULE_CRON})")
    return "created"
