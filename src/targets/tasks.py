"""Celery tasks for the sales targets module."""
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def refresh_target_achievement(self, *, target_id: str):
    """Recompute and store the achieved amount of one target."""
    from targets.services import SalesTargetError, get_sales_target, refresh_achieved_amount

    try:
        target = get_sales_target(target_id)
    except SalesTargetError as exc:
        logger.exception("refresh_target_achievement failed: %s", exc)
        raise self.retry(exc=exc)

    if target is None or not target.is_active:
        logger.debug("Skipping achievement refresh for target=%s", target_id)
        return None

    result = refresh_achieved_amount(target)
    if not result.success:
        logger.warning("Achievement refresh for target=%s failed: %s", target_id, result.error)
        return None

    logger.info(
        "Refreshed achievement target=%s period=%s amount=%s",
        target_id,
        target.target_period,
        result.data.achieved_amount,
    )
    return str(result.data.achieved_amount)


@shared_task
def refresh_current_achievements():
    """
    Run every hour (Celery Beat).
    Refresh stored achievements of active targets whose period
    contains today.
    """
    from targets.services import refresh_current_achievements as refresh

    count = refresh()
    logger.info("Refreshed achievements for %d current targets", count)
    return count
