"""Signals: announce target changes and refresh achievement snapshots."""
from __future__ import annotations

import logging

from django.db import transaction
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

TARGET_LIST_PATH = "/management/sales-target"
REVENUE_ANALYTICS_PATH = "/management/finance/revenue-analytics"

# kwargs: target_id, action ("created" | "updated" | "deleted" | "toggled"), paths
sales_targets_changed = Signal()


def target_edit_path(target_id) -> str:
    return f"{TARGET_LIST_PATH}/edit/{target_id}"


def notify_targets_changed(*, target_id, action: str, paths) -> None:
    """Tell listeners which screens show stale target data."""
    from targets.models import SalesTarget

    sales_targets_changed.send(
        sender=SalesTarget,
        target_id=target_id,
        action=action,
        paths=list(paths),
    )


@receiver(sales_targets_changed)
def queue_achievement_refresh(sender, target_id, action, **kwargs):
    if action == "deleted":
        return

    def _dispatch() -> None:
        try:
            from targets.tasks import refresh_target_achievement

            refresh_target_achievement.delay(target_id=str(target_id))
        except Exception as exc:
            logger.warning("achievement refresh dispatch failed: %s", exc, exc_info=True)

    # Worker must read the committed row.
    transaction.on_commit(_dispatch)
