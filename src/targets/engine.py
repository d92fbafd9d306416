"""Achievement engine: paid-invoice revenue per seller per target period.

The achieved amount of a target is never maintained incrementally. It is
recomputed from raw Invoice rows every time it is asked for:

    SUM(invoice.total_amount)
    WHERE invoice.status = PAID
      AND invoice.invoice_date (local day) within the period, inclusive
      AND invoice.order.sales_id = <seller>

``compute`` keeps failures visible through :class:`AchievementResult`;
``achieved_amount`` is the dashboard-facing variant that collapses any
failure to zero.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

from django.db import transaction
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from targets.periods import InvalidPeriodError, period_date_range

if TYPE_CHECKING:
    from targets.models import SalesTarget

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class AchievementResult:
    """Outcome of one aggregation: an amount, or the reason there is none."""

    amount: Decimal = ZERO
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def achievement_percentage(achieved, target_amount) -> Decimal:
    """``achieved / target * 100`` rounded to cents; 0 when the target is 0."""
    target_amount = Decimal(target_amount or 0)
    if target_amount <= 0:
        return Decimal("0.00")
    percentage = Decimal(achieved or 0) / target_amount * 100
    return percentage.quantize(CENT, rounding=ROUND_HALF_UP)


class AchievementEngine:
    """Sum paid invoice totals attributable to a seller over a period."""

    def compute(self, user_id, target_period: str, target_type: str) -> AchievementResult:
        from sales.models import Invoice

        try:
            date_range = period_date_range(target_period, target_type)
        except InvalidPeriodError as exc:
            return AchievementResult(error=str(exc))
        if date_range is None:
            return AchievementResult(error=f"Tipe target tidak dikenal: {target_type}")

        start, end = date_range
        try:
            paid = Invoice.objects.filter(
                status=Invoice.Status.PAID,
                invoice_date__date__gte=start,
                invoice_date__date__lte=end,
                order__sales_id=user_id,
            )
            # Savepoint keeps a failed read from aborting the caller's transaction.
            with transaction.atomic():
                total = paid.aggregate(
                    total=Coalesce(
                        Sum("total_amount"),
                        Value(ZERO, output_field=DecimalField(max_digits=14, decimal_places=2)),
                    )
                )["total"]
        except Exception as exc:
            # Dashboard reads must not fail on a query error.
            return AchievementResult(error=f"{type(exc).__name__}: {exc}")

        return AchievementResult(amount=Decimal(total))

    def achieved_amount(self, user_id, target_period: str, target_type: str) -> Decimal:
        result = self.compute(user_id, target_period, target_type)
        if not result.ok:
            logger.warning(
                "Achieved amount fell back to 0 for user=%s period=%s type=%s: %s",
                user_id,
                target_period,
                target_type,
                result.error,
            )
            return ZERO
        return result.amount

    def progress(self, target: "SalesTarget") -> dict:
        """Chart row for one stored target."""
        achieved = self.achieved_amount(
            target.user_id,
            target.target_period,
            target.target_type,
        )
        return {
            "id": target.id,
            "period": target.target_period,
            "target": target.target_amount,
            "achieved": achieved,
            "percentage": achievement_percentage(achieved, target.target_amount),
        }
