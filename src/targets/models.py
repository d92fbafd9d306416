"""Models for the sales targets module."""
from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel
from targets.periods import InvalidPeriodError, TargetType, parse_period


class SalesTarget(TimeStampedModel):
    """Revenue commitment of one user over one calendar period.

    ``achieved_amount`` is a stored snapshot: it only moves when something
    explicitly recomputes or overwrites it.
    """

    TargetType = TargetType

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sales_targets",
        verbose_name="user",
    )
    target_type = models.CharField(
        "tipe target",
        max_length=20,
        choices=TargetType.choices,
        default=TargetType.MONTHLY,
    )
    target_period = models.CharField("periode", max_length=10)  # "2025-01", "2025-Q1", "2025"
    target_amount = models.DecimalField(
        "target",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    achieved_amount = models.DecimalField(
        "tercapai",
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
    )
    is_active = models.BooleanField("aktif", default=True, db_index=True)

    class Meta:
        verbose_name = "target penjualan"
        verbose_name_plural = "target penjualan"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "target_period"],
                name="uniq_sales_target_user_period",
            ),
        ]
        indexes = [
            models.Index(fields=["target_type", "target_period"], name="target_type_period_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.target_period}"

    def clean(self) -> None:
        try:
            parse_period(self.target_period, self.target_type)
        except InvalidPeriodError as exc:
            raise ValidationError({"target_period": str(exc)})

    @property
    def period(self):
        """Parsed period value object for this row."""
        return parse_period(self.target_period, self.target_type)
