"""Target period keys: formatting, parsing and calendar ranges.

A sales target is measured against a calendar interval identified by a
short string stored on the row:

* MONTHLY   -> ``"YYYY-MM"``   e.g. ``"2025-01"``
* QUARTERLY -> ``"YYYY-Qn"``   e.g. ``"2025-Q2"``
* YEARLY    -> ``"YYYY"``      e.g. ``"2025"``

Inside the application a period is one of three frozen value objects
(:class:`MonthlyPeriod`, :class:`QuarterlyPeriod`, :class:`YearlyPeriod`).
Strings are produced with ``str(period)`` and read back with
:func:`parse_period`; nothing else should slice period strings by hand.
"""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Optional, Tuple, Union

from django.db import models
from django.utils import timezone


class TargetType(models.TextChoices):
    MONTHLY = "MONTHLY", "Bulanan"
    QUARTERLY = "QUARTERLY", "Kuartalan"
    YEARLY = "YEARLY", "Tahunan"


class InvalidPeriodError(ValueError):
    """Raised when a period string cannot be read for its target type."""


def _check_year(year: int) -> None:
    if not 1 <= year <= 9999:
        raise InvalidPeriodError(f"Tahun tidak valid: {year}")


class _PeriodMixin:
    start: date
    end: date

    def date_range(self) -> Tuple[date, date]:
        """Inclusive ``(first_day, last_day)`` of the period."""
        return self.start, self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class MonthlyPeriod(_PeriodMixin):
    year: int
    month: int

    target_type: ClassVar[str] = TargetType.MONTHLY

    def __post_init__(self):
        _check_year(self.year)
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"Bulan tidak valid: {self.month}")

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        last_day = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, last_day)


@dataclass(frozen=True)
class QuarterlyPeriod(_PeriodMixin):
    year: int
    quarter: int

    target_type: ClassVar[str] = TargetType.QUARTERLY

    def __post_init__(self):
        _check_year(self.year)
        if not 1 <= self.quarter <= 4:
            raise InvalidPeriodError(f"Kuartal tidak valid: Q{self.quarter}")

    def __str__(self) -> str:
        return f"{self.year:04d}-Q{self.quarter}"

    @property
    def first_month(self) -> int:
        return (self.quarter - 1) * 3 + 1

    @property
    def start(self) -> date:
        return date(self.year, self.first_month, 1)

    @property
    def end(self) -> date:
        last_month = self.first_month + 2
        return date(self.year, last_month, calendar.monthrange(self.year, last_month)[1])


@dataclass(frozen=True)
class YearlyPeriod(_PeriodMixin):
    year: int

    target_type: ClassVar[str] = TargetType.YEARLY

    def __post_init__(self):
        _check_year(self.year)

    def __str__(self) -> str:
        return f"{self.year:04d}"

    @property
    def start(self) -> date:
        return date(self.year, 1, 1)

    @property
    def end(self) -> date:
        return date(self.year, 12, 31)


Period = Union[MonthlyPeriod, QuarterlyPeriod, YearlyPeriod]

_MONTHLY_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_QUARTERLY_RE = re.compile(r"^(\d{4})-[Qq](\d)$")
_YEARLY_RE = re.compile(r"^(\d{4})$")


def _as_date(day) -> date:
    if day is None:
        return timezone.localdate()
    if isinstance(day, datetime):
        if timezone.is_aware(day):
            return timezone.localdate(day)
        return day.date()
    return day


def period_for_date(target_type: str, day=None) -> Period:
    """Return the period of ``target_type`` that contains ``day``.

    Unknown target types fall back to a monthly period.
    """
    day = _as_date(day)
    if target_type == TargetType.QUARTERLY:
        return QuarterlyPeriod(day.year, (day.month - 1) // 3 + 1)
    if target_type == TargetType.YEARLY:
        return YearlyPeriod(day.year)
    return MonthlyPeriod(day.year, day.month)


def generate_target_period(target_type: str, day=None) -> str:
    """Canonical period string for ``day`` (today when omitted)."""
    return str(period_for_date(target_type, day))


def parse_period(value: str, target_type: str) -> Period:
    """Parse a stored period string according to its target type.

    Raises :class:`InvalidPeriodError` when the text does not match the
    type's format, when the month/quarter is out of range, or when the
    target type itself is unknown.
    """
    text = (value or "").strip()

    if target_type == TargetType.MONTHLY:
        match = _MONTHLY_RE.match(text)
        if match:
            return MonthlyPeriod(int(match.group(1)), int(match.group(2)))
    elif target_type == TargetType.QUARTERLY:
        match = _QUARTERLY_RE.match(text)
        if match:
            return QuarterlyPeriod(int(match.group(1)), int(match.group(2)))
    elif target_type == TargetType.YEARLY:
        match = _YEARLY_RE.match(text)
        if match:
            return YearlyPeriod(int(match.group(1)))
    else:
        raise InvalidPeriodError(f"Tipe target tidak dikenal: {target_type}")

    raise InvalidPeriodError(
        f"Format periode '{value}' tidak sesuai dengan tipe {target_type}."
    )


def period_date_range(value: str, target_type: str) -> Optional[Tuple[date, date]]:
    """Inclusive ``(start, end)`` dates for a period string.

    Returns ``None`` for an unknown target type; malformed strings raise
    :class:`InvalidPeriodError`.
    """
    if target_type not in TargetType.values:
        return None
    return parse_period(value, target_type).date_range()


def normalize_period(value: str, target_type: str) -> str:
    """Re-serialise a period string in canonical form (``2025-1`` -> ``2025-01``)."""
    return str(parse_period(value, target_type))
