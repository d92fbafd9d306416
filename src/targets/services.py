"""Business-logic / service functions for sales targets.

Two error conventions live side by side here:

* Mutations (create, update, delete, toggle, achieved amount) never raise
  for expected failures. They return a :class:`ServiceResult` carrying
  either the affected target or a user-facing message.
* Reads used by management pages (``list_sales_targets``,
  ``get_sales_users``, ``get_targets_for_chart``) raise
  :class:`SalesTargetError` when the database fails. Lookups used by
  dashboards (``get_user_sales_target``, ``get_current_month_target``)
  return ``None`` instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from targets.engine import AchievementEngine
from targets.models import SalesTarget
from targets.periods import InvalidPeriodError, TargetType, generate_target_period, normalize_period
from targets.signals import (
    REVENUE_ANALYTICS_PATH,
    TARGET_LIST_PATH,
    notify_targets_changed,
    target_edit_path,
)

User = get_user_model()
logger = logging.getLogger("indana")

USER_NOT_FOUND = "User tidak ditemukan. Silakan login ulang atau hubungi administrator."
INVALID_USER = "User tidak valid. Silakan pilih user yang tersedia."
DUPLICATE_ON_CREATE = "Target untuk periode ini sudah ada. Silakan edit target yang sudah ada."
DUPLICATE_ON_UPDATE = "Target untuk periode ini sudah ada untuk user tersebut."
NEGATIVE_AMOUNT = "Target amount tidak boleh negatif."
TARGET_NOT_FOUND = "Sales target not found"
NO_ACTIVE_TARGET = "No active target found for this period"
INVALID_AMOUNT = "Nominal pencapaian tidak valid."


class SalesTargetError(RuntimeError):
    """A read that management pages depend on could not be served."""


@dataclass
class ServiceResult:
    """Outcome of a mutation.

    ``code`` is one of ``""`` (success), ``"invalid"``, ``"not_found"``,
    ``"conflict"`` or ``"error"`` and lets callers pick an HTTP status
    without parsing ``error``.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    code: str = ""

    @classmethod
    def ok(cls, data=None) -> "ServiceResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str = "error") -> "ServiceResult":
        return cls(success=False, error=error, code=code)

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


@dataclass
class SalesTargetData:
    """Form payload for creating or replacing a target."""

    user_id: Any
    target_type: str
    target_period: str
    target_amount: Decimal
    is_active: bool = True

    @classmethod
    def from_target(cls, target: SalesTarget) -> "SalesTargetData":
        return cls(
            user_id=target.user_id,
            target_type=target.target_type,
            target_period=target.target_period,
            target_amount=target.target_amount,
            is_active=target.is_active,
        )

    def merged(self, **changes) -> "SalesTargetData":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _lookup(queryset, pk):
    """Fetch by primary key; malformed ids count as missing."""
    try:
        return queryset.filter(pk=pk).first()
    except (ValidationError, ValueError):
        return None


def _validate(data: SalesTargetData) -> tuple[Optional[str], Optional[ServiceResult]]:
    """Return ``(canonical_period, None)`` or ``(None, failure)``."""
    if data.target_type not in TargetType.values:
        return None, ServiceResult.fail(
            f"Tipe target tidak dikenal: {data.target_type}", code="invalid"
        )
    try:
        period = normalize_period(data.target_period, data.target_type)
    except InvalidPeriodError as exc:
        return None, ServiceResult.fail(str(exc), code="invalid")
    if Decimal(data.target_amount) < 0:
        return None, ServiceResult.fail(NEGATIVE_AMOUNT, code="invalid")
    return period, None


def _integrity_failure(exc: IntegrityError, duplicate_message: str) -> ServiceResult:
    text = str(exc).lower()
    if "foreign key" in text:
        return ServiceResult.fail(INVALID_USER, code="invalid")
    return ServiceResult.fail(duplicate_message, code="conflict")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_sales_targets():
    """All targets with their owning user, newest first.

    Raises
    ------
    SalesTargetError
        If the query fails.
    """
    try:
        return list(SalesTarget.objects.select_related("user").order_by("-created_at"))
    except DatabaseError as exc:
        logger.exception("Error fetching sales targets")
        raise SalesTargetError("Failed to fetch sales targets") from exc


def get_sales_target(target_id) -> Optional[SalesTarget]:
    """Single target with its user, or ``None`` when it does not exist."""
    try:
        return _lookup(SalesTarget.objects.select_related("user"), target_id)
    except DatabaseError as exc:
        logger.exception("Error fetching sales target %s", target_id)
        raise SalesTargetError("Failed to fetch sales target") from exc


def get_user_sales_target(user_id, target_period: str) -> Optional[SalesTarget]:
    """The user's active target for ``target_period``; ``None`` on any failure."""
    try:
        return SalesTarget.objects.filter(
            user_id=user_id,
            target_period=target_period,
            is_active=True,
        ).first()
    except (DatabaseError, ValidationError, ValueError) as exc:
        logger.warning(
            "Error fetching target for user=%s period=%s: %s", user_id, target_period, exc
        )
        return None


def get_current_month_target(user_id, today=None) -> Optional[SalesTarget]:
    period = generate_target_period(TargetType.MONTHLY, today)
    return get_user_sales_target(user_id, period)


def get_sales_users() -> list[dict]:
    """Active users with the SALES role, for target assignment dropdowns."""
    try:
        users = list(
            User.objects.filter(role=User.Role.SALES, is_active=True)
            .order_by("first_name", "last_name")
            .only("id", "first_name", "last_name", "email")
        )
    except DatabaseError as exc:
        logger.exception("Error fetching sales users")
        raise SalesTargetError("Failed to fetch sales users") from exc
    return [
        {"id": user.id, "name": user.get_full_name() or user.email, "email": user.email}
        for user in users
    ]


def get_targets_for_chart(
    user_id=None,
    target_type: str = TargetType.MONTHLY,
    engine: Optional[AchievementEngine] = None,
) -> list[dict]:
    """Target vs. live achievement per period, oldest period first.

    Achievement is recomputed from paid invoices for every row; the stored
    ``achieved_amount`` snapshot is not used.
    """
    filters = {"target_type": target_type, "is_active": True}
    if user_id:
        filters["user_id"] = user_id
    try:
        targets = list(SalesTarget.objects.filter(**filters).order_by("target_period", "created_at"))
    except (DatabaseError, ValidationError, ValueError) as exc:
        logger.exception("Error fetching chart data")
        raise SalesTargetError("Failed to fetch chart data") from exc

    engine = engine or AchievementEngine()
    return [engine.progress(target) for target in targets]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def create_sales_target(data: SalesTargetData) -> ServiceResult:
    """Create a target for ``data.user_id``.

    Fails with ``not_found`` when the user does not exist and with
    ``conflict`` when the user already has a target for that period.
    """
    period, failure = _validate(data)
    if failure:
        return failure

    try:
        if _lookup(User.objects.only("id"), data.user_id) is None:
            return ServiceResult.fail(USER_NOT_FOUND, code="not_found")

        if SalesTarget.objects.filter(user_id=data.user_id, target_period=period).exists():
            return ServiceResult.fail(DUPLICATE_ON_CREATE, code="conflict")

        with transaction.atomic():
            target = SalesTarget.objects.create(
                user_id=data.user_id,
                target_type=data.target_type,
                target_period=period,
                target_amount=data.target_amount,
                is_active=data.is_active,
            )
    except IntegrityError as exc:
        logger.warning("Sales target create rejected by database: %s", exc)
        return _integrity_failure(exc, DUPLICATE_ON_CREATE)
    except DatabaseError as exc:
        logger.exception("Error creating sales target")
        return ServiceResult.fail(f"Failed to create sales target: {exc}")

    logger.info(
        "Sales target %s created for user=%s period=%s", target.pk, target.user_id, period
    )
    notify_targets_changed(
        target_id=target.pk,
        action="created",
        paths=[TARGET_LIST_PATH, REVENUE_ANALYTICS_PATH],
    )
    return ServiceResult.ok(target)


def update_sales_target(target_id, data: SalesTargetData) -> ServiceResult:
    """Replace every editable field of a target.

    Moving a target onto a ``(user, period)`` pair held by another target
    fails with ``conflict`` and leaves both rows untouched.
    """
    period, failure = _validate(data)
    if failure:
        return failure

    try:
        target = _lookup(SalesTarget.objects.all(), target_id)
        if target is None:
            return ServiceResult.fail(TARGET_NOT_FOUND, code="not_found")

        if _lookup(User.objects.only("id"), data.user_id) is None:
            return ServiceResult.fail(USER_NOT_FOUND, code="not_found")

        clash = (
            SalesTarget.objects.filter(user_id=data.user_id, target_period=period)
            .exclude(pk=target.pk)
            .exists()
        )
        if clash:
            return ServiceResult.fail(DUPLICATE_ON_UPDATE, code="conflict")

        target.user_id = data.user_id
        target.target_type = data.target_type
        target.target_period = period
        target.target_amount = data.target_amount
        target.is_active = data.is_active
        with transaction.atomic():
            target.save()
    except IntegrityError as exc:
        logger.warning("Sales target %s update rejected by database: %s", target_id, exc)
        return _integrity_failure(exc, DUPLICATE_ON_UPDATE)
    except DatabaseError:
        logger.exception("Error updating sales target %s", target_id)
        return ServiceResult.fail("Failed to update sales target")

    logger.info("Sales target %s updated (period=%s)", target.pk, period)
    notify_targets_changed(
        target_id=target.pk,
        action="updated",
        paths=[TARGET_LIST_PATH, REVENUE_ANALYTICS_PATH, target_edit_path(target.pk)],
    )
    return ServiceResult.ok(target)


def delete_sales_target(target_id) -> ServiceResult:
    try:
        target = _lookup(SalesTarget.objects.all(), target_id)
        if target is None:
            return ServiceResult.fail(TARGET_NOT_FOUND, code="not_found")
        pk = target.pk
        with transaction.atomic():
            target.delete()
    except DatabaseError:
        logger.exception("Error deleting sales target %s", target_id)
        return ServiceResult.fail("Failed to delete sales target")

    logger.info("Sales target %s deleted", pk)
    notify_targets_changed(
        target_id=pk,
        action="deleted",
        paths=[TARGET_LIST_PATH, REVENUE_ANALYTICS_PATH],
    )
    return ServiceResult.ok()


def toggle_sales_target_status(target_id) -> ServiceResult:
    """Flip ``is_active``; nothing else on the row changes."""
    try:
        with transaction.atomic():
            target = _lookup(SalesTarget.objects.select_for_update(), target_id)
            if target is None:
                return ServiceResult.fail(TARGET_NOT_FOUND, code="not_found")
            target.is_active = not target.is_active
            target.save(update_fields=["is_active", "updated_at"])
    except DatabaseError:
        logger.exception("Error toggling sales target %s", target_id)
        return ServiceResult.fail("Failed to toggle sales target status")

    logger.info("Sales target %s is_active=%s", target.pk, target.is_active)
    notify_targets_changed(
        target_id=target.pk,
        action="toggled",
        paths=[TARGET_LIST_PATH, REVENUE_ANALYTICS_PATH],
    )
    return ServiceResult.ok(target)


def update_achieved_amount(user_id, target_period: str, amount) -> ServiceResult:
    """Overwrite the stored achievement of the user's active target.

    Only the active target matching ``(user_id, target_period)`` is
    touched; without one the call fails with ``not_found``. A value that
    is not a finite decimal fails with ``invalid``.
    """
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return ServiceResult.fail(INVALID_AMOUNT, code="invalid")
    if not amount.is_finite():
        return ServiceResult.fail(INVALID_AMOUNT, code="invalid")

    try:
        with transaction.atomic():
            try:
                target = (
                    SalesTarget.objects.select_for_update()
                    .filter(user_id=user_id, target_period=target_period, is_active=True)
                    .first()
                )
            except (ValidationError, ValueError):
                # Malformed user id.
                target = None
            if target is None:
                return ServiceResult.fail(NO_ACTIVE_TARGET, code="not_found")
            target.achieved_amount = amount
            target.save(update_fields=["achieved_amount", "updated_at"])
    except DatabaseError:
        logger.exception(
            "Error updating achieved amount for user=%s period=%s", user_id, target_period
        )
        return ServiceResult.fail("Failed to update achieved amount")

    logger.info(
        "Achieved amount for target %s set to %s", target.pk, target.achieved_amount
    )
    return ServiceResult.ok(target)


def refresh_achieved_amount(
    target: SalesTarget, engine: Optional[AchievementEngine] = None
) -> ServiceResult:
    """Recompute a target's achievement from paid invoices and store it."""
    engine = engine or AchievementEngine()
    amount = engine.achieved_amount(target.user_id, target.target_period, target.target_type)
    return update_achieved_amount(target.user_id, target.target_period, amount)


def refresh_current_achievements(today=None, engine: Optional[AchievementEngine] = None) -> int:
    """Refresh every active target whose period contains ``today``.

    Returns the number of targets whose snapshot was written.
    """
    engine = engine or AchievementEngine()
    refreshed = 0
    for target_type in TargetType.values:
        period = generate_target_period(target_type, today)
        targets = SalesTarget.objects.filter(
            target_type=target_type,
            target_period=period,
            is_active=True,
        )
        for target in targets:
            result = refresh_achieved_amount(target, engine=engine)
            if result.success:
                refreshed += 1
            else:
                logger.warning("Refresh of target %s failed: %s", target.pk, result.error)
    return refreshed
