import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.utils import timezone

from targets import services
from targets.models import SalesTarget
from targets.periods import TargetType
from targets.services import SalesTargetData, SalesTargetError


def _data(user, period="2025-01", target_type=TargetType.MONTHLY, amount="1000000", is_active=True):
    return SalesTargetData(
        user_id=user.pk,
        target_type=target_type,
        target_period=period,
        target_amount=Decimal(amount),
        is_active=is_active,
    )


@pytest.mark.django_db
class TestCreateSalesTarget:
    def test_creates_target(self, sales_user):
        result = services.create_sales_target(_data(sales_user))

        assert result.success
        target = result.data
        assert target.user_id == sales_user.pk
        assert target.target_period == "2025-01"
        assert target.achieved_amount == Decimal("0")
        assert target.is_active

    def test_normalizes_period(self, sales_user):
        result = services.create_sales_target(_data(sales_user, period="2025-3"))

        assert result.data.target_period == "2025-03"

    def test_duplicate_period_fails_and_keeps_one_record(self, sales_user):
        services.create_sales_target(_data(sales_user))

        result = services.create_sales_target(_data(sales_user, amount="5"))

        assert not result.success
        assert result.code == "conflict"
        assert result.error == services.DUPLICATE_ON_CREATE
        assert SalesTarget.objects.filter(user=sales_user, target_period="2025-01").count() == 1

    def test_same_period_for_different_users_is_allowed(self, sales_user, other_sales_user):
        assert services.create_sales_target(_data(sales_user)).success
        assert services.create_sales_target(_data(other_sales_user)).success

    def test_unknown_user(self, sales_user):
        data = _data(sales_user)
        data.user_id = uuid.uuid4()

        result = services.create_sales_target(data)

        assert not result.success
        assert result.code == "not_found"
        assert result.error == services.USER_NOT_FOUND
        assert not SalesTarget.objects.exists()

    def test_invalid_period_rejected(self, sales_user):
        result = services.create_sales_target(_data(sales_user, period="2025-13"))

        assert not result.success
        assert result.code == "invalid"
        assert not SalesTarget.objects.exists()

    def test_negative_amount_rejected(self, sales_user):
        result = services.create_sales_target(_data(sales_user, amount="-1"))

        assert not result.success
        assert result.error == services.NEGATIVE_AMOUNT

    def test_database_unique_constraint_maps_to_conflict(self, sales_user, make_target, monkeypatch):
        make_target(sales_user, "2025-01")
        # Skip the pre-check so the insert hits the constraint.
        monkeypatch.setattr("django.db.models.query.QuerySet.exists", lambda self: False)

        result = services.create_sales_target(_data(sales_user))

        assert not result.success
        assert result.code == "conflict"
        assert SalesTarget.objects.filter(user=sales_user).count() == 1

    def test_unexpected_database_error(self, sales_user, monkeypatch):
        def _boom(*args, **kwargs):
            raise DatabaseError("disk full")

        monkeypatch.setattr(SalesTarget.objects, "create", _boom)

        result = services.create_sales_target(_data(sales_user))

        assert not result.success
        assert result.code == "error"
        assert result.error == "Failed to create sales target: disk full"


@pytest.mark.django_db
class TestUpdateSalesTarget:
    def test_updates_every_field(self, sales_user, other_sales_user, make_target):
        target = make_target(sales_user, "2025-01")

        result = services.update_sales_target(
            target.pk,
            _data(other_sales_user, period="2025-Q2", target_type=TargetType.QUARTERLY, amount="42", is_active=False),
        )

        assert result.success
        target.refresh_from_db()
        assert target.user_id == other_sales_user.pk
        assert target.target_type == TargetType.QUARTERLY
        assert target.target_period == "2025-Q2"
        assert target.target_amount == Decimal("42")
        assert target.is_active is False

    def test_keeping_own_period_is_not_a_conflict(self, sales_user, make_target):
        target = make_target(sales_user, "2025-01")

        result = services.update_sales_target(target.pk, _data(sales_user, amount="2000000"))

        assert result.success
        assert result.data.target_amount == Decimal("2000000")

    def test_colliding_update_fails_and_leaves_record_unchanged(self, sales_user, make_target):
        make_target(sales_user, "2025-01")
        second = make_target(sales_user, "2025-02", amount="750000")

        result = services.update_sales_target(second.pk, _data(sales_user, period="2025-01"))

        assert not result.success
        assert result.code == "conflict"
        assert result.error == services.DUPLICATE_ON_UPDATE
        second.refresh_from_db()
        assert second.target_period == "2025-02"
        assert second.target_amount == Decimal("750000")

    def test_missing_target(self, sales_user):
        result = services.update_sales_target(uuid.uuid4(), _data(sales_user))

        assert not result.success
        assert result.code == "not_found"
        assert result.error == services.TARGET_NOT_FOUND

    def test_malformed_id_is_not_found(self, sales_user):
        result = services.update_sales_target("not-a-uuid", _data(sales_user))

        assert result.code == "not_found"

    def test_sends_change_signal_with_edit_path(self, sales_user, make_target):
        from targets.signals import sales_targets_changed

        target = make_target(sales_user, "2025-01")
        received = []

        def _listener(sender, **kwargs):
            received.append(kwargs)

        sales_targets_changed.connect(_listener)
        try:
            services.update_sales_target(target.pk, _data(sales_user, amount="10"))
        finally:
            sales_targets_changed.disconnect(_listener)

        assert received[0]["action"] == "updated"
        assert received[0]["paths"] == [
            "/management/sales-target",
            "/management/finance/revenue-analytics",
            f"/management/sales-target/edit/{target.pk}",
        ]


@pytest.mark.django_db
class TestDeleteAndToggle:
    def test_delete(self, sales_user, make_target):
        target = make_target(sales_user)

        result = services.delete_sales_target(target.pk)

        assert result.success
        assert not SalesTarget.objects.filter(pk=target.pk).exists()

    def test_delete_missing(self):
        result = services.delete_sales_target(uuid.uuid4())

        assert not result.success
        assert result.code == "not_found"

    def test_toggle_twice_restores_state(self, sales_user, make_target):
        target = make_target(sales_user)
        original = target.is_active

        first = services.toggle_sales_target_status(target.pk)
        assert first.success
        assert first.data.is_active is (not original)

        second = services.toggle_sales_target_status(target.pk)
        assert second.data.is_active is original

        target.refresh_from_db()
        assert target.is_active is original

    def test_toggle_changes_nothing_else(self, sales_user, make_target):
        target = make_target(sales_user, achieved_amount=Decimal("123"))

        services.toggle_sales_target_status(target.pk)

        target.refresh_from_db()
        assert target.target_period == "2025-01"
        assert target.achieved_amount == Decimal("123")

    def test_toggle_missing(self):
        result = services.toggle_sales_target_status(uuid.uuid4())

        assert result.error == services.TARGET_NOT_FOUND


@pytest.mark.django_db
class TestAchievedAmount:
    def test_sets_amount_on_active_target(self, sales_user, make_target):
        target = make_target(sales_user, "2025-01")

        result = services.update_achieved_amount(sales_user.pk, "2025-01", Decimal("450000"))

        assert result.success
        target.refresh_from_db()
        assert target.achieved_amount == Decimal("450000")

    def test_inactive_target_is_not_touched(self, sales_user, make_target):
        target = make_target(sales_user, "2025-01", is_active=False)

        result = services.update_achieved_amount(sales_user.pk, "2025-01", Decimal("450000"))

        assert not result.success
        assert result.error == services.NO_ACTIVE_TARGET
        target.refresh_from_db()
        assert target.achieved_amount == Decimal("0")

    def test_malformed_amount_is_invalid_not_missing(self, sales_user, make_target):
        target = make_target(sales_user, "2025-01")

        for bad in ("abc", "NaN"):
            result = services.update_achieved_amount(sales_user.pk, "2025-01", bad)

            assert result.code == "invalid"
            assert result.error == services.INVALID_AMOUNT
        target.refresh_from_db()
        assert target.achieved_amount == Decimal("0")

    def test_malformed_user_id_is_not_found(self):
        result = services.update_achieved_amount("not-a-uuid", "2025-01", Decimal("1"))

        assert result.code == "not_found"
        assert result.error == services.NO_ACTIVE_TARGET

    def test_refresh_uses_paid_invoices(self, sales_user, make_target, make_invoice, local_dt):
        target = make_target(sales_user, "2025-01")
        make_invoice(sales_user, "250000", when=local_dt(2025, 1, 20))

        result = services.refresh_achieved_amount(target)

        assert result.success
        assert result.data.achieved_amount == Decimal("250000")

    def test_refresh_current_achievements(self, sales_user, make_target, make_invoice, local_dt):
        monthly = make_target(sales_user, "2025-05")
        yearly = make_target(sales_user, "2025", target_type=TargetType.YEARLY)
        stale = make_target(sales_user, "2025-04")
        make_invoice(sales_user, "100", when=local_dt(2025, 4, 2))
        make_invoice(sales_user, "200", when=local_dt(2025, 5, 2))

        count = services.refresh_current_achievements(today=date(2025, 5, 15))

        assert count == 2
        monthly.refresh_from_db()
        yearly.refresh_from_db()
        stale.refresh_from_db()
        assert monthly.achieved_amount == Decimal("200")
        assert yearly.achieved_amount == Decimal("300")
        assert stale.achieved_amount == Decimal("0")


@pytest.mark.django_db
class TestReads:
    def test_list_newest_first_with_user(self, sales_user, other_sales_user, make_target):
        older = make_target(sales_user, "2025-01")
        newer = make_target(other_sales_user, "2025-01")
        SalesTarget.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        targets = services.list_sales_targets()

        assert [t.pk for t in targets] == [newer.pk, older.pk]
        assert targets[0].user.email == other_sales_user.email

    def test_list_raises_on_database_error(self, monkeypatch):
        def _boom(*args, **kwargs):
            raise DatabaseError("gone")

        monkeypatch.setattr("django.db.models.query.QuerySet._fetch_all", _boom)

        with pytest.raises(SalesTargetError, match="Failed to fetch sales targets"):
            services.list_sales_targets()

    def test_get_sales_target(self, sales_user, make_target):
        target = make_target(sales_user)

        assert services.get_sales_target(target.pk) == target
        assert services.get_sales_target(uuid.uuid4()) is None

    def test_user_sales_target_only_active(self, sales_user, make_target):
        make_target(sales_user, "2025-01", is_active=False)
        active = make_target(sales_user, "2025-02")

        assert services.get_user_sales_target(sales_user.pk, "2025-01") is None
        assert services.get_user_sales_target(sales_user.pk, "2025-02") == active

    def test_user_sales_target_is_lenient(self, monkeypatch, sales_user):
        def _boom(*args, **kwargs):
            raise DatabaseError("gone")

        monkeypatch.setattr("django.db.models.query.QuerySet.first", _boom)

        assert services.get_user_sales_target(sales_user.pk, "2025-01") is None

    def test_current_month_target(self, sales_user, make_target):
        target = make_target(sales_user, "2025-06")

        assert services.get_current_month_target(sales_user.pk, today=date(2025, 6, 30)) == target
        assert services.get_current_month_target(sales_user.pk, today=date(2025, 7, 1)) is None

    def test_sales_users(self, sales_user, other_sales_user, admin_user, warehouse_user):
        other_sales_user.is_active = False
        other_sales_user.save()

        users = services.get_sales_users()

        assert users == [{"id": sales_user.pk, "name": "Sales User", "email": "sales@test.com"}]

    def test_chart_rows(self, sales_user, other_sales_user, make_target, make_invoice, local_dt):
        make_target(sales_user, "2025-02", amount="1000")
        make_target(sales_user, "2025-01", amount="0")
        make_target(sales_user, "2025-03", amount="1000", is_active=False)
        make_target(other_sales_user, "2025-01", amount="1000")
        make_target(sales_user, "2025-Q1", target_type=TargetType.QUARTERLY, amount="1000")
        make_invoice(sales_user, "250", when=local_dt(2025, 2, 14))
        make_invoice(sales_user, "90", when=local_dt(2025, 1, 14))

        rows = services.get_targets_for_chart(sales_user.pk, TargetType.MONTHLY)

        assert [row["period"] for row in rows] == ["2025-01", "2025-02"]
        assert rows[0]["achieved"] == Decimal("90")
        assert rows[0]["percentage"] == Decimal("0")
        assert rows[1]["achieved"] == Decimal("250")
        assert rows[1]["percentage"] == Decimal("25.00")

    def test_chart_all_users(self, sales_user, other_sales_user, make_target):
        make_target(sales_user, "2025-01")
        make_target(other_sales_user, "2025-01")

        assert len(services.get_targets_for_chart()) == 2
