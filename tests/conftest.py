import itertools
from datetime import datetime
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from sales.models import Invoice, Order
from targets.models import SalesTarget
from targets.periods import TargetType


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def owner_user(db):
    return User.objects.create_user(
        email="owner@test.com",
        password="testpass123",
        first_name="Owner",
        last_name="User",
        role=User.Role.OWNER,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def warehouse_user(db):
    return User.objects.create_user(
        email="warehouse@test.com",
        password="testpass123",
        first_name="Warehouse",
        last_name="User",
        role=User.Role.WAREHOUSE,
    )


@pytest.fixture
def sales_user(db):
    return User.objects.create_user(
        email="sales@test.com",
        password="testpass123",
        first_name="Sales",
        last_name="User",
        role=User.Role.SALES,
    )


@pytest.fixture
def other_sales_user(db):
    return User.objects.create_user(
        email="sales2@test.com",
        password="testpass123",
        first_name="Budi",
        last_name="Santoso",
        role=User.Role.SALES,
    )


def _local_dt(year, month, day, hour=12, minute=0):
    return timezone.make_aware(datetime(year, month, day, hour, minute))


@pytest.fixture
def local_dt():
    """Build aware datetimes in the project time zone."""
    return _local_dt


@pytest.fixture
def make_invoice(db):
    counter = itertools.count(1)

    def _make(seller, amount, *, when=None, status=Invoice.Status.PAID):
        n = next(counter)
        order = Order.objects.create(
            order_number=f"ORD-{n:05d}",
            sales=seller,
            customer_name="Toko Maju",
            total_amount=Decimal(amount),
        )
        return Invoice.objects.create(
            invoice_number=f"INV-{n:05d}",
            order=order,
            invoice_date=when or timezone.now(),
            status=status,
            total_amount=Decimal(amount),
        )

    return _make


@pytest.fixture
def make_target(db):
    def _make(user, period="2025-01", target_type=TargetType.MONTHLY, amount="1000000", **extra):
        return SalesTarget.objects.create(
            user=user,
            target_type=target_type,
            target_period=period,
            target_amount=Decimal(amount),
            **extra,
        )

    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def owner_client(owner_user):
    client = APIClient()
    client.force_authenticate(user=owner_user)
    return client


@pytest.fixture
def sales_client(sales_user):
    client = APIClient()
    client.force_authenticate(user=sales_user)
    return client
