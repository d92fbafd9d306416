from decimal import Decimal

import pytest
from django.test import Client

from accounts.models import User


@pytest.fixture
def superuser_client(db):
    user = User.objects.create_superuser(
        email="root@test.com", password="testpass123", first_name="Root"
    )
    client = Client()
    client.force_login(user)
    return client


@pytest.mark.parametrize(
    "url",
    [
        "/admin/accounts/user/",
        "/admin/targets/salestarget/",
        "/admin/sales/order/",
        "/admin/sales/invoice/",
    ],
)
def test_changelists_render(superuser_client, sales_user, make_target, url):
    make_target(sales_user)

    response = superuser_client.get(url)

    assert response.status_code == 200


def test_user_change_page_lists_targets(superuser_client, sales_user, make_target):
    make_target(sales_user, "2025-07")

    response = superuser_client.get(f"/admin/accounts/user/{sales_user.pk}/change/")

    assert response.status_code == 200
    assert b"2025-07" in response.content
    assert b"VIEW_SALES_TARGETS" in response.content


def test_refresh_achievements_action(
    superuser_client, sales_user, make_target, make_invoice, local_dt
):
    target = make_target(sales_user, "2025-01")
    make_invoice(sales_user, "80000", when=local_dt(2025, 1, 9))

    response = superuser_client.post(
        "/admin/targets/salestarget/",
        {"action": "refresh_achievements", "_selected_action": [str(target.pk)]},
    )

    assert response.status_code == 302
    target.refresh_from_db()
    assert target.achieved_amount == Decimal("80000")
