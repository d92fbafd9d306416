import pytest
from django.contrib.auth.models import AnonymousUser

from navigation.capabilities import ALL_CAPABILITIES, capabilities_for_user, user_has_capability
from navigation.menu import (
    SIDEBAR_MENU,
    MenuGenerator,
    MenuItem,
    create_menu_generator,
    is_active,
    mark_active,
)

SIDEBAR_URL = "/api/v1/navigation/sidebar/"


def _ids(items):
    return {item.id: [child.id for child in item.children] for item in items}


class TestCapabilities:
    def test_anonymous_has_none(self):
        assert capabilities_for_user(AnonymousUser()) == []
        assert capabilities_for_user(None) == []

    @pytest.mark.django_db
    def test_inactive_user_has_none(self, sales_user):
        sales_user.is_active = False
        assert capabilities_for_user(sales_user) == []

    @pytest.mark.django_db
    def test_superuser_has_all(self, warehouse_user):
        warehouse_user.is_superuser = True
        assert capabilities_for_user(warehouse_user) == ALL_CAPABILITIES

    @pytest.mark.django_db
    def test_sales_can_view_but_not_manage_targets(self, sales_user):
        assert user_has_capability(sales_user, "VIEW_SALES_TARGETS")
        assert not user_has_capability(sales_user, "MANAGE_SALES_TARGETS")


class TestMenuGenerator:
    def test_items_without_capability_are_public(self):
        generator = MenuGenerator([])
        item = MenuItem("help", "Bantuan", "help-circle", "/help")

        assert generator.can_access(item)
        assert generator.generate_sidebar([item]) == [item]

    def test_groups_with_no_visible_children_are_hidden(self):
        generator = MenuGenerator(["VIEW_DASHBOARD", "MANAGE_ORDERS"])

        items = generator.generate_sidebar()

        assert _ids(items) == {"dashboard": [], "sales": ["orders"]}

    def test_no_capabilities_gives_empty_sidebar(self):
        assert MenuGenerator([]).generate_sidebar() == []

    def test_source_tree_is_not_modified(self):
        before = _ids(SIDEBAR_MENU)
        MenuGenerator(["MANAGE_ORDERS"]).generate_sidebar()
        assert _ids(SIDEBAR_MENU) == before

    @pytest.mark.django_db
    def test_sales_sidebar(self, sales_user):
        items = create_menu_generator(sales_user).generate_sidebar()

        assert _ids(items) == {
            "dashboard": [],
            "sales": ["orders", "customers", "customer-visits", "my-target"],
        }

    @pytest.mark.django_db
    def test_warehouse_sidebar(self, warehouse_user):
        items = create_menu_generator(warehouse_user).generate_sidebar()

        assert list(_ids(items)) == ["dashboard", "inventory", "warehouse"]

    @pytest.mark.django_db
    def test_owner_sees_everything(self, owner_user):
        items = create_menu_generator(owner_user).generate_sidebar()

        assert _ids(items) == _ids(SIDEBAR_MENU)


class TestActiveMarking:
    def test_leaf_match(self):
        item = MenuItem("dashboard", "Dashboard", "dashboard", "/dashboard")

        assert is_active(item, "/dashboard")
        assert not is_active(item, "/dashboard/extra")
        assert not is_active(item, None)

    def test_group_is_active_when_a_child_matches(self):
        rendered = mark_active(SIDEBAR_MENU, "/management/sales-target")

        management = next(row for row in rendered if row["id"] == "management")
        assert management["active"] is True
        assert management["href"] is None
        target_row = next(row for row in management["children"] if row["id"] == "sales-target")
        assert target_row["active"] is True
        assert all(not row["active"] for row in rendered if row["id"] != "management")


@pytest.mark.django_db
class TestSidebarEndpoint:
    def test_requires_authentication(self, api_client):
        assert api_client.get(SIDEBAR_URL).status_code == 401

    def test_sales_user(self, sales_client):
        response = sales_client.get(SIDEBAR_URL, {"path": "/sales/target"})

        assert response.status_code == 200
        items = response.json()["items"]
        assert [row["id"] for row in items] == ["dashboard", "sales"]
        my_target = items[1]["children"][-1]
        assert my_target == {
            "id": "my-target",
            "label": "Target Saya",
            "icon": "target",
            "href": "/sales/target",
            "active": True,
            "children": [],
        }

    def test_user_without_role_capabilities(self, api_client, sales_user):
        sales_user.role = "UNKNOWN"
        sales_user.save()
        api_client.force_authenticate(user=sales_user)

        response = api_client.get(SIDEBAR_URL)

        assert response.json() == {"items": []}
