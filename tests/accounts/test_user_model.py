import pytest

from accounts.models import User


@pytest.mark.django_db
class TestUserManager:
    def test_create_user_normalizes_email(self):
        user = User.objects.create_user(email="Sales@INDANA.com", password="x", first_name="Sari")

        assert user.email == "Sales@indana.com"
        assert user.role == User.Role.SALES
        assert user.is_active
        assert not user.is_staff

    def test_email_is_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="x")

    def test_create_superuser_is_owner(self):
        user = User.objects.create_superuser(email="root@indana.com", password="x", first_name="Root")

        assert user.is_superuser
        assert user.is_staff
        assert user.role == User.Role.OWNER

    def test_create_superuser_requires_flags(self):
        with pytest.raises(ValueError):
            User.objects.create_superuser(email="root@indana.com", password="x", is_staff=False)


@pytest.mark.django_db
def test_full_name_and_role_helpers(sales_user, warehouse_user):
    assert sales_user.get_full_name() == "Sales User"
    assert str(sales_user) == "Sales User"
    assert sales_user.is_sales
    assert not sales_user.is_owner
    assert warehouse_user.is_warehouse
    assert warehouse_user.role_display == "Gudang"
