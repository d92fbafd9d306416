from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from navigation.capabilities import capabilities_for_user
from targets.models import SalesTarget

from .models import User


class SalesTargetInline(admin.TabularInline):
    """Read-only view of the targets assigned to a user."""

    model = SalesTarget
    extra = 0
    can_delete = False
    fields = ("target_type", "target_period", "target_amount", "achieved_amount", "is_active")
    readonly_fields = fields
    ordering = ("-target_period",)
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users of the back office; the role decides what they can open."""

    list_display = (
        "email",
        "full_name",
        "role",
        "target_count",
        "is_active",
        "last_login",
    )
    list_filter = ("role", "is_active", "is_superuser")
    search_fields = ("email", "first_name", "last_name", "phone")
    ordering = ("first_name", "last_name")
    actions = ("activate_users", "deactivate_users")
    inlines = [SalesTargetInline]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Data pribadi", {"fields": ("first_name", "last_name", "phone", "address")}),
        ("Role", {"fields": ("role", "capability_list", "is_active")}),
        (
            "Admin Django",
            {
                "classes": ("collapse",),
                "fields": ("is_staff", "is_superuser", "groups", "user_permissions"),
            },
        ),
        ("Aktivitas", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "first_name", "last_name", "role", "password1", "password2"),
            },
        ),
    )
    readonly_fields = ("capability_list", "date_joined", "last_login")

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_target_count=Count("sales_targets"))

    @admin.display(description="Nama", ordering="first_name")
    def full_name(self, obj):
        return obj.get_full_name()

    @admin.display(description="Target", ordering="_target_count")
    def target_count(self, obj):
        return obj._target_count

    @admin.display(description="Hak akses")
    def capability_list(self, obj):
        return ", ".join(capabilities_for_user(obj)) or "-"

    @admin.action(description="Aktifkan user terpilih")
    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"{updated} user diaktifkan.")

    @admin.action(description="Nonaktifkan user terpilih")
    def deactivate_users(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(is_active=False)
        self.message_user(request, f"{updated} user dinonaktifkan.")
