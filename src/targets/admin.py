"""Django admin for the sales targets module."""
from django.conf import settings
from django.contrib import admin, messages

from targets.engine import achievement_percentage
from targets.models import SalesTarget
from targets.services import refresh_achieved_amount


def _money(amount) -> str:
    return f"{settings.CURRENCY_SYMBOL} {amount:,.0f}"


@admin.register(SalesTarget)
class SalesTargetAdmin(admin.ModelAdmin):
    list_display = (
        "user", "target_type", "target_period",
        "target_amount_display", "achieved_amount_display",
        "percentage_display", "is_active",
    )
    list_filter = ("target_type", "is_active", "target_period")
    search_fields = ("user__email", "user__first_name", "user__last_name", "target_period")
    list_select_related = ("user",)
    readonly_fields = ("achieved_amount", "created_at", "updated_at")
    ordering = ("-target_period",)
    actions = ["refresh_achievements"]

    @admin.display(description="Target", ordering="target_amount")
    def target_amount_display(self, obj):
        return _money(obj.target_amount)

    @admin.display(description="Tercapai", ordering="achieved_amount")
    def achieved_amount_display(self, obj):
        return _money(obj.achieved_amount)

    @admin.display(description="%")
    def percentage_display(self, obj):
        return f"{achievement_percentage(obj.achieved_amount, obj.target_amount)}%"

    @admin.action(description="Hitung ulang pencapaian dari invoice lunas")
    def refresh_achievements(self, request, queryset):
        refreshed = 0
        for target in queryset.filter(is_active=True):
            if refresh_achieved_amount(target).success:
                refreshed += 1
        self.message_user(request, f"{refreshed} target diperbarui.", messages.SUCCESS)
