"""DRF Serializers for the sales targets module."""
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from targets.models import SalesTarget
from targets.periods import TargetType
from targets.services import SalesTargetData


# ────────────────────────────────────────────────────────────
# Read
# ────────────────────────────────────────────────────────────

class SalesTargetSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()
    user_email = serializers.EmailField(source="user.email", read_only=True)
    target_type_display = serializers.CharField(source="get_target_type_display", read_only=True)

    class Meta:
        model = SalesTarget
        fields = [
            "id", "user", "user_name", "user_email",
            "target_type", "target_type_display", "target_period",
            "target_amount", "achieved_amount", "is_active",
            "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj) -> str:
        return obj.user.get_full_name() or obj.user.email


class SalesUserSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()


class ChartRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    period = serializers.CharField()
    target = serializers.DecimalField(max_digits=14, decimal_places=2)
    # Sums and over-achievement have no upper bound.
    achieved = serializers.DecimalField(max_digits=None, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=None, decimal_places=2)


# ────────────────────────────────────────────────────────────
# Write
# ────────────────────────────────────────────────────────────

class SalesTargetWriteSerializer(serializers.Serializer):
    """Shape validation for create/update; business rules live in services."""

    user = serializers.UUIDField()
    target_type = serializers.ChoiceField(choices=TargetType.choices)
    target_period = serializers.CharField(max_length=10)
    target_amount = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
    )
    is_active = serializers.BooleanField(required=False, default=True)

    def to_target_data(self, base: SalesTargetData | None = None) -> SalesTargetData:
        values = dict(self.validated_data)
        changes = {
            "user_id": values.get("user"),
            "target_type": values.get("target_type"),
            "target_period": values.get("target_period"),
            "target_amount": values.get("target_amount"),
            "is_active": values.get("is_active"),
        }
        if base is not None:
            return base.merged(**changes)
        return SalesTargetData(**changes)


class AchievedAmountSerializer(serializers.Serializer):
    user = serializers.UUIDField()
    target_period = serializers.CharField(max_length=10)
    amount = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0"),
    )
