"""Serializers for the account endpoints of API v1."""
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from navigation.capabilities import capabilities_for_user

User = get_user_model()


class MeSerializer(serializers.ModelSerializer):
    """The authenticated user's own profile (GET/PATCH).

    ``capabilities`` is what the front end uses to decide which screens
    to show; it is derived from the role and never written.
    """

    full_name = serializers.CharField(source='get_full_name', read_only=True)
    role_display = serializers.CharField(read_only=True)
    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name',
            'phone', 'address', 'role', 'role_display',
            'is_active', 'is_superuser', 'capabilities',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active', 'is_superuser']

    def get_capabilities(self, obj) -> list:
        return capabilities_for_user(obj)


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Adds the user's profile to the token response."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = MeSerializer(self.user).data
        return data
