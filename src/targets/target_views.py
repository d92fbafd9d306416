"""API views for the sales targets module."""
from __future__ import annotations

import logging

from django.utils import timezone
from django.utils.dateparse import parse_date
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.v1.permissions import CanManageSalesTargets, CanViewSalesTargets
from core.export import rows_to_csv_response
from navigation.capabilities import user_has_capability
from targets import services
from targets.models import SalesTarget
from targets.periods import TargetType, generate_target_period
from targets.target_serializers import (
    AchievedAmountSerializer,
    ChartRowSerializer,
    SalesTargetSerializer,
    SalesTargetWriteSerializer,
    SalesUserSerializer,
)

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "invalid": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "error": status.HTTP_400_BAD_REQUEST,
}


# ────────────────────────────────────────────────────────────
# Response helpers
# ────────────────────────────────────────────────────────────

def _ok(data=None, http_status=status.HTTP_200_OK) -> Response:
    return Response({"success": True, "data": data}, status=http_status)


def _fail(error: str, http_status=status.HTTP_400_BAD_REQUEST, **extra) -> Response:
    return Response({"success": False, "error": error, **extra}, status=http_status)


def _from_result(result: services.ServiceResult, http_status=status.HTTP_200_OK) -> Response:
    if not result.success:
        return _fail(result.error, STATUS_BY_CODE.get(result.code, status.HTTP_400_BAD_REQUEST))
    data = SalesTargetSerializer(result.data).data if result.data is not None else None
    return _ok(data, http_status)


def _invalid(serializer) -> Response:
    field, messages = next(iter(serializer.errors.items()))
    message = messages[0] if isinstance(messages, list) and messages else str(messages)
    return _fail(f"{field}: {message}", errors=serializer.errors)


def _can_manage(user) -> bool:
    return user_has_capability(user, "MANAGE_SALES_TARGETS")


def _requested_user_id(request):
    """``?user=`` for managers; sales staff are pinned to themselves."""
    if _can_manage(request.user):
        return request.query_params.get("user") or None
    return request.user.pk


def _target_type_param(request):
    target_type = request.query_params.get("target_type") or TargetType.MONTHLY
    if target_type not in TargetType.values:
        return None
    return target_type


# ────────────────────────────────────────────────────────────
# Sales targets
# ────────────────────────────────────────────────────────────

class SalesTargetViewSet(viewsets.GenericViewSet):
    """CRUD for sales targets plus progress, lookup and export endpoints.

    Mutations go through :mod:`targets.services` and answer with the
    ``{"success": ..., "data"/"error": ...}`` envelope.
    """

    queryset = SalesTarget.objects.select_related("user")
    serializer_class = SalesTargetSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["user", "target_type", "target_period", "is_active"]
    search_fields = ["user__email", "user__first_name", "user__last_name", "target_period"]
    ordering_fields = ["created_at", "target_period", "target_amount"]
    ordering = ["-created_at"]

    read_actions = ("chart", "current", "lookup", "period")

    def get_permissions(self):
        if self.action in self.read_actions:
            return [permissions.IsAuthenticated(), CanViewSalesTargets()]
        return [permissions.IsAuthenticated(), CanManageSalesTargets()]

    def _get_target_or_response(self, pk):
        try:
            target = services.get_sales_target(pk)
        except services.SalesTargetError as exc:
            return None, _fail(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        if target is None:
            return None, _fail(services.TARGET_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        return target, None

    # -- CRUD ---------------------------------------------------------------

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        target, error = self._get_target_or_response(pk)
        if error:
            return error
        return _ok(SalesTargetSerializer(target).data)

    def create(self, request):
        serializer = SalesTargetWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = services.create_sales_target(serializer.to_target_data())
        return _from_result(result, status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = SalesTargetWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        return _from_result(services.update_sales_target(pk, serializer.to_target_data()))

    def partial_update(self, request, pk=None):
        target, error = self._get_target_or_response(pk)
        if error:
            return error
        serializer = SalesTargetWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return _invalid(serializer)
        data = serializer.to_target_data(base=services.SalesTargetData.from_target(target))
        return _from_result(services.update_sales_target(target.pk, data))

    def destroy(self, request, pk=None):
        return _from_result(services.delete_sales_target(pk))

    # -- State changes ------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        return _from_result(services.toggle_sales_target_status(pk))

    @action(detail=True, methods=["post"])
    def recompute(self, request, pk=None):
        """Recompute the achieved amount from paid invoices and store it."""
        target, error = self._get_target_or_response(pk)
        if error:
            return error
        return _from_result(services.refresh_achieved_amount(target))

    @action(detail=False, methods=["post"])
    def achieved(self, request):
        """Overwrite the achieved amount of the user's active target."""
        serializer = AchievedAmountSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        values = serializer.validated_data
        result = services.update_achieved_amount(
            values["user"], values["target_period"], values["amount"]
        )
        return _from_result(result)

    # -- Reads for dashboards ----------------------------------------------

    @action(detail=False, methods=["get"])
    def lookup(self, request):
        """GET ?user=&period= - active target of a user for one period."""
        period = (request.query_params.get("period") or "").strip()
        if not period:
            return _fail("period: parameter wajib diisi.")
        user_id = _requested_user_id(request) or request.user.pk
        target = services.get_user_sales_target(user_id, period)
        return _ok(SalesTargetSerializer(target).data if target else None)

    @action(detail=False, methods=["get"])
    def current(self, request):
        """GET ?user= - active target for the current month (caller by default)."""
        user_id = _requested_user_id(request) or request.user.pk
        target = services.get_current_month_target(user_id)
        return _ok(SalesTargetSerializer(target).data if target else None)

    @action(detail=False, methods=["get"])
    def period(self, request):
        """GET ?target_type=&date= - canonical period string for a date."""
        target_type = _target_type_param(request)
        if target_type is None:
            return _fail("target_type: tipe target tidak dikenal.")
        raw_date = request.query_params.get("date")
        day = parse_date(raw_date) if raw_date else timezone.localdate()
        if day is None:
            return _fail("date: format tanggal harus YYYY-MM-DD.")
        return _ok({
            "target_type": target_type,
            "date": day.isoformat(),
            "target_period": generate_target_period(target_type, day),
        })

    @action(detail=False, methods=["get"])
    def chart(self, request):
        """GET ?user=&target_type= - target vs. live achievement per period."""
        target_type = _target_type_param(request)
        if target_type is None:
            return _fail("target_type: tipe target tidak dikenal.")
        try:
            rows = services.get_targets_for_chart(_requested_user_id(request), target_type)
        except services.SalesTargetError as exc:
            return _fail(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return _ok(ChartRowSerializer(rows, many=True).data)

    # -- Management helpers -------------------------------------------------

    @action(detail=False, methods=["get"], url_path="sales-users")
    def sales_users(self, request):
        try:
            users = services.get_sales_users()
        except services.SalesTargetError as exc:
            return _fail(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return _ok(SalesUserSerializer(users, many=True).data)

    @action(detail=False, methods=["get"])
    def export(self, request):
        try:
            targets = services.list_sales_targets()
        except services.SalesTargetError as exc:
            return _fail(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

        columns = [
            ("Sales", lambda t: t.user.get_full_name() or t.user.email),
            ("Email", lambda t: t.user.email),
            ("Tipe", lambda t: t.get_target_type_display()),
            ("Periode", "target_period"),
            ("Target", "target_amount"),
            ("Tercapai", "achieved_amount"),
            ("Aktif", "is_active"),
        ]
        filename = f"target_penjualan_{timezone.localdate():%Y%m%d}"
        logger.info("Sales targets exported by %s (%d rows)", request.user, len(targets))
        return rows_to_csv_response(targets, columns, filename)
