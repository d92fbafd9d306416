"""Account and navigation views for API v1."""
import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.serializers import MeSerializer
from navigation.menu import create_menu_generator, mark_active

logger = logging.getLogger("indana")


class MeView(APIView):
    """
    GET /api/v1/auth/me/ - the authenticated user's profile and capabilities.
    PATCH /api/v1/auth/me/ - update first_name, last_name, phone, address.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class SidebarView(APIView):
    """GET /api/v1/navigation/sidebar/?path= - menu tree the caller may open."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = create_menu_generator(request.user).generate_sidebar()
        if not items:
            logger.info("User %s has no accessible modules", request.user)
        path = request.query_params.get("path")
        return Response({"items": mark_active(items, path)})
