# ===============================================================================
# USER MANAGEMENT API VIEWS 👤
# ===============================================================================

from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.db.models import Q, QuerySet
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import (
    BaseAPIViewSet,
    IsAdminRole,
    IsStaffMember,
    error_response,
    result_response,
    validation_error_response,
)
from apps.users.models import User
from apps.users.services import UserCreationRequest, UserService

from .serializers import (
    ProfileUpdateSerializer,
    UserSerializer,
    UserStatusSerializer,
    UserWithStatsSerializer,
    UserWriteSerializer,
)

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


def _serialize_user(user: User) -> dict[str, Any]:
    return UserSerializer(user).data


class UserViewSet(BaseAPIViewSet):
    """
    👤 Dashboard account management (administrators only).

    GET    /api/users/                  ?withStats=true&role=&isActive=&search=
    POST   /api/users/
    GET    /api/users/statistics
    PATCH  /api/users/{id}/toggle-status
    PATCH  /api/users/{id}/status       {isActive}
    GET    /api/users/me                (any account)
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes: ClassVar = [IsAdminRole]
    lookup_value_regex = r"\d+"

    def _with_stats(self) -> bool:
        return self.request.query_params.get("withStats", "").lower() in TRUTHY

    def get_serializer_class(self) -> type:
        if self.action == "list" and self._with_stats():
            return UserWithStatsSerializer
        return UserSerializer

    def get_queryset(self) -> QuerySet[User]:
        queryset = UserService.list_with_stats() if self._with_stats() else User.objects.all()
        params = self.request.query_params
        if role := params.get("role"):
            queryset = queryset.filter(role=role)
        if (is_active := params.get("isActive")) is not None:
            queryset = queryset.filter(is_active=is_active.lower() in TRUTHY)
        if search := params.get("search"):
            queryset = queryset.filter(Q(name__icontains=search) | Q(email__icontains=search))
        return queryset

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = UserWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)

        data = serializer.validated_data
        result = UserService.create_user(
            UserCreationRequest(
                email=data["email"],
                name=data["name"],
                password=data["password"],
                role=data.get("role", User.ROLE_AUTHOR),
                is_active=data.get("is_active", True),
            )
        )
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        user = self.get_object()
        serializer = UserWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(UserService.update_user(user, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = UserService.delete_user(self.get_object(), acting_user=request.user)
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def statistics(self, request: Request) -> Response:
        return Response(UserService.get_statistics())

    @action(detail=True, methods=["patch", "post"], url_path="toggle-status")
    def toggle_status(self, request: Request, pk: str | None = None) -> Response:
        return self.respond(UserService.toggle_status(self.get_object(), acting_user=request.user))

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        serializer = UserStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(
            UserService.set_status(
                self.get_object(), serializer.validated_data["is_active"], acting_user=request.user
            )
        )

    @action(detail=False, methods=["get", "patch"], permission_classes=[IsStaffMember])
    def me(self, request: Request) -> Response:
        """Own profile; authors may change name, email and password only"""
        if request.method == "GET":
            return Response(_serialize_user(request.user))

        serializer = ProfileUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(UserService.update_user(request.user, **serializer.validated_data), _serialize_user)
