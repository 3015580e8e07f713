# ===============================================================================
# AUTHENTICATION API VIEWS 🔐
# ===============================================================================

from __future__ import annotations

import logging

from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import AuthThrottle, error_response, success_response, validation_error_response
from apps.api.users.serializers import UserSerializer
from apps.users.services import UserService

from .serializers import LoginSerializer

logger = logging.getLogger(__name__)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthThrottle])
def login_api(request: Request) -> Response:
    """
    🔐 Token login

    POST /api/auth/login  {email, password}  ->  {access_token, user}
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = UserService.authenticate(serializer.validated_data["email"], serializer.validated_data["password"])
    if result.is_err():
        return error_response(result.unwrap_err())

    user, token = result.unwrap()
    return Response({"access_token": token, "user": UserSerializer(user).data})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def profile_api(request: Request) -> Response:
    """GET /api/auth/profile"""
    return Response(UserSerializer(request.user).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def logout_api(request: Request) -> Response:
    """POST /api/auth/logout - revokes the API token"""
    UserService.logout(request.user)
    return success_response(message="Logged out")
