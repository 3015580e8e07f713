# ===============================================================================
# SETUP WIZARD API VIEWS 🧭
# ===============================================================================
#
# These endpoints stay reachable while SetupRequiredMiddleware blocks the
# rest of /api/ with 412.
#

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import AuthThrottle, error_response, validation_error_response
from apps.api.users.serializers import UserSerializer
from apps.setup.services import SetupCompletionRequest, SetupService

from .serializers import SetupCompletionSerializer

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([AllowAny])
def setup_status_api(request: Request) -> Response:
    """GET /api/setup/status"""
    return Response(SetupService.status())


@api_view(["GET"])
@permission_classes([AllowAny])
def check_admin_api(request: Request) -> Response:
    """GET /api/setup/check-admin"""
    return Response(SetupService.check_admin())


@api_view(["GET"])
@permission_classes([AllowAny])
def setup_templates_api(request: Request) -> Response:
    """GET /api/setup/templates"""
    return Response(SetupService.templates())


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthThrottle])
def complete_setup_api(request: Request) -> Response:
    """
    🧭 Finish the first-run wizard

    POST /api/setup/complete
    {siteName, siteTagline?, adminName, adminEmail, adminPassword, contactEmail, institutionType}

    Answers with the new administrator and an API token so the frontend can
    continue signed in.
    """
    serializer = SetupCompletionSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = SetupService.complete(SetupCompletionRequest(**serializer.validated_data))
    if result.is_err():
        return error_response(result.unwrap_err())

    completion = result.unwrap()
    return Response(
        {
            "success": True,
            "message": "Setup completed",
            "access_token": completion.token,
            "user": UserSerializer(completion.user).data,
            "homepageId": completion.homepage_id,
            "sectionsCreated": completion.sections_created,
        },
        status=status.HTTP_201_CREATED,
    )
