# ===============================================================================
# SITE SETTINGS API VIEWS ⚙️
# ===============================================================================

from __future__ import annotations

import logging
from typing import Any

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import IsAdminRole, error_response, result_response, success_response, validation_error_response
from apps.settings.models import SiteSetting
from apps.settings.services import SettingsService

from .serializers import (
    BulkSettingsSerializer,
    ResetSettingsSerializer,
    SettingFileSerializer,
    SettingValueSerializer,
    SiteSettingSerializer,
)

logger = logging.getLogger(__name__)


def _serialize(setting: SiteSetting) -> dict[str, Any]:
    return SiteSettingSerializer(setting).data


def _serialize_many(settings: Any) -> list[dict[str, Any]]:
    return SiteSettingSerializer(settings, many=True).data


def _is_admin(request: Request) -> bool:
    return IsAdminRole().has_permission(request, None)


# ===============================================================================
# READS 🔍
# ===============================================================================


@api_view(["GET"])
@permission_classes([AllowAny])
def settings_list_api(request: Request) -> Response:
    """GET /api/settings/ - every setting for administrators, public ones otherwise"""
    return Response(_serialize_many(SettingsService.get_all(public_only=not _is_admin(request))))


@api_view(["GET"])
@permission_classes([AllowAny])
def public_settings_api(request: Request) -> Response:
    """GET /api/settings/public"""
    return Response(_serialize_many(SettingsService.get_all(public_only=True)))


@api_view(["GET"])
@permission_classes([AllowAny])
def structured_settings_api(request: Request) -> Response:
    """GET /api/settings/structured - ``{category: {camelKey: typedValue}}``"""
    return Response(SettingsService.get_structured(public_only=not _is_admin(request)))


@api_view(["GET"])
@permission_classes([IsAdminRole])
def category_settings_api(request: Request, category: str) -> Response:
    """GET /api/settings/category/{category}"""
    return result_response(SettingsService.get_by_category(category), _serialize_many)


@api_view(["GET", "PUT", "PATCH"])
@permission_classes([AllowAny])
def setting_detail_api(request: Request, key: str) -> Response:
    """
    GET /api/settings/{key}       (public settings for everyone, all for admins)
    PUT /api/settings/{key} {value}
    """
    is_admin = _is_admin(request)

    if request.method == "GET":
        result = SettingsService.get(key)
        if result.is_ok() and not is_admin:
            setting = result.unwrap()
            if not setting.is_public or setting.is_sensitive:
                return Response({"success": False, "error": "Setting not found"}, status=status.HTTP_404_NOT_FOUND)
        return result_response(result, _serialize)

    if not is_admin:
        return Response(
            {"success": False, "error": IsAdminRole.message}, status=status.HTTP_403_FORBIDDEN
        )

    serializer = SettingValueSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)
    result = SettingsService.update(key, serializer.validated_data["value"], user=request.user)
    return result_response(result, _serialize)


# ===============================================================================
# WRITES 📝
# ===============================================================================


@api_view(["PUT", "POST"])
@permission_classes([IsAdminRole])
def bulk_update_api(request: Request) -> Response:
    """PUT /api/settings/bulk {settings: [{key, value}, ...]} - all or nothing"""
    payload = request.data if isinstance(request.data, dict) else {"settings": request.data}
    serializer = BulkSettingsSerializer(data=payload)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = SettingsService.bulk_update(serializer.validated_data["settings"], user=request.user)
    if result.is_err():
        return error_response(result.unwrap_err())
    return success_response(updated=len(result.unwrap()), settings=_serialize_many(result.unwrap()))


@api_view(["POST"])
@permission_classes([IsAdminRole])
@parser_classes([MultiPartParser, FormParser])
def upload_setting_file_api(request: Request, key: str) -> Response:
    """POST /api/settings/{key}/upload (multipart ``file``)"""
    serializer = SettingFileSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)
    return result_response(
        SettingsService.upload_file(key, serializer.validated_data["file"], user=request.user), _serialize
    )


@api_view(["POST"])
@permission_classes([IsAdminRole])
def reset_settings_api(request: Request) -> Response:
    """POST /api/settings/reset {category?} - restore registry defaults"""
    serializer = ResetSettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = SettingsService.reset_category(serializer.validated_data.get("category"))
    if result.is_err():
        return error_response(result.unwrap_err())
    SettingsService.clear_all_cache()
    return success_response(reset=len(result.unwrap()))


@api_view(["GET"])
@permission_classes([IsAdminRole])
def export_settings_api(request: Request) -> Response:
    """GET /api/settings/export - ``{key: value}`` without sensitive settings"""
    return Response(SettingsService.export())


@api_view(["POST"])
@permission_classes([IsAdminRole])
def import_settings_api(request: Request) -> Response:
    """POST /api/settings/import {key: value, ...} (or ``{settings: {...}}``)"""
    data = request.data
    mapping = data.get("settings", data) if isinstance(data, dict) else data
    result = SettingsService.import_settings(mapping, user=request.user)
    if result.is_err():
        return error_response(result.unwrap_err())
    return success_response(imported=result.unwrap())
