# ===============================================================================
# MEDIA LIBRARY API VIEWS 🖼️
# ===============================================================================

from __future__ import annotations

import logging
import mimetypes
from typing import Any, ClassVar

from django.db.models import QuerySet
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import (
    BaseAPIViewSet,
    IsStaffMember,
    IsStaffOrReadOnly,
    error_response,
    validation_error_response,
)
from apps.common.types import not_found
from apps.media.models import Media
from apps.media.services import MediaService, MediaUploadRequest

from .serializers import MediaMetadataSerializer, MediaReplaceSerializer, MediaSerializer, MediaUploadSerializer

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


def _is_staff(request: Request) -> bool:
    return IsStaffMember().has_permission(request, None)


class MediaViewSet(BaseAPIViewSet):
    """
    🖼️ Media library

    GET  /api/media?category=&isPublic=&search=&page=&limit=
    POST /api/media                      (multipart: file + alt/caption/description/category/isPublic)
    GET  /api/media/categories           GET  /api/media/stats
    GET  /api/media/category/{category}  POST /api/media/{id}/replace

    Visitors only see public media.
    """

    serializer_class = MediaSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    parser_classes: ClassVar = [MultiPartParser, FormParser, JSONParser]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Media]:
        params = self.request.query_params
        if not _is_staff(self.request):
            return MediaService.public(category=params.get("category"), search=params.get("search"))

        is_public = params.get("isPublic")
        return MediaService.list(
            category=params.get("category"),
            is_public=None if is_public is None else is_public.lower() in TRUTHY,
            search=params.get("search"),
        )

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = MediaUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)

        data = dict(serializer.validated_data)
        upload = data.pop("file")
        result = MediaService.upload(upload, MediaUploadRequest(**data), user=request.user)
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        media = self.get_object()
        serializer = MediaMetadataSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(MediaService.update_metadata(media, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = MediaService.delete(self.get_object())
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[AllowAny])
    def categories(self, request: Request) -> Response:
        return Response(MediaService.categories())

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def stats(self, request: Request) -> Response:
        return Response(MediaService.category_stats())

    @action(detail=False, methods=["get"], url_path=r"category/(?P<category>[a-z_]+)")
    def by_category(self, request: Request, category: str) -> Response:
        if _is_staff(request):
            return self.list_response(MediaService.by_category(category))
        return self.list_response(MediaService.public_by_category(category))

    @action(detail=True, methods=["post", "put"], permission_classes=[IsStaffMember])
    def replace(self, request: Request, pk: str | None = None) -> Response:
        media = self.get_object()
        serializer = MediaReplaceSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(MediaService.replace_file(media, serializer.validated_data["file"]))


# ===============================================================================
# FILE SERVING 📁
# ===============================================================================


@api_view(["GET"])
@permission_classes([AllowAny])
def media_file_api(request: Request, filename: str) -> Any:
    """
    GET /api/media/file/{filename}

    Streams a stored upload. Private media is only served to dashboard accounts.
    """
    media = MediaService.get_by_filename(filename)
    if media is not None and not media.is_public and not _is_staff(request):
        return error_response(not_found("File not found").unwrap_err())

    path_result = MediaService.get_file_path(filename)
    if path_result.is_err():
        return error_response(path_result.unwrap_err())

    path = path_result.unwrap()
    content_type = (media.mime_type if media else None) or mimetypes.guess_type(path.name)[0]
    response = FileResponse(path.open("rb"), content_type=content_type or "application/octet-stream")
    if media is not None:
        response["Content-Disposition"] = f'inline; filename="{media.original_name}"'
    return response
