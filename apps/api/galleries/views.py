# ===============================================================================
# GALLERY API VIEWS 📸
# ===============================================================================

from __future__ import annotations

import logging
import mimetypes
from typing import Any, ClassVar

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
    result_response,
    validation_error_response,
)
from apps.common.constants import DEFAULT_PAGE_SIZE
from apps.content.models import STATUS_PUBLISHED
from apps.galleries.models import Gallery
from apps.galleries.services import GalleryCreationRequest, GalleryImageRequest, GalleryService

from .serializers import (
    CoverSerializer,
    GalleryDetailSerializer,
    GalleryImageMetaSerializer,
    GalleryImageSerializer,
    GallerySerializer,
    GalleryUploadSerializer,
    GalleryWriteSerializer,
    ImageReorderSerializer,
    MediaImportSerializer,
)

logger = logging.getLogger(__name__)


def _is_staff(request: Request) -> bool:
    return IsStaffMember().has_permission(request, None)


def _int_param(request: Request, name: str, default: int) -> int:
    try:
        return int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default


def _images(images: Any) -> list[dict[str, Any]]:
    return GalleryImageSerializer(images, many=True).data


class GalleryViewSet(BaseAPIViewSet):
    """
    📸 Galleries and their images

    GET  /api/galleries?status=&type=&search=&page=&limit=   -> {galleries, total, page, totalPages}
    GET  /api/galleries/types            GET  /api/galleries/statistics
    GET  /api/galleries/slug/{slug}
    GET|POST /api/galleries/{id}/images  (multipart ``files``)
    PATCH|DELETE /api/galleries/{id}/images/{imageId}
    PUT  /api/galleries/{id}/images/reorder
    POST /api/galleries/{id}/cover {imageId}
    POST /api/galleries/{id}/media {mediaIds | filenames}
    """

    serializer_class = GalleryDetailSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    parser_classes: ClassVar = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> Any:
        queryset = Gallery.objects.select_related("cover_image").prefetch_related("images")
        if not _is_staff(self.request):
            queryset = queryset.filter(status=STATUS_PUBLISHED)
        return queryset

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        params = request.query_params
        result = GalleryService.list(
            status=params.get("status") if _is_staff(request) else STATUS_PUBLISHED,
            type=params.get("type"),
            search=params.get("search"),
            page=_int_param(request, "page", 1),
            limit=_int_param(request, "limit", DEFAULT_PAGE_SIZE),
        )
        result["galleries"] = GallerySerializer(result["galleries"], many=True).data
        return Response(result)

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = GalleryWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = GalleryService.create(GalleryCreationRequest(**serializer.validated_data), author=request.user)
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        gallery = self.get_object()
        serializer = GalleryWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(GalleryService.update(gallery, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = GalleryService.delete(self.get_object())
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[AllowAny])
    def types(self, request: Request) -> Response:
        return Response(GalleryService.types())

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def statistics(self, request: Request) -> Response:
        return Response(GalleryService.statistics())

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request: Request, slug: str) -> Response:
        return self.respond(GalleryService.get_by_slug(slug, published_only=not _is_staff(request)))

    # ===============================================================================
    # IMAGES 🖼️
    # ===============================================================================

    @action(detail=True, methods=["get", "post"])
    def images(self, request: Request, pk: str | None = None) -> Response:
        gallery = self.get_object()
        if request.method == "GET":
            return Response(_images(GalleryService.images(gallery)))

        payload = {key: request.data.get(key) for key in ("title", "description", "alt") if key in request.data}
        payload["files"] = request.FILES.getlist("files") or request.FILES.getlist("images")
        serializer = GalleryUploadSerializer(data=payload)
        if not serializer.is_valid():
            return validation_error_response(serializer)

        data = dict(serializer.validated_data)
        files = data.pop("files")
        data.pop("sort_order", None)
        result = GalleryService.upload_images(gallery, files, GalleryImageRequest(**data))
        return result_response(result, _images, status_code=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "put", "delete"],
        url_path=r"images/(?P<image_id>\d+)",
        permission_classes=[IsStaffMember],
    )
    def image_detail(self, request: Request, image_id: str, pk: str | None = None) -> Response:
        gallery = self.get_object()
        if request.method == "DELETE":
            result = GalleryService.delete_image(gallery, int(image_id))
            if result.is_err():
                return error_response(result.unwrap_err())
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = GalleryImageMetaSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = GalleryService.update_image(gallery, int(image_id), **serializer.validated_data)
        return result_response(result, lambda image: GalleryImageSerializer(image).data)

    @action(
        detail=True,
        methods=["put", "post", "patch"],
        url_path="images/reorder",
        permission_classes=[IsStaffMember],
    )
    def reorder_images(self, request: Request, pk: str | None = None) -> Response:
        gallery = self.get_object()
        payload = request.data if isinstance(request.data, dict) else {"images": request.data}
        serializer = ImageReorderSerializer(data=payload)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(GalleryService.reorder_images(gallery, serializer.validated_data["images"]), _images)

    @action(detail=True, methods=["post", "put"], permission_classes=[IsStaffMember])
    def cover(self, request: Request, pk: str | None = None) -> Response:
        gallery = self.get_object()
        serializer = CoverSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(GalleryService.set_cover(gallery, serializer.validated_data["image_id"]))

    @action(detail=True, methods=["post"], permission_classes=[IsStaffMember])
    def media(self, request: Request, pk: str | None = None) -> Response:
        """Import images that already live in the media library"""
        gallery = self.get_object()
        serializer = MediaImportSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)

        data = serializer.validated_data
        if "media_ids" in data:
            result = GalleryService.add_existing_media(gallery, data["media_ids"])
        else:
            result = GalleryService.add_existing_media_by_filename(gallery, data.get("filenames", []))
        return result_response(result, _images, status_code=status.HTTP_201_CREATED)


# ===============================================================================
# FILE SERVING 📁
# ===============================================================================


@api_view(["GET"])
@permission_classes([AllowAny])
def gallery_image_file_api(request: Request, filename: str) -> Any:
    """GET /api/galleries/images/{filename}"""
    path_result = GalleryService.get_image_path(filename)
    if path_result.is_err():
        return error_response(path_result.unwrap_err())
    path = path_result.unwrap()
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(path.open("rb"), content_type=content_type)
