# ===============================================================================
# ORGANIZATIONAL STRUCTURE API VIEWS 🏢
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
    result_response,
    validation_error_response,
)
from apps.organization.models import Director, OrganizationalUnit
from apps.organization.services import (
    DirectorCreationRequest,
    DirectorDocumentRequest,
    DirectorService,
    OrganizationService,
    UnitCreationRequest,
)

from .serializers import (
    DirectorDetailSerializer,
    DirectorDocumentMetaSerializer,
    DirectorDocumentSerializer,
    DirectorDocumentUploadSerializer,
    DirectorFileSerializer,
    DirectorSerializer,
    DirectorWriteSerializer,
    MoveUnitSerializer,
    OrganizationalUnitSerializer,
    UnitWriteSerializer,
    serialize_tree,
)

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


def _is_staff(request: Request) -> bool:
    return IsStaffMember().has_permission(request, None)


def _units(units: Any) -> list[dict[str, Any]]:
    return OrganizationalUnitSerializer(units, many=True).data


# ===============================================================================
# ORGANIZATIONAL UNITS 🏢
# ===============================================================================


class OrganizationalUnitViewSet(BaseAPIViewSet):
    """
    🏢 Organizational units

    GET  /api/organizational-structure/units?activeOnly=true
    GET  .../units/tree   .../units/roots   .../units/statistics   .../units/export
    GET  .../units/code/{code}
    GET  .../units/{id}/descendants   .../units/{id}/ancestors
    PATCH .../units/{id}/move {newParentId}
    """

    serializer_class = OrganizationalUnitSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    lookup_value_regex = r"\d+"

    def _active_only(self) -> bool:
        if not _is_staff(self.request):
            return True
        return self.request.query_params.get("activeOnly", "").lower() in TRUTHY

    def get_queryset(self) -> QuerySet[OrganizationalUnit]:
        return OrganizationService.list(active_only=self._active_only())

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = UnitWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = OrganizationService.create(UnitCreationRequest(**serializer.validated_data))
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        unit = self.get_object()
        serializer = UnitWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(OrganizationService.update(unit, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = OrganizationService.delete(self.get_object())
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def tree(self, request: Request) -> Response:
        return Response(serialize_tree(OrganizationService.tree(active_only=self._active_only())))

    @action(detail=False, methods=["get"])
    def roots(self, request: Request) -> Response:
        roots = OrganizationService.roots()
        if self._active_only():
            roots = roots.filter(is_active=True)
        return Response(_units(roots))

    @action(detail=False, methods=["get"])
    def statistics(self, request: Request) -> Response:
        return Response(OrganizationService.statistics())

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def export(self, request: Request) -> Response:
        return Response(OrganizationService.export())

    @action(detail=False, methods=["get"], url_path=r"code/(?P<code>[^/]+)")
    def by_code(self, request: Request, code: str) -> Response:
        return self.respond(OrganizationService.get_by_code(code))

    @action(detail=True, methods=["get"])
    def descendants(self, request: Request, pk: str | None = None) -> Response:
        return Response(_units(OrganizationService.descendants(self.get_object())))

    @action(detail=True, methods=["get"])
    def ancestors(self, request: Request, pk: str | None = None) -> Response:
        return Response(_units(OrganizationService.ancestors(self.get_object())))

    @action(detail=True, methods=["patch", "post"], permission_classes=[IsStaffMember])
    def move(self, request: Request, pk: str | None = None) -> Response:
        unit = self.get_object()
        serializer = MoveUnitSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(OrganizationService.move(unit, serializer.validated_data["new_parent_id"]))


# ===============================================================================
# DIRECTORS 👔
# ===============================================================================


class DirectorViewSet(BaseAPIViewSet):
    """
    👔 Directors and their documents

    GET  /api/organizational-structure/directors/current
    GET  .../directors/statistics     .../directors/document-types
    POST .../directors/{id}/set-current
    GET|POST .../directors/{id}/documents
    PATCH|DELETE .../directors/{id}/documents/{documentId}
    POST .../directors/{id}/biography        POST .../directors/{id}/profile-image
    """

    serializer_class = DirectorSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    parser_classes: ClassVar = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Director]:
        queryset = DirectorService.list()
        if not _is_staff(self.request):
            queryset = queryset.filter(is_active=True)
        return queryset

    def _detail(self, director: Director) -> dict[str, Any]:
        return DirectorDetailSerializer(director, context={"include_private": _is_staff(self.request)}).data

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def retrieve(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return Response(self._detail(self.get_object()))

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = DirectorWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = DirectorService.create(DirectorCreationRequest(**serializer.validated_data))
        return result_response(result, self._detail, status_code=status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        director = self.get_object()
        serializer = DirectorWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(DirectorService.update(director, **serializer.validated_data), self._detail)

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = DirectorService.delete(self.get_object())
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def current(self, request: Request) -> Response:
        director = DirectorService.current()
        return Response(self._detail(director) if director else None)

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def statistics(self, request: Request) -> Response:
        return Response(DirectorService.statistics())

    @action(detail=False, methods=["get"], url_path="document-types", permission_classes=[AllowAny])
    def document_types(self, request: Request) -> Response:
        return Response(DirectorService.document_types())

    @action(detail=True, methods=["post", "patch"], url_path="set-current", permission_classes=[IsStaffMember])
    def set_current(self, request: Request, pk: str | None = None) -> Response:
        return result_response(DirectorService.set_current(self.get_object()), self._detail)

    @action(detail=True, methods=["get", "post"])
    def documents(self, request: Request, pk: str | None = None) -> Response:
        director = self.get_object()
        if request.method == "GET":
            if _is_staff(request):
                queryset = DirectorService.documents(director)
            else:
                queryset = DirectorService.public_documents(director)
            return Response(DirectorDocumentSerializer(queryset, many=True).data)

        serializer = DirectorDocumentUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = dict(serializer.validated_data)
        file = data.pop("file")
        document_request = DirectorDocumentRequest(title=data.pop("title", ""), **data)
        result = DirectorService.upload_document(director, file, document_request)
        return result_response(
            result, lambda document: DirectorDocumentSerializer(document).data, status_code=status.HTTP_201_CREATED
        )

    @action(
        detail=True,
        methods=["patch", "put", "delete"],
        url_path=r"documents/(?P<document_id>\d+)",
        permission_classes=[IsStaffMember],
    )
    def document_detail(self, request: Request, document_id: str, pk: str | None = None) -> Response:
        found = DirectorService.get_document(self.get_object(), int(document_id))
        if found.is_err():
            return error_response(found.unwrap_err())
        document = found.unwrap()

        if request.method == "DELETE":
            DirectorService.delete_document(document)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = DirectorDocumentMetaSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(
            DirectorService.update_document(document, **serializer.validated_data),
            lambda updated: DirectorDocumentSerializer(updated).data,
        )

    def _upload(self, request: Request, upload: Any) -> Response:
        director = self.get_object()
        serializer = DirectorFileSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(upload(director, serializer.validated_data["file"]), self._detail)

    @action(detail=True, methods=["post"], permission_classes=[IsStaffMember])
    def biography(self, request: Request, pk: str | None = None) -> Response:
        return self._upload(request, DirectorService.upload_biography)

    @action(detail=True, methods=["post"], url_path="profile-image", permission_classes=[IsStaffMember])
    def profile_image(self, request: Request, pk: str | None = None) -> Response:
        return self._upload(request, DirectorService.upload_profile_image)


# ===============================================================================
# FILE SERVING 📁
# ===============================================================================


@api_view(["GET"])
@permission_classes([AllowAny])
def director_file_api(request: Request, filename: str) -> Any:
    """GET /api/organizational-structure/directors/files/{filename}"""
    path_result = DirectorService.get_file_path(filename)
    if path_result.is_err():
        return error_response(path_result.unwrap_err())
    path = path_result.unwrap()
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(path.open("rb"), content_type=content_type)
