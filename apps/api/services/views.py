# ===============================================================================
# PUBLIC SERVICES API VIEWS 🏛️
# ===============================================================================

from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.db.models import QuerySet
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import action
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
    success_response,
    validation_error_response,
)
from apps.common.types import not_found
from apps.public_services.models import Service
from apps.public_services.services import ServiceCatalogService, ServiceCreationRequest, ServiceDocumentRequest

from .serializers import (
    ServiceDetailSerializer,
    ServiceDocumentMetaSerializer,
    ServiceDocumentSerializer,
    ServiceDocumentUploadSerializer,
    ServiceSerializer,
    ServiceWriteSerializer,
)

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


def _is_staff(request: Request) -> bool:
    return IsStaffMember().has_permission(request, None)


def _document(document: Any) -> dict[str, Any]:
    return ServiceDocumentSerializer(document).data


class ServiceViewSet(BaseAPIViewSet):
    """
    🏛️ Citizen services catalog

    GET  /api/services?type=&status=&search=&isPublic=&page=&limit=
    GET  /api/services/statistics        GET  /api/services/document-types
    GET  /api/services/slug/{slug}       POST /api/services/{id}/request
    GET|POST /api/services/{id}/documents
    PATCH|DELETE /api/services/{id}/documents/{documentId}
    GET  /api/services/{id}/documents/{documentId}/download

    Visitors see active public services and their public documents.
    """

    serializer_class = ServiceSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    parser_classes: ClassVar = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Service]:
        params = self.request.query_params
        if not _is_staff(self.request):
            return ServiceCatalogService.public(type=params.get("type"), search=params.get("search"))
        is_public = params.get("isPublic")
        return ServiceCatalogService.list(
            type=params.get("type"),
            status=params.get("status"),
            search=params.get("search"),
            is_public=None if is_public is None else is_public.lower() in TRUTHY,
        )

    def _detail(self, service: Service) -> dict[str, Any]:
        return ServiceDetailSerializer(service, context={"include_private": _is_staff(self.request)}).data

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def retrieve(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        service = self.get_object()
        if not _is_staff(request):
            ServiceCatalogService.increment_view_count(service)
        return Response(self._detail(service))

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = ServiceWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)

        data = dict(serializer.validated_data)
        creation = ServiceCreationRequest(
            name=data.pop("name"),
            type=data.pop("type", "administrative"),
            status=data.pop("status", Service.STATUS_ACTIVE),
            priority=data.pop("priority", "medium"),
            slug=data.pop("slug", ""),
            extra=data,
        )
        return result_response(
            ServiceCatalogService.create(creation), self._detail, status_code=status.HTTP_201_CREATED
        )

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        service = self.get_object()
        serializer = ServiceWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(ServiceCatalogService.update(service, **serializer.validated_data), self._detail)

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        result = ServiceCatalogService.delete(self.get_object())
        if result.is_err():
            return error_response(result.unwrap_err())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def statistics(self, request: Request) -> Response:
        return Response(ServiceCatalogService.statistics())

    @action(detail=False, methods=["get"], url_path="document-types", permission_classes=[AllowAny])
    def document_types(self, request: Request) -> Response:
        return Response(ServiceCatalogService.document_types())

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request: Request, slug: str) -> Response:
        result = ServiceCatalogService.get_by_slug(slug, public_only=not _is_staff(request))
        return result_response(result, self._detail)

    @action(detail=True, methods=["post"], url_path="request", permission_classes=[AllowAny])
    def register_request(self, request: Request, pk: str | None = None) -> Response:
        """Count a citizen request (e.g. the online form was submitted)"""
        service = self.get_object()
        return success_response(requestCount=ServiceCatalogService.increment_request_count(service))

    # ===============================================================================
    # DOCUMENTS 📄
    # ===============================================================================

    @action(detail=True, methods=["get", "post"])
    def documents(self, request: Request, pk: str | None = None) -> Response:
        service = self.get_object()
        if request.method == "GET":
            queryset = (
                ServiceCatalogService.documents(service)
                if _is_staff(request)
                else ServiceCatalogService.public_documents(service)
            )
            return Response(ServiceDocumentSerializer(queryset, many=True).data)

        serializer = ServiceDocumentUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = dict(serializer.validated_data)
        file = data.pop("file")
        data.pop("is_active", None)
        result = ServiceCatalogService.upload_document(
            service, file, ServiceDocumentRequest(title=data.pop("title", ""), **data)
        )
        return result_response(result, _document, status_code=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "put", "delete"],
        url_path=r"documents/(?P<document_id>\d+)",
        permission_classes=[IsStaffMember],
    )
    def document_detail(self, request: Request, document_id: str, pk: str | None = None) -> Response:
        found = ServiceCatalogService.get_document(self.get_object(), int(document_id))
        if found.is_err():
            return error_response(found.unwrap_err())
        document = found.unwrap()

        if request.method == "DELETE":
            ServiceCatalogService.delete_document(document)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ServiceDocumentMetaSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(ServiceCatalogService.update_document(document, **serializer.validated_data), _document)

    @action(
        detail=True,
        methods=["get"],
        url_path=r"documents/(?P<document_id>\d+)/download",
        permission_classes=[AllowAny],
    )
    def download(self, request: Request, document_id: str, pk: str | None = None) -> Any:
        found = ServiceCatalogService.get_document(self.get_object(), int(document_id))
        if found.is_err():
            return error_response(found.unwrap_err())
        document = found.unwrap()
        if not (document.is_public and document.is_active) and not _is_staff(request):
            return error_response(not_found("Document not found").unwrap_err())

        result = ServiceCatalogService.download_document(document)
        if result.is_err():
            return error_response(result.unwrap_err())
        document = result.unwrap()
        return FileResponse(
            document.file.open("rb"),
            as_attachment=True,
            filename=document.original_name,
            content_type=document.mime_type or "application/octet-stream",
        )
