# ===============================================================================
# PUBLIC SERVICES API SERIALIZERS 🏛️
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.common.constants import SLUG_MAX_LENGTH
from apps.public_services.models import Service, ServiceDocument

SERVICE_FIELDS = (
    "id",
    "name",
    "slug",
    "short_description",
    "description",
    "type",
    "status",
    "priority",
    "price",
    "currency",
    "duration",
    "responsible_department",
    "contact_person",
    "contact_phone",
    "contact_email",
    "working_hours",
    "location",
    "additional_info",
    "requirements",
    "steps",
    "sort_order",
    "is_active",
    "is_public",
    "requires_appointment",
    "is_online",
    "request_count",
    "view_count",
    "created_at",
    "updated_at",
)


class ServiceDocumentSerializer(CamelCaseModelSerializer):
    service_id = serializers.IntegerField(read_only=True)
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = ServiceDocument
        fields = (
            "id",
            "service_id",
            "title",
            "type",
            "description",
            "original_name",
            "mime_type",
            "size",
            "sort_order",
            "is_active",
            "is_public",
            "download_count",
            "download_url",
            "uploaded_at",
        )
        read_only_fields = fields

    def get_download_url(self, obj: ServiceDocument) -> str:
        return f"/services/{obj.service_id}/documents/{obj.pk}/download"


class ServiceSerializer(CamelCaseModelSerializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    documents_count = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = (*SERVICE_FIELDS, "documents_count")
        read_only_fields = fields

    def get_documents_count(self, obj: Service) -> int:
        annotated = getattr(obj, "documents_count", None)
        return annotated if annotated is not None else obj.documents.count()


class ServiceDetailSerializer(ServiceSerializer):
    """Service with its downloadable documents (public documents for visitors)"""

    documents = serializers.SerializerMethodField()

    class Meta(ServiceSerializer.Meta):
        fields = (*ServiceSerializer.Meta.fields, "documents")
        read_only_fields = fields

    def get_documents(self, obj: Service) -> list[dict[str, Any]]:
        queryset = obj.documents.order_by("sort_order", "id")
        if not self.context.get("include_private", False):
            queryset = queryset.filter(is_public=True, is_active=True)
        return ServiceDocumentSerializer(queryset, many=True).data


class ServiceWriteSerializer(CamelCaseSerializer):
    name = serializers.CharField(max_length=255, required=False)
    slug = serializers.CharField(max_length=SLUG_MAX_LENGTH, required=False, allow_blank=True)
    short_description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=Service.TYPE_CHOICES, required=False)
    status = serializers.ChoiceField(choices=Service.STATUS_CHOICES, required=False)
    priority = serializers.ChoiceField(choices=Service.PRIORITY_CHOICES, required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    currency = serializers.CharField(max_length=3, required=False)
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True)
    responsible_department = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contact_person = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contact_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    working_hours = serializers.CharField(max_length=255, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    additional_info = serializers.CharField(required=False, allow_blank=True)
    requirements = serializers.ListField(child=serializers.CharField(), required=False)
    steps = serializers.ListField(child=serializers.JSONField(), required=False)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    is_active = serializers.BooleanField(required=False)
    is_public = serializers.BooleanField(required=False)
    requires_appointment = serializers.BooleanField(required=False)
    is_online = serializers.BooleanField(required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial and not (attrs.get("name") or "").strip():
            raise serializers.ValidationError({"name": "This field is required."})
        return attrs


class ServiceDocumentMetaSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=255, required=False)
    type = serializers.ChoiceField(choices=ServiceDocument.TYPE_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    is_active = serializers.BooleanField(required=False)
    is_public = serializers.BooleanField(required=False)


class ServiceDocumentUploadSerializer(ServiceDocumentMetaSerializer):
    file = serializers.FileField()
