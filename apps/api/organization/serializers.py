# ===============================================================================
# ORGANIZATION API SERIALIZERS 🏢
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.organization.models import Director, DirectorDocument, OrganizationalUnit

# ===============================================================================
# ORGANIZATIONAL UNITS
# ===============================================================================


class OrganizationalUnitSerializer(CamelCaseModelSerializer):
    parent_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrganizationalUnit
        fields = (
            "id",
            "name",
            "code",
            "description",
            "type",
            "parent_id",
            "manager_name",
            "email",
            "phone",
            "location",
            "sort_order",
            "is_active",
            "employee_count",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


def serialize_tree(nodes: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """``[{unit, children}]`` -> unit fields plus nested ``children``"""
    return [
        {**OrganizationalUnitSerializer(node["unit"]).data, "children": serialize_tree(node["children"])}
        for node in nodes
    ]


class UnitWriteSerializer(CamelCaseSerializer):
    name = serializers.CharField(max_length=255, required=False)
    code = serializers.CharField(max_length=50, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=OrganizationalUnit.TYPE_CHOICES, required=False)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    manager_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    is_active = serializers.BooleanField(required=False)
    employee_count = serializers.IntegerField(required=False, min_value=0)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial:
            missing = [name for name in ("name", "code") if not (attrs.get(name) or "").strip()]
            if missing:
                raise serializers.ValidationError({name: "This field is required." for name in missing})
        return attrs


class MoveUnitSerializer(CamelCaseSerializer):
    new_parent_id = serializers.IntegerField(allow_null=True)


# ===============================================================================
# DIRECTORS
# ===============================================================================


class DirectorDocumentSerializer(CamelCaseModelSerializer):
    director_id = serializers.IntegerField(read_only=True)
    url = serializers.SerializerMethodField()

    class Meta:
        model = DirectorDocument
        fields = (
            "id",
            "director_id",
            "title",
            "type",
            "description",
            "document_date",
            "original_name",
            "mime_type",
            "size",
            "is_public",
            "url",
            "uploaded_at",
        )
        read_only_fields = fields

    def get_url(self, obj: DirectorDocument) -> str:
        return Director.file_url(obj.file)


class DirectorSerializer(CamelCaseModelSerializer):
    biography_file_url = serializers.SerializerMethodField()
    profile_image_url = serializers.SerializerMethodField()
    documents_count = serializers.SerializerMethodField()

    class Meta:
        model = Director
        fields = (
            "id",
            "full_name",
            "degree",
            "phone",
            "email",
            "office",
            "biography",
            "biography_file_url",
            "profile_image_url",
            "appointment_date",
            "termination_date",
            "is_current",
            "is_active",
            "documents_count",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_biography_file_url(self, obj: Director) -> str:
        return Director.file_url(obj.biography_file)

    def get_profile_image_url(self, obj: Director) -> str:
        return Director.file_url(obj.profile_image)

    def get_documents_count(self, obj: Director) -> int:
        annotated = getattr(obj, "documents_count", None)
        return annotated if annotated is not None else obj.documents.count()


class DirectorDetailSerializer(DirectorSerializer):
    documents = serializers.SerializerMethodField()

    class Meta(DirectorSerializer.Meta):
        fields = (*DirectorSerializer.Meta.fields, "documents")
        read_only_fields = fields

    def get_documents(self, obj: Director) -> list[dict[str, Any]]:
        queryset = obj.documents.order_by("-uploaded_at")
        if not self.context.get("include_private", False):
            queryset = queryset.filter(is_public=True)
        return DirectorDocumentSerializer(queryset, many=True).data


class DirectorWriteSerializer(CamelCaseSerializer):
    full_name = serializers.CharField(max_length=255, required=False)
    degree = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    office = serializers.CharField(max_length=255, required=False, allow_blank=True)
    biography = serializers.CharField(required=False, allow_blank=True)
    appointment_date = serializers.DateField(required=False)
    termination_date = serializers.DateField(required=False, allow_null=True)
    is_current = serializers.BooleanField(required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial:
            errors = {}
            if not (attrs.get("full_name") or "").strip():
                errors["fullName"] = "This field is required."
            if attrs.get("appointment_date") is None:
                errors["appointmentDate"] = "This field is required."
            if errors:
                raise serializers.ValidationError(errors)
        return attrs


class DirectorDocumentMetaSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=255, required=False)
    type = serializers.ChoiceField(choices=DirectorDocument.TYPE_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    document_date = serializers.DateField(required=False, allow_null=True)
    is_public = serializers.BooleanField(required=False)


class DirectorDocumentUploadSerializer(DirectorDocumentMetaSerializer):
    file = serializers.FileField()


class DirectorFileSerializer(serializers.Serializer):
    file = serializers.FileField()
