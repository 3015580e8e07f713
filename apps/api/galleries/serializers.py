# ===============================================================================
# GALLERY API SERIALIZERS 📸
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.content.serializers import SortOrderItemSerializer
from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.common.constants import SLUG_MAX_LENGTH, TITLE_MAX_LENGTH
from apps.content.models import STATUS_CHOICES
from apps.galleries.models import Gallery, GalleryImage


class GalleryImageSerializer(CamelCaseModelSerializer):
    url = serializers.CharField(read_only=True)
    gallery_id = serializers.IntegerField(read_only=True)
    media_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = GalleryImage
        fields = (
            "id",
            "gallery_id",
            "media_id",
            "url",
            "filename",
            "original_name",
            "mime_type",
            "size",
            "title",
            "description",
            "alt",
            "sort_order",
            "is_cover",
            "created_at",
        )
        read_only_fields = fields


class GallerySerializer(CamelCaseModelSerializer):
    cover_image = GalleryImageSerializer(read_only=True)
    images_count = serializers.SerializerMethodField()

    class Meta:
        model = Gallery
        fields = (
            "id",
            "title",
            "slug",
            "description",
            "type",
            "status",
            "event_date",
            "cover_image",
            "images_count",
            "sort_order",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_images_count(self, obj: Gallery) -> int:
        annotated = getattr(obj, "images_count", None)
        return annotated if annotated is not None else obj.images.count()


class GalleryDetailSerializer(GallerySerializer):
    images = serializers.SerializerMethodField()

    class Meta(GallerySerializer.Meta):
        fields = (*GallerySerializer.Meta.fields, "images")
        read_only_fields = fields

    def get_images(self, obj: Gallery) -> list[dict[str, Any]]:
        return GalleryImageSerializer(obj.images.order_by("sort_order", "id"), many=True).data


class GalleryWriteSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False)
    slug = serializers.CharField(max_length=SLUG_MAX_LENGTH, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=Gallery.TYPE_CHOICES, required=False)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    event_date = serializers.DateField(required=False, allow_null=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial and not (attrs.get("title") or "").strip():
            raise serializers.ValidationError({"title": "This field is required."})
        return attrs


class GalleryImageMetaSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    alt = serializers.CharField(max_length=255, required=False, allow_blank=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)


class GalleryUploadSerializer(GalleryImageMetaSerializer):
    files = serializers.ListField(child=serializers.FileField(), allow_empty=False)


class CoverSerializer(CamelCaseSerializer):
    image_id = serializers.IntegerField()


class ImageReorderSerializer(serializers.Serializer):
    images = SortOrderItemSerializer(many=True, allow_empty=False)


class MediaImportSerializer(CamelCaseSerializer):
    media_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    filenames = serializers.ListField(child=serializers.CharField(max_length=255), required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not attrs.get("media_ids") and not attrs.get("filenames"):
            raise serializers.ValidationError("Provide mediaIds or filenames")
        return attrs
