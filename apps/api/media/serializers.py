# ===============================================================================
# MEDIA API SERIALIZERS 🖼️
# ===============================================================================

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.api.content.serializers import AuthorSerializer
from apps.media.models import Media


class MediaSerializer(CamelCaseModelSerializer):
    url = serializers.CharField(read_only=True)
    is_image = serializers.BooleanField(read_only=True)
    uploaded_by = AuthorSerializer(read_only=True)

    class Meta:
        model = Media
        fields = (
            "id",
            "filename",
            "original_name",
            "mime_type",
            "size",
            "url",
            "is_image",
            "alt",
            "caption",
            "description",
            "category",
            "is_public",
            "uploaded_by",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class MediaMetadataSerializer(CamelCaseSerializer):
    alt = serializers.CharField(max_length=255, required=False, allow_blank=True)
    caption = serializers.CharField(max_length=500, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Media.CATEGORY_CHOICES, required=False)
    is_public = serializers.BooleanField(required=False)


class MediaUploadSerializer(MediaMetadataSerializer):
    file = serializers.FileField()


class MediaReplaceSerializer(serializers.Serializer):
    file = serializers.FileField()
