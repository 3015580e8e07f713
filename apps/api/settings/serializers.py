# ===============================================================================
# SETTINGS API SERIALIZERS ⚙️
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.settings.models import SiteSetting


class SiteSettingSerializer(CamelCaseModelSerializer):
    """Setting row; sensitive values are masked"""

    value = serializers.SerializerMethodField()
    typed_value = serializers.SerializerMethodField()

    class Meta:
        model = SiteSetting
        fields = (
            "id",
            "key",
            "value",
            "typed_value",
            "type",
            "category",
            "label",
            "description",
            "options",
            "is_public",
            "sort_order",
            "updated_at",
        )
        read_only_fields = fields

    def get_value(self, obj: SiteSetting) -> str:
        return obj.get_display_value()

    def get_typed_value(self, obj: SiteSetting) -> Any:
        return None if obj.is_sensitive else obj.get_typed_value()


class SettingValueSerializer(serializers.Serializer):
    value = serializers.JSONField(allow_null=True)


class SettingItemSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=100)
    value = serializers.JSONField(allow_null=True)


class BulkSettingsSerializer(serializers.Serializer):
    settings = SettingItemSerializer(many=True, allow_empty=False)


class ResetSettingsSerializer(CamelCaseSerializer):
    category = serializers.ChoiceField(choices=SiteSetting.CATEGORY_CHOICES, required=False, allow_null=True)


class SettingFileSerializer(serializers.Serializer):
    file = serializers.FileField()
