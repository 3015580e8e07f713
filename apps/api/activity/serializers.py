# ===============================================================================
# ACTIVITY API SERIALIZERS 📜
# ===============================================================================

from rest_framework import serializers

from apps.activity.models import ActivityLog
from apps.api.core import CamelCaseModelSerializer


class ActivityLogSerializer(CamelCaseModelSerializer):
    user = serializers.SerializerMethodField()

    class Meta:
        model = ActivityLog
        fields = ("id", "type", "action", "title", "object_id", "status", "url", "user", "metadata", "created_at")
        read_only_fields = fields

    def get_user(self, obj: ActivityLog) -> dict | None:
        if obj.user is None:
            return None
        return {"id": obj.user.pk, "name": obj.user.name, "email": obj.user.email}
