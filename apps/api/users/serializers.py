# ===============================================================================
# USER API SERIALIZERS 👤
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.common.constants import PASSWORD_MAX_LENGTH
from apps.users.models import User


class UserSerializer(CamelCaseModelSerializer):
    """Dashboard account representation (never exposes the password hash)"""

    class Meta:
        model = User
        fields = ("id", "email", "name", "role", "is_active", "last_login", "created_at", "updated_at")
        read_only_fields = fields


class UserWithStatsSerializer(UserSerializer):
    posts_count = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = (*UserSerializer.Meta.fields, "posts_count")
        read_only_fields = fields

    def get_posts_count(self, obj: User) -> int:
        annotated = getattr(obj, "posts_count", None)
        return annotated if annotated is not None else obj.posts.count()


class UserWriteSerializer(CamelCaseSerializer):
    """Create/update payload; the service layer enforces uniqueness and password rules"""

    email = serializers.EmailField(required=False)
    name = serializers.CharField(max_length=100, required=False)
    password = serializers.CharField(
        max_length=PASSWORD_MAX_LENGTH, required=False, write_only=True, trim_whitespace=False
    )
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial:
            missing = [name for name in ("email", "name", "password") if not attrs.get(name)]
            if missing:
                raise serializers.ValidationError({name: "This field is required." for name in missing})
        return attrs


class UserStatusSerializer(CamelCaseSerializer):
    is_active = serializers.BooleanField()


class ProfileUpdateSerializer(CamelCaseSerializer):
    """Own-profile edits: no role or status changes"""

    email = serializers.EmailField(required=False)
    name = serializers.CharField(max_length=100, required=False)
    password = serializers.CharField(
        max_length=PASSWORD_MAX_LENGTH, required=False, write_only=True, trim_whitespace=False
    )
