# ===============================================================================
# API SERIALIZER BASE CLASSES 🐫
# ===============================================================================
#
# Models use snake_case; the frontend speaks camelCase. These bases convert
# keys at the serializer boundary so field declarations stay pythonic.
#

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rest_framework import serializers

from apps.common.utils import camel_to_snake, snake_to_camel


def _snake_keys(data: Any) -> Any:
    if not isinstance(data, Mapping):
        return data
    if hasattr(data, "getlist"):
        # QueryDict from multipart forms: keep repeated keys as lists
        return {
            camel_to_snake(key): values if len(values) > 1 else values[0]
            for key, values in data.lists()
        }
    return {camel_to_snake(key): value for key, value in data.items()}


class CamelCaseMixin:
    """Accept camelCase input and emit camelCase output"""

    def to_internal_value(self, data: Any) -> Any:
        return super().to_internal_value(_snake_keys(data))  # type: ignore[misc]

    def to_representation(self, instance: Any) -> Any:
        data = super().to_representation(instance)  # type: ignore[misc]
        return {snake_to_camel(key): value for key, value in data.items()}


class CamelCaseSerializer(CamelCaseMixin, serializers.Serializer):
    pass


class CamelCaseModelSerializer(CamelCaseMixin, serializers.ModelSerializer):
    pass
