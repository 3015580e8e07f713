# ===============================================================================
# API BASE VIEWSETS 🎯
# ===============================================================================

from __future__ import annotations

from typing import Any, ClassVar

from django.db.models import QuerySet
from rest_framework import viewsets
from rest_framework.response import Response

from apps.common.types import Result

from .pagination import StandardResultsSetPagination
from .permissions import IsStaffMember
from .responses import result_response
from .throttling import StandardAPIThrottle


class BaseAPIViewSet(viewsets.ModelViewSet):
    """
    Base viewset that CMS API endpoints extend.

    Provides consistent:
    - Token authentication & staff permissions
    - ``{data, meta}`` pagination
    - Rate limiting
    - Result -> Response mapping for service calls

    Writes go through the domain service layer: subclasses override
    ``create``/``update``/``destroy`` and answer with :meth:`respond`.
    """

    permission_classes: ClassVar = [IsStaffMember]
    pagination_class = StandardResultsSetPagination
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get_queryset(self) -> QuerySet:
        queryset = getattr(self, "queryset", None)
        if queryset is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define 'queryset' or override 'get_queryset()'"
            )
        return queryset.all()

    def serialize(self, instance: Any, many: bool = False) -> Any:
        return self.get_serializer(instance, many=many).data

    def respond(self, result: Result[Any, Any], status_code: int = 200) -> Response:
        """Serialize ``Ok`` values with this viewset's serializer"""
        return result_response(result, self.serialize, status_code=status_code)

    def list_response(self, queryset: Any) -> Response:
        """Paginated when ``page`` or ``limit`` is given, plain list otherwise"""
        if "page" in self.request.query_params or "limit" in self.request.query_params:
            page = self.paginate_queryset(queryset)
            if page is not None:
                return self.get_paginated_response(self.serialize(page, many=True))
        return Response(self.serialize(queryset, many=True))
