# ===============================================================================
# API PAGINATION CLASSES 📄
# ===============================================================================

import math
from typing import Any

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination for CMS API endpoints.
    ``?page=2&limit=20`` -> ``{data: [...], meta: {total, page, limit, totalPages}}``
    """

    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = "limit"
    max_page_size = MAX_PAGE_SIZE

    def get_paginated_response(self, data: Any) -> Response:
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        return Response(
            {
                "data": data,
                "meta": {
                    "total": total,
                    "page": self.page.number,
                    "limit": limit,
                    "totalPages": max(1, math.ceil(total / limit)) if limit else 1,
                },
            }
        )

    def get_paginated_response_schema(self, schema: dict[str, Any]) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "meta": {
                    "type": "object",
                    "properties": {
                        "total": {"type": "integer"},
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "totalPages": {"type": "integer"},
                    },
                },
            },
        }
