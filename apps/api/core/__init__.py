# ===============================================================================
# API CORE INFRASTRUCTURE - SHARED BASE CLASSES 🏗️
# ===============================================================================

from .pagination import StandardResultsSetPagination
from .permissions import IsAdminRole, IsStaffMember, IsStaffOrReadOnly
from .responses import error_response, result_response, success_response, validation_error_response
from .routers import OptionalSlashRouter, optional_slash_path
from .serializers import CamelCaseModelSerializer, CamelCaseSerializer
from .throttling import AuthThrottle, BurstAPIThrottle, StandardAPIThrottle
from .viewsets import BaseAPIViewSet

__all__ = [
    "AuthThrottle",
    "BaseAPIViewSet",
    "BurstAPIThrottle",
    "CamelCaseModelSerializer",
    "CamelCaseSerializer",
    "IsAdminRole",
    "IsStaffMember",
    "IsStaffOrReadOnly",
    "OptionalSlashRouter",
    "StandardAPIThrottle",
    "StandardResultsSetPagination",
    "error_response",
    "optional_slash_path",
    "result_response",
    "success_response",
    "validation_error_response",
]
