# ===============================================================================
# API RESULT RESPONSES 📤
# ===============================================================================
#
# Service methods return Ok/Err; these helpers turn them into DRF responses
# with one error envelope: {"success": false, "error": "...", "field": ...}
#

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from rest_framework import status
from rest_framework.response import Response

from apps.common.types import Result, ServiceError

logger = logging.getLogger(__name__)


def error_response(error: Any, status_code: int | None = None) -> Response:
    """Serialize a service error (or a list of per-item errors) into a 4xx response"""
    if isinstance(error, ServiceError):
        body: dict[str, Any] = {"success": False, "error": error.message}
        if error.field:
            body["field"] = error.field
        if error.details:
            body.update(error.details)
        return Response(body, status=status_code or error.http_status)

    if isinstance(error, list):
        errors = [
            {"key": getattr(item, "key", ""), "message": getattr(item, "message", str(item))} for item in error
        ]
        message = errors[0]["message"] if errors else "Validation failed"
        return Response(
            {"success": False, "error": message, "errors": errors},
            status=status_code or status.HTTP_400_BAD_REQUEST,
        )

    return Response({"success": False, "error": str(error)}, status=status_code or status.HTTP_400_BAD_REQUEST)


def result_response(
    result: Result[Any, Any],
    serialize: Callable[[Any], Any] | None = None,
    *,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """``Ok`` -> payload (optionally serialized), ``Err`` -> error envelope"""
    if result.is_err():
        error = result.unwrap_err()
        logger.info(f"⚠️ [API] Service rejected request: {error}")
        return error_response(error)

    value = result.unwrap()
    return Response(serialize(value) if serialize else value, status=status_code)


def success_response(status_code: int = status.HTTP_200_OK, **payload: Any) -> Response:
    """``{"success": true, ...}`` envelope for action endpoints"""
    return Response({"success": True, **payload}, status=status_code)


def validation_error_response(serializer: Any) -> Response:
    """Error envelope for invalid request bodies; first message up front, all of them in ``errors``"""
    errors = serializer.errors
    message = "Invalid request data"
    for field_name, messages in errors.items():
        first = messages[0] if isinstance(messages, list) and messages else messages
        message = f"{field_name}: {first}" if field_name != "non_field_errors" else str(first)
        break
    return Response(
        {"success": False, "error": message, "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
