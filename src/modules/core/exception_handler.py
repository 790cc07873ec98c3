"""Standard error envelope for DRF responses.

Every error rendered by DRF is reshaped into::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

``StoreUnavailable`` escaping a view becomes a 503 instead of a 500.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import StoreUnavailable

logger = structlog.get_logger(__name__)


class ServiceUnavailable(APIException):
    status_code = 503
    default_detail = "Store temporarily unavailable."
    default_code = "store_unavailable"


def standard_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, StoreUnavailable):
        logger.error("api.store_unavailable", error=str(exc))
        exc = ServiceUnavailable()

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten(exc.get_full_details()) if isinstance(exc, APIException) else []
    response.data = {
        "type": "server_error" if response.status_code >= 500 else "client_error",
        "errors": errors,
    }
    return response


def _is_leaf(details: Dict[str, Any]) -> bool:
    return "message" in details and "code" in details


def _flatten(details: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(details, list):
        errors: List[Dict[str, Any]] = []
        for index, item in enumerate(details):
            child = attr
            # nested serializers (many=True) report one dict per element
            if isinstance(item, dict) and not _is_leaf(item):
                child = str(index) if attr is None else f"{attr}.{index}"
            errors.extend(_flatten(item, child))
        return errors
    if isinstance(details, dict):
        if _is_leaf(details):
            return [{"code": details["code"], "detail": str(details["message"]), "attr": attr}]
        errors = []
        for key, value in details.items():
            child = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten(value, child))
        return errors
    return [{"code": "error", "detail": str(details), "attr": attr}]
