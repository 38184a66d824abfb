"""Request/response helpers shared by the seller API views."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response


def request_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a plain dict (last value wins for forms)."""
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    if not isinstance(data, dict):
        raise TypeError("Request body must be a JSON object.")
    return dict(data)


def validation_error_response(exc: Exception) -> Response:
    """400 response whose ``detail`` flattens a Pydantic error list."""
    if isinstance(exc, PydanticValidationError):
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
    else:
        detail = str(exc)
    return Response({"detail": detail}, status=status.HTTP_400_BAD_REQUEST)
