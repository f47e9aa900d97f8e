"""
Common API utilities for consistent response formatting across all controllers.
"""

from typing import Any, Dict, Optional

from flask import jsonify, request

from petbkk.core.exceptions import ValidationError


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def json_body() -> Dict[str, Any]:
    """Request JSON object; a missing body is treated as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("body", "Request body must be a JSON object")
    return data
