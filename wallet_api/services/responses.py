"""
JSON envelope helpers shared by all route groups.
Success: {"success": true, "data": ...}. Failure: {"success": false, "error": "<message>"}.
"""
from typing import Any

from robyn import jsonify
from robyn.robyn import Response

UNKNOWN_ERROR = "Unknown error"


def json_response(status_code: int, payload: dict) -> Response:
    return Response(
        status_code=status_code,
        headers={"Content-Type": "application/json"},
        description=jsonify(payload),
    )


def build_success_response(data: Any, status_code: int = 200) -> Response:
    return json_response(status_code, {"success": True, "data": data})


def build_error_response(message: str, status_code: int = 400) -> Response:
    return json_response(status_code, {"success": False, "error": message})


def error_message(error: BaseException | None) -> str:
    """Return the exception's message, or UNKNOWN_ERROR when it has none."""
    if error is None:
        return UNKNOWN_ERROR
    message = str(error).strip()
    return message or UNKNOWN_ERROR


def build_exception_response(error: BaseException | None, status_code: int = 500) -> Response:
    return build_error_response(error_message(error), status_code=status_code)
