"""
Pure functions for mapping HTTP responses to results or exceptions.
"""

import json
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Union

from ..exceptions import APIError, AuthenticationError

SUCCESS_CODES = (200, 201)


def decode_body(body: Union[bytes, str, None]) -> str:
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return body.decode("utf-8", errors="replace")


def reason_phrase(status_code: int, reason: Optional[str] = None) -> str:
    if reason:
        return reason
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return f"HTTP {status_code}"


def extract_failing_paths(error_data: Any) -> Optional[List[Dict[str, Any]]]:
    """Return ``error.failingPaths`` from a parsed error body, if present."""
    if not isinstance(error_data, dict):
        return None
    error = error_data.get("error")
    if not isinstance(error, dict):
        return None
    failing_paths = error.get("failingPaths")
    if not isinstance(failing_paths, list):
        return None
    return failing_paths


def format_failing_paths(failing_paths: List[Dict[str, Any]]) -> str:
    lines = ["", "API Error Details:"]
    for path_error in failing_paths:
        if isinstance(path_error, dict):
            lines.append(f"  {path_error.get('path')}: {path_error.get('details')}")
        else:
            lines.append(f"  {path_error}")
    return "\n".join(lines) + "\n"


def build_error_details(response_text: str) -> str:
    """
    Build the diagnostic suffix for an API error message.

    A JSON body contributes its failing-path breakdown, if it has one; any
    other body is appended verbatim.
    """
    try:
        error_data = json.loads(response_text)
    except ValueError:
        return f"\nRaw response: {response_text}"

    failing_paths = extract_failing_paths(error_data)
    if failing_paths is None:
        return ""
    return format_failing_paths(failing_paths)


def map_status_code_to_exception(
    status_code: int, response_text: str, reason: Optional[str] = None
) -> Exception:
    """Map a non-success status code to the matching client exception."""
    if status_code == 401:
        return AuthenticationError(
            "Invalid or missing API key", {"status_code": status_code}
        )

    message = (
        f"API request failed: {reason_phrase(status_code, reason)}"
        f"{build_error_details(response_text)}"
    )
    return APIError(
        message,
        status_code=status_code,
        response_body=response_text,
        details={"status_code": status_code},
    )


def handle_response(
    status_code: int,
    body: Union[bytes, str, None],
    reason: Optional[str] = None,
) -> bytes:
    """
    Return the document bytes of a successful response, or raise.

    Raises:
        AuthenticationError: For 401 responses
        APIError: For any other non-success status
    """
    if status_code in SUCCESS_CODES:
        if isinstance(body, str):
            return body.encode("utf-8")
        return body or b""

    raise map_status_code_to_exception(status_code, decode_body(body), reason)
