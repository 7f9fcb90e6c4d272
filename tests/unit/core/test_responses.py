import json

import pytest

from nutrient_dws.core.responses import (
    build_error_details,
    handle_response,
    map_status_code_to_exception,
)
from nutrient_dws.exceptions import APIError, AuthenticationError, NutrientError


class TestHandleResponse:
    """Test status code mapping"""

    @pytest.mark.parametrize("status_code", [200, 201])
    def test_success_returns_raw_bytes(self, status_code):
        assert handle_response(status_code, b"%PDF-1.7 bytes") == b"%PDF-1.7 bytes"

    def test_empty_success_body(self):
        assert handle_response(200, None) == b""

    def test_401_is_authentication_error(self):
        with pytest.raises(AuthenticationError, match="Invalid or missing API key"):
            handle_response(401, b'{"error": "unauthorized"}')

    def test_500_with_text_body(self):
        with pytest.raises(APIError) as exc_info:
            handle_response(500, b"Internal meltdown")

        error = exc_info.value
        assert "Internal meltdown" in str(error)
        assert "Raw response: Internal meltdown" in str(error)
        assert error.status_code == 500
        assert error.response_body == "Internal meltdown"

    def test_400_with_failing_paths(self):
        body = json.dumps(
            {"error": {"failingPaths": [{"path": "x", "details": "y"}]}}
        ).encode()

        with pytest.raises(APIError) as exc_info:
            handle_response(400, body)

        message = str(exc_info.value)
        assert "x" in message
        assert "y" in message
        assert "API Error Details:" in message
        assert exc_info.value.response_body == body.decode()

    def test_json_body_without_failing_paths(self):
        with pytest.raises(APIError) as exc_info:
            handle_response(429, b'{"error": {"message": "slow down"}}')

        assert str(exc_info.value) == "API request failed: Too Many Requests"
        assert exc_info.value.status_code == 429

    def test_reason_phrase_is_used(self):
        error = map_status_code_to_exception(503, "down", reason="Service Gone")
        assert str(error).startswith("API request failed: Service Gone")

    def test_unknown_status_code(self):
        error = map_status_code_to_exception(599, "odd")
        assert str(error).startswith("API request failed: HTTP 599")

    def test_errors_share_base_class(self):
        assert issubclass(APIError, NutrientError)
        assert issubclass(AuthenticationError, NutrientError)


class TestBuildErrorDetails:
    def test_breakdown_per_path(self):
        details = build_error_details(
            json.dumps(
                {
                    "error": {
                        "failingPaths": [
                            {"path": "$.parts[0]", "details": "missing file"},
                            {"path": "$.actions[1]", "details": "unknown type"},
                        ]
                    }
                }
            )
        )
        assert details == (
            "\nAPI Error Details:\n"
            "  $.parts[0]: missing file\n"
            "  $.actions[1]: unknown type\n"
        )

    def test_non_object_json(self):
        assert build_error_details("[1, 2]") == ""

    def test_invalid_json(self):
        assert build_error_details("<html>oops</html>") == "\nRaw response: <html>oops</html>"
