"""
Test retry behaviour on transport failures.

Retries are opt-in and only cover transport errors; HTTP error statuses
are returned to the caller on the first attempt.
"""

from unittest.mock import Mock, patch

import httpx
import pytest

from nutrient_dws import NutrientClient
from nutrient_dws.core.utils import calculate_retry_delay, should_retry_request
from tests.helpers.transport import PDF_BYTES


def ok_response():
    return httpx.Response(200, content=PDF_BYTES)


class TestClientRetries:
    @pytest.fixture
    def client_with_retries(self):
        with NutrientClient(api_key="key", max_retries=3, retry_delay=0.1) as client:
            yield client

    @pytest.fixture
    def client_no_retries(self):
        with NutrientClient(api_key="key") as client:
            yield client

    def test_retry_on_transient_network_failure(self, client_with_retries):
        side_effect = [httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), ok_response()]

        with patch.object(client_with_retries._client, "request", side_effect=side_effect) as request, \
             patch("nutrient_dws.client.time.sleep") as sleep:
            result = client_with_retries.convert("https://example.com/a.docx", to="pdf")

        assert result == PDF_BYTES
        assert request.call_count == 3
        assert [c.args[0] for c in sleep.call_args_list] == [0.1, 0.2]

    def test_retry_exhaustion(self, client_with_retries):
        with patch.object(
            client_with_retries._client, "request", side_effect=httpx.ConnectError("down")
        ) as request, patch("nutrient_dws.client.time.sleep"):
            with pytest.raises(httpx.ConnectError, match="down"):
                client_with_retries.flatten("https://example.com/a.pdf")

        assert request.call_count == 4

    def test_no_retries_by_default(self, client_no_retries):
        with patch.object(
            client_no_retries._client, "request", side_effect=httpx.ConnectError("down")
        ) as request:
            with pytest.raises(httpx.ConnectError):
                client_no_retries.flatten("https://example.com/a.pdf")

        assert request.call_count == 1

    def test_request_body_is_encoded_once(self, client_with_retries, sample_pdf):
        bodies = []

        def fake_request(method, url, content=None, headers=None):
            bodies.append(content)
            if len(bodies) == 1:
                raise httpx.ConnectError("refused")
            return ok_response()

        with open(str(sample_pdf), "rb") as handle, \
             patch.object(client_with_retries._client, "request", side_effect=fake_request), \
             patch("nutrient_dws.client.time.sleep"):
            client_with_retries.flatten(handle)

        assert len(bodies) == 2
        assert bodies[0] == bodies[1]
        assert PDF_BYTES in bodies[1]


class TestRetryHelpers:
    def test_should_retry_transport_errors(self):
        assert should_retry_request(0, 2, httpx.ConnectTimeout("t"))
        assert should_retry_request(1, 2, httpx.RemoteProtocolError("p")) is False
        assert should_retry_request(1, 2, httpx.ReadError("r"))

    def test_should_not_retry_when_exhausted(self):
        assert not should_retry_request(2, 2, httpx.ConnectError("c"))

    def test_should_not_retry_other_errors(self):
        assert not should_retry_request(0, 3, ValueError("v"))
        assert not should_retry_request(0, 3, Mock(spec=Exception))

    def test_exponential_backoff(self):
        assert calculate_retry_delay(0, 0.5) == 0.5
        assert calculate_retry_delay(1, 0.5) == 1.0
        assert calculate_retry_delay(3, 0.5) == 4.0
