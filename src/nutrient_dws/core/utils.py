"""
Utility functions for transport handling.
"""

from typing import Dict

import httpx


def build_auth_headers(api_key: str, user_agent: str) -> Dict[str, str]:
    """Build authentication headers."""
    return {"Authorization": f"Bearer {api_key}", "User-Agent": user_agent}


def should_retry_request(attempt: int, max_retries: int, exception: Exception) -> bool:
    """Determine if a request should be retried after a transport failure."""
    if attempt >= max_retries:
        return False

    retry_exceptions = (
        httpx.TimeoutException,
        httpx.NetworkError,
    )

    return isinstance(exception, retry_exceptions)


def calculate_retry_delay(attempt: int, base_delay: float) -> float:
    """Calculate exponential backoff delay for retry attempts."""
    return base_delay * (2**attempt)
