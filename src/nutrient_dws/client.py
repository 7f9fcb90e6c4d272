"""
Nutrient DWS Processor API client.

Thin wrapper over the pure functions in ``nutrient_dws.core``: each
operation builds a BuildRequest, encodes it, sends one ``POST /build`` and
maps the response to document bytes or an exception.
"""

import json
import os
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

import httpx

from .config import (
    BUILD_ENDPOINT,
    DEFAULT_BASE_URL,
    Settings,
    get_logger,
    get_settings,
)
from .core.encoding import count_uploads, encode_request, new_boundary
from .core.instructions import (
    build_add_page_request,
    build_convert_request,
    build_delete_pages_request,
    build_duplicate_pages_request,
    build_flatten_request,
    build_json_import_request,
    build_merge_request,
    build_ocr_request,
    build_redact_request,
    build_rotate_request,
    build_set_page_label_request,
    build_split_request,
    build_watermark_request,
    build_xfdf_import_request,
    validate_json_import_args,
)
from .core.responses import handle_response
from .core.utils import build_auth_headers, calculate_retry_delay, should_retry_request
from .exceptions import ArgumentError, NutrientError
from .models import (
    BuildRequest,
    FileInput,
    LocalPath,
    PageLabel,
    WatermarkOptions,
    as_file_reference,
)

USER_AGENT = "nutrient-dws-python/1.0.0"

logger = get_logger("client")


@contextmanager
def temporary_json_file(json_data: str) -> Iterator[str]:
    """Write JSON text to a temporary file and remove it on exit."""
    handle = tempfile.NamedTemporaryFile(
        mode="w", suffix=".json", prefix="annotations_", delete=False, encoding="utf-8"
    )
    try:
        with handle:
            handle.write(json_data)
        yield handle.name
    finally:
        try:
            os.unlink(handle.name)
        except FileNotFoundError:
            pass


class NutrientClient:
    """
    Client for the Nutrient DWS Processor API.

    Every operation performs one blocking request and returns the resulting
    document as bytes. File arguments accept a path, an open binary stream,
    raw bytes, an ``http(s)://`` URL, or an explicit FileReference.

    Examples:
        Basic usage:
        >>> with NutrientClient(api_key="pdf_live_...") as client:
        ...     pdf = client.convert("report.docx", to="pdf")

        From the environment (``NUTRIENT_API_KEY``):
        >>> client = NutrientClient.from_env()

        With retries on transport failures:
        >>> client = NutrientClient(api_key="...", max_retries=3, retry_delay=0.5)
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60,
        max_retries: int = 0,
        retry_delay: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Nutrient DWS API key
            base_url: Service base URL
            timeout: Request timeout in seconds
            max_retries: Retries after transport failures (HTTP errors are
                never retried)
            retry_delay: Base delay in seconds for exponential backoff
            transport: Optional httpx transport, e.g. for proxies or tests

        Raises:
            ArgumentError: If the API key is empty or missing
        """
        if not api_key:
            raise ArgumentError("API key is required")

        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._api_key = api_key
        self._boundary = new_boundary()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=build_auth_headers(api_key, USER_AGENT),
            transport=transport,
        )

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None, **overrides: Any) -> "NutrientClient":
        """
        Create a client from ``NUTRIENT_*`` environment settings.

        Package logging is switched on when ``NUTRIENT_DEBUG`` or
        ``NUTRIENT_LOG_LEVEL`` is set.
        """
        settings = settings or get_settings()
        if settings.debug or "log_level" in settings.model_fields_set:
            settings.setup_logging()
        options = {
            "api_key": settings.api_key,
            "base_url": settings.base_url,
            "timeout": settings.timeout_seconds,
            "max_retries": settings.max_retries,
            "retry_delay": settings.retry_delay,
        }
        options.update(overrides)
        return cls(**options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    def __enter__(self) -> "NutrientClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def convert(self, file: FileInput, to: str) -> bytes:
        """
        Convert a document to another format.

        Args:
            file: Input document
            to: One of pdf, png, jpg, jpeg, webp, tiff, docx, xlsx, pptx

        Raises:
            UnsupportedFormatError: If ``to`` is not supported
        """
        request = build_convert_request(as_file_reference(file), to)
        return self._send("convert", request)

    def ocr(self, file: FileInput, language: str = "eng") -> bytes:
        """Run OCR and return a searchable PDF."""
        request = build_ocr_request(as_file_reference(file), language)
        return self._send("ocr", request)

    def watermark(
        self,
        file: FileInput,
        text: Optional[str] = None,
        image: Optional[FileInput] = None,
        width: Union[int, float, str] = 200,
        height: Union[int, float, str] = 50,
        font_size: Optional[Union[int, float]] = None,
        font_family: Optional[str] = None,
        font_color: Optional[str] = None,
        opacity: Optional[float] = None,
        rotation: Optional[Union[int, float]] = None,
        top: Optional[Union[int, float, str]] = None,
        left: Optional[Union[int, float, str]] = None,
        right: Optional[Union[int, float, str]] = None,
        bottom: Optional[Union[int, float, str]] = None,
    ) -> bytes:
        """
        Add a text or image watermark.

        Exactly one of ``text`` and ``image`` must be given. Options left as
        None are not sent.

        Raises:
            ArgumentError: If neither or both of text and image are given
        """
        options = WatermarkOptions(
            width=width,
            height=height,
            font_size=font_size,
            font_family=font_family,
            font_color=font_color,
            opacity=opacity,
            rotation=rotation,
            top=top,
            left=left,
            right=right,
            bottom=bottom,
        )
        request = build_watermark_request(
            as_file_reference(file),
            text=text,
            image=as_file_reference(image) if image is not None else None,
            options=options,
        )
        return self._send("watermark", request)

    def merge(self, files: Sequence[FileInput]) -> bytes:
        """Merge documents in the given order."""
        request = build_merge_request([as_file_reference(file) for file in files])
        return self._send("merge", request)

    def split(self, file: FileInput, ranges: str) -> bytes:
        """
        Extract the pages named by a 1-based range string such as ``"1,3-5"``.

        Raises:
            InvalidRangeError: If the range string is malformed
        """
        request = build_split_request(as_file_reference(file), ranges)
        return self._send("split", request)

    def redact(self, file: FileInput, text: Sequence[str] = ()) -> bytes:
        """Redact every occurrence of each term."""
        request = build_redact_request(as_file_reference(file), text)
        return self._send("redact", request)

    def duplicate_pages(
        self,
        file: FileInput,
        page: Optional[int] = None,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
    ) -> bytes:
        """Prepend a copy of a page, a page range, or the whole document."""
        request = build_duplicate_pages_request(
            as_file_reference(file), page=page, start_page=start_page, end_page=end_page
        )
        return self._send("duplicate_pages", request)

    def delete_pages(
        self,
        file: FileInput,
        page: Optional[int] = None,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
        keep_before: Optional[int] = None,
        keep_after: Optional[int] = None,
    ) -> bytes:
        """
        Delete pages by zero-based index.

        Raises:
            ArgumentError: If no selector is given
        """
        request = build_delete_pages_request(
            as_file_reference(file),
            page=page,
            start_page=start_page,
            end_page=end_page,
            keep_before=keep_before,
            keep_after=keep_after,
        )
        return self._send("delete_pages", request)

    def flatten(self, file: FileInput) -> bytes:
        """Flatten annotations and form fields into page content."""
        request = build_flatten_request(as_file_reference(file))
        return self._send("flatten", request)

    def rotate(self, file: FileInput, rotate_by: int) -> bytes:
        """
        Rotate every page.

        Raises:
            InvalidRotationError: If ``rotate_by`` is not 90, 180 or 270
        """
        request = build_rotate_request(as_file_reference(file), rotate_by)
        return self._send("rotate", request)

    def add_page(
        self,
        file: FileInput,
        position: Optional[str] = None,
        after_page: Optional[int] = None,
        page_count: int = 1,
        page_size: str = "Letter",
    ) -> bytes:
        """
        Insert blank pages at the beginning, the end, or after a page.

        Raises:
            ArgumentError: If the placement is unrecognised
        """
        request = build_add_page_request(
            as_file_reference(file),
            position=position,
            after_page=after_page,
            page_count=page_count,
            page_size=page_size,
        )
        return self._send("add_page", request)

    def set_page_label(
        self, file: FileInput, labels: Sequence[Union[PageLabel, Mapping[str, Any]]]
    ) -> bytes:
        """
        Set page labels.

        Each entry has a ``label`` plus either ``page`` or ``start_page`` and
        ``end_page``.
        """
        request = build_set_page_label_request(as_file_reference(file), labels)
        return self._send("set_page_label", request)

    def json_import(
        self,
        file: FileInput,
        json_data: Optional[Union[str, Mapping[str, Any]]] = None,
        json_file: Optional[FileInput] = None,
    ) -> bytes:
        """
        Import Instant JSON annotations from JSON text, a mapping, or a file.

        Raises:
            ArgumentError: Unless exactly one of json_data and json_file is given
        """
        validate_json_import_args(json_data, json_file)
        document = as_file_reference(file)

        if json_data is not None and not isinstance(json_data, str):
            json_data = json.dumps(json_data)

        if json_file is not None:
            request = build_json_import_request(document, as_file_reference(json_file))
            return self._send("json_import", request)

        with temporary_json_file(json_data) as path:
            request = build_json_import_request(document, LocalPath(path))
            return self._send("json_import", request)

    def xfdf_import(self, file: FileInput, xfdf_file: FileInput) -> bytes:
        """Import annotations from an XFDF file."""
        request = build_xfdf_import_request(
            as_file_reference(file), as_file_reference(xfdf_file)
        )
        return self._send("xfdf_import", request)

    def _send(self, operation: str, request: BuildRequest) -> bytes:
        body, content_type = encode_request(request, self._boundary)
        logger.info(
            "Sending %s request (%s, %d upload(s))",
            operation,
            content_type.split(";")[0],
            count_uploads(request),
        )

        response = self._request_with_retries(body, content_type)

        try:
            return handle_response(
                response.status_code, response.content, response.reason_phrase
            )
        except NutrientError as e:
            logger.error("%s request failed: %s", operation, e)
            raise

    def _request_with_retries(
        self, body: Union[bytes, str], content_type: str
    ) -> httpx.Response:
        attempt = 0
        while True:
            try:
                return self._client.request(
                    "POST",
                    BUILD_ENDPOINT,
                    content=body,
                    headers={"Content-Type": content_type},
                )
            except httpx.HTTPError as e:
                if not should_retry_request(attempt, self.max_retries, e):
                    raise
                delay = calculate_retry_delay(attempt, self.retry_delay)
                logger.warning(
                    "Request attempt %d failed (%s), retrying in %.2fs",
                    attempt + 1,
                    e,
                    delay,
                )
                time.sleep(delay)
                attempt += 1
