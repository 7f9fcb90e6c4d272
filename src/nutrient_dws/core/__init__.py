"""
Core pure functions for the client.

This package contains I/O-free functions for page range parsing, part and
instruction building, request encoding and response mapping.
"""

from .pages import parse_page_ranges

from .parts import (
    build_part,
    build_part_with_pages,
    build_new_page_part,
)

from .instructions import (
    build_output_format,
    build_convert_request,
    build_ocr_request,
    build_watermark_request,
    build_merge_request,
    build_split_request,
    build_redact_request,
    build_duplicate_pages_request,
    build_delete_pages_request,
    build_flatten_request,
    build_rotate_request,
    build_add_page_request,
    build_set_page_label_request,
    format_page_labels,
    validate_json_import_args,
    build_json_import_request,
    build_xfdf_import_request,
)

from .encoding import (
    new_boundary,
    requires_upload,
    read_file_content,
    extract_filename,
    build_multipart_body,
    encode_request,
)

from .responses import (
    handle_response,
    map_status_code_to_exception,
    build_error_details,
)

from .utils import (
    build_auth_headers,
    should_retry_request,
    calculate_retry_delay,
)

__all__ = [
    # Page ranges
    "parse_page_ranges",
    # Parts
    "build_part",
    "build_part_with_pages",
    "build_new_page_part",
    # Instructions
    "build_output_format",
    "build_convert_request",
    "build_ocr_request",
    "build_watermark_request",
    "build_merge_request",
    "build_split_request",
    "build_redact_request",
    "build_duplicate_pages_request",
    "build_delete_pages_request",
    "build_flatten_request",
    "build_rotate_request",
    "build_add_page_request",
    "build_set_page_label_request",
    "format_page_labels",
    "validate_json_import_args",
    "build_json_import_request",
    "build_xfdf_import_request",
    # Encoding
    "new_boundary",
    "requires_upload",
    "read_file_content",
    "extract_filename",
    "build_multipart_body",
    "encode_request",
    # Responses
    "handle_response",
    "map_status_code_to_exception",
    "build_error_details",
    # Transport
    "build_auth_headers",
    "should_retry_request",
    "calculate_retry_delay",
]
