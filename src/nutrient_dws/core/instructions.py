"""
Pure functions for building per-operation build requests.

Each builder validates its arguments, then returns a BuildRequest holding
the instruction document and the manifest of files it references. Nothing
here reads files or touches the network.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    ArgumentError,
    InvalidRotationError,
    UnsupportedFormatError,
    UnsupportedFileTypeError,
)
from ..models import (
    BuildRequest,
    FileReference,
    InstructionDocument,
    PageLabel,
    RemoteURL,
    WatermarkOptions,
)
from .pages import parse_page_ranges
from .parts import (
    DEFAULT_PAGE_SIZE,
    build_new_page_part,
    build_part,
    build_part_with_pages,
    part_pages,
)

DOCUMENT_KEY = "document"
WATERMARK_IMAGE_KEY = "watermark_image"
ANNOTATIONS_KEY = "annotations.json"
XFDF_KEY = "xfdf_data"

IMAGE_FORMATS = ("png", "jpg", "jpeg", "webp", "tiff")
OFFICE_FORMATS = ("docx", "xlsx", "pptx")
SUPPORTED_FORMATS = ("pdf",) + IMAGE_FORMATS + OFFICE_FORMATS
IMAGE_DPI = 300

ROTATION_ANGLES = (90, 180, 270)
PAGE_POSITIONS = ("beginning", "end")


def _require_upload(file: FileReference, role: str) -> FileReference:
    if isinstance(file, RemoteURL):
        raise UnsupportedFileTypeError(
            f"{role} must be a local file or stream, not a URL",
            {"role": role, "url": file.url},
        )
    return file


def _single_document(
    file: FileReference,
    actions: Optional[List[Dict[str, Any]]] = None,
    output: Optional[Dict[str, Any]] = None,
) -> BuildRequest:
    return BuildRequest(
        InstructionDocument(
            parts=[build_part(file, DOCUMENT_KEY)], actions=actions, output=output
        ),
        {DOCUMENT_KEY: file},
    )


def build_output_format(to: str) -> Optional[Dict[str, Any]]:
    """
    Map a target format to an output block.

    Returns None for PDF, which is the service default.

    Raises:
        UnsupportedFormatError: If the format is not supported
    """
    target = to.lower() if isinstance(to, str) else to

    if target == "pdf":
        return None
    if target in IMAGE_FORMATS:
        return {"type": "image", "format": target, "dpi": IMAGE_DPI}
    if target in OFFICE_FORMATS:
        return {"type": target}

    raise UnsupportedFormatError(
        f"Unsupported output format: {to}. "
        f"Supported formats: {', '.join(SUPPORTED_FORMATS)}",
        {"format": to, "supported": list(SUPPORTED_FORMATS)},
    )


def build_convert_request(file: FileReference, to: str) -> BuildRequest:
    return _single_document(file, output=build_output_format(to))


def build_ocr_request(file: FileReference, language: str = "eng") -> BuildRequest:
    return _single_document(file, actions=[{"type": "ocr", "language": language}])


def build_watermark_request(
    file: FileReference,
    text: Optional[str] = None,
    image: Optional[FileReference] = None,
    options: Optional[WatermarkOptions] = None,
) -> BuildRequest:
    """
    Build a text or image watermark request.

    Exactly one of ``text`` and ``image`` must be given. Font options only
    apply to text watermarks; an image watermark is uploaded as a second
    part under the ``watermark_image`` role.

    Raises:
        ArgumentError: If neither or both of text and image are given
        UnsupportedFileTypeError: If the image is a URL
    """
    if (text is None) == (image is None):
        raise ArgumentError("Either text or image must be provided")

    options = options or WatermarkOptions()
    parts = [build_part(file, DOCUMENT_KEY)]
    files: Dict[str, FileReference] = {DOCUMENT_KEY: file}

    action: Dict[str, Any] = {
        "type": "watermark",
        "width": options.width,
        "height": options.height,
    }

    if text is not None:
        action["text"] = text
        action.update(options.text_fields())
    else:
        image = _require_upload(image, WATERMARK_IMAGE_KEY)
        parts.append(build_part(image, WATERMARK_IMAGE_KEY))
        files[WATERMARK_IMAGE_KEY] = image
        action["image"] = WATERMARK_IMAGE_KEY

    action.update(options.geometry_fields())

    return BuildRequest(InstructionDocument(parts=parts, actions=[action]), files)


def build_merge_request(files: Sequence[FileReference]) -> BuildRequest:
    """Build a merge request; part order is the merge order."""
    if not files:
        raise ArgumentError("At least one file is required to merge")

    parts = []
    file_map: Dict[str, FileReference] = {}
    for index, file in enumerate(files):
        file_key = f"file_{index}"
        parts.append(build_part(file, file_key))
        file_map[file_key] = file

    return BuildRequest(InstructionDocument(parts=parts), file_map)


def build_split_request(file: FileReference, ranges: str) -> BuildRequest:
    """
    Build a request selecting the pages named by ``ranges``.

    The parsed indexes are attached to a single part, so the result is one
    document holding exactly those pages in the parsed order.
    """
    page_indexes = parse_page_ranges(ranges)
    part = build_part(file, DOCUMENT_KEY)

    if isinstance(file, RemoteURL):
        part["file"]["pageIndexes"] = page_indexes
    else:
        part["pageIndexes"] = page_indexes

    return BuildRequest(InstructionDocument(parts=[part]), {DOCUMENT_KEY: file})


def build_redact_request(file: FileReference, text: Iterable[str] = ()) -> BuildRequest:
    """One createRedactions action per term, then a single applyRedactions."""
    if isinstance(text, str):
        text = [text]

    actions: List[Dict[str, Any]] = [
        {"type": "createRedactions", "strategy": "text", "strategyOptions": {"text": term}}
        for term in text
    ]
    actions.append({"type": "applyRedactions"})

    return _single_document(file, actions=actions)


def build_duplicate_pages_request(
    file: FileReference,
    page: Optional[int] = None,
    start_page: Optional[int] = None,
    end_page: Optional[int] = None,
) -> BuildRequest:
    """
    Build a request that repeats a page selection ahead of the full document.

    Selector precedence: ``page``, then ``start_page``/``end_page``, then the
    whole document.
    """
    if page is not None:
        selection = build_part_with_pages(file, DOCUMENT_KEY, page, page)
    elif start_page is not None and end_page is not None:
        selection = build_part_with_pages(file, DOCUMENT_KEY, start_page, end_page)
    else:
        selection = build_part(file, DOCUMENT_KEY)

    parts = [selection, build_part(file, DOCUMENT_KEY)]
    return BuildRequest(InstructionDocument(parts=parts), {DOCUMENT_KEY: file})


def _is_empty_selection(part: Dict[str, Any]) -> bool:
    pages = part_pages(part)
    if pages is None:
        return False

    start, end = pages["start"], pages["end"]
    if start == -1 and end == -1:
        return True
    return end != -1 and start > end


def build_delete_pages_request(
    file: FileReference,
    page: Optional[int] = None,
    start_page: Optional[int] = None,
    end_page: Optional[int] = None,
    keep_before: Optional[int] = None,
    keep_after: Optional[int] = None,
) -> BuildRequest:
    """
    Build a request that keeps the complement of the deleted pages.

    Selector precedence: ``page``, then ``start_page``/``end_page``, then
    ``keep_before``, then ``keep_after``. Surviving pages become one or two
    parts; selections that are empty are dropped.

    Raises:
        ArgumentError: If no selector is given or no pages would remain
    """
    parts = []

    if page is not None:
        if page > 0:
            parts.append(build_part_with_pages(file, DOCUMENT_KEY, 0, page - 1))
        parts.append(build_part_with_pages(file, DOCUMENT_KEY, page + 1, -1))
    elif start_page is not None and end_page is not None:
        if start_page > 0:
            parts.append(build_part_with_pages(file, DOCUMENT_KEY, 0, start_page - 1))
        parts.append(build_part_with_pages(file, DOCUMENT_KEY, end_page + 1, -1))
    elif keep_before is not None:
        if keep_before < 1:
            raise ArgumentError("keep_before must be at least 1")
        parts.append(build_part_with_pages(file, DOCUMENT_KEY, 0, keep_before - 1))
    elif keep_after is not None:
        parts.append(build_part_with_pages(file, DOCUMENT_KEY, keep_after + 1, -1))
    else:
        raise ArgumentError("Must specify pages to delete or pages to keep")

    parts = [part for part in parts if not _is_empty_selection(part)]
    if not parts:
        raise ArgumentError("No pages would remain after deletion")

    return BuildRequest(InstructionDocument(parts=parts), {DOCUMENT_KEY: file})


def build_flatten_request(file: FileReference) -> BuildRequest:
    return _single_document(file, actions=[{"type": "flatten"}])


def build_rotate_request(file: FileReference, rotate_by: int) -> BuildRequest:
    """
    Raises:
        InvalidRotationError: If the angle is not 90, 180 or 270
    """
    if isinstance(rotate_by, bool) or rotate_by not in ROTATION_ANGLES:
        raise InvalidRotationError(
            f"Invalid rotation angle: {rotate_by}. Supported angles: 90, 180, 270",
            {"rotate_by": rotate_by},
        )

    return _single_document(file, actions=[{"type": "rotate", "rotateBy": rotate_by}])


def build_add_page_request(
    file: FileReference,
    position: Optional[str] = None,
    after_page: Optional[int] = None,
    page_count: int = 1,
    page_size: str = DEFAULT_PAGE_SIZE,
) -> BuildRequest:
    """
    Build a request inserting blank pages.

    ``position`` is ``"beginning"`` or ``"end"``; ``after_page`` inserts after
    that zero-based page instead. With neither given, pages go at the end.

    Raises:
        ArgumentError: If the placement is unrecognised or ambiguous
    """
    if after_page is not None and position is not None:
        raise ArgumentError("Specify either position or after_page, not both")
    if after_page is None and position is None:
        position = "end"

    new_pages = build_new_page_part(page_count, page_size)

    if position == "beginning":
        parts = [new_pages, build_part(file, DOCUMENT_KEY)]
    elif position == "end":
        parts = [build_part(file, DOCUMENT_KEY), new_pages]
    elif after_page is not None:
        parts = [
            build_part_with_pages(file, DOCUMENT_KEY, 0, after_page),
            new_pages,
            build_part_with_pages(file, DOCUMENT_KEY, after_page + 1, -1),
        ]
    else:
        raise ArgumentError(
            f"Must specify position ({', '.join(PAGE_POSITIONS)}) or after_page",
            {"position": position},
        )

    return BuildRequest(InstructionDocument(parts=parts), {DOCUMENT_KEY: file})


def _coerce_label(label: Union[PageLabel, Mapping[str, Any]], index: int) -> PageLabel:
    if isinstance(label, PageLabel):
        return label
    try:
        return PageLabel.model_validate(dict(label))
    except (PydanticValidationError, TypeError, ValueError) as e:
        raise ArgumentError(f"Invalid page label at index {index}: {e}", {"index": index}) from e


def format_page_labels(
    labels: Sequence[Union[PageLabel, Mapping[str, Any]]],
) -> List[Dict[str, Any]]:
    """
    Format labels for the output block, preserving input order.

    Raises:
        ArgumentError: If an entry names neither a page nor a page range
    """
    formatted = []
    for index, entry in enumerate(labels):
        label = _coerce_label(entry, index)
        if label.page is not None:
            pages = {"start": label.page, "end": label.page}
        elif label.start_page is not None and label.end_page is not None:
            pages = {"start": label.start_page, "end": label.end_page}
        else:
            raise ArgumentError(
                "Each label must specify either page or start_page and end_page",
                {"index": index},
            )
        formatted.append({"pages": pages, "label": label.label})
    return formatted


def build_set_page_label_request(
    file: FileReference, labels: Sequence[Union[PageLabel, Mapping[str, Any]]]
) -> BuildRequest:
    output = {"type": "pdf", "labels": format_page_labels(labels)}
    return _single_document(file, output=output)


def validate_json_import_args(json_data: Optional[str], json_file: Any) -> None:
    """
    Raises:
        ArgumentError: Unless exactly one of json_data and json_file is given
    """
    if (json_data is None) == (json_file is None):
        raise ArgumentError("Either json_data or json_file must be provided")


def build_json_import_request(
    file: FileReference, annotations: FileReference
) -> BuildRequest:
    """Build an Instant JSON import; ``annotations`` is uploaded alongside."""
    request = _single_document(
        file, actions=[{"type": "applyInstantJson", "file": ANNOTATIONS_KEY}]
    )
    request.files[ANNOTATIONS_KEY] = _require_upload(annotations, ANNOTATIONS_KEY)
    return request


def build_xfdf_import_request(
    file: FileReference, xfdf_file: FileReference
) -> BuildRequest:
    request = _single_document(file, actions=[{"type": "applyXfdf", "file": XFDF_KEY}])
    request.files[XFDF_KEY] = _require_upload(xfdf_file, XFDF_KEY)
    return request
