"""
Pure functions for building instruction parts.

A part is one input source in the build pipeline: an uploaded file
referenced by role key, a URL fetched by the service, or generated blank
pages.
"""

from typing import Any, Dict, Optional

from ..models import FileReference, PageSelector, RemoteURL

DEFAULT_PAGE_SIZE = "Letter"


def build_part(file: FileReference, file_key: str) -> Dict[str, Any]:
    """Build a part for a whole document."""
    if isinstance(file, RemoteURL):
        return {"file": {"url": file.url}}
    return {"file": file_key}


def build_part_with_pages(
    file: FileReference, file_key: str, start_page: int, end_page: int
) -> Dict[str, Any]:
    """
    Build a part restricted to zero-based, inclusive page bounds.

    URL parts carry the bounds inside their file descriptor; uploaded
    parts carry them at the top level.
    """
    part = build_part(file, file_key)
    pages = PageSelector(start_page, end_page).to_dict()

    if isinstance(file, RemoteURL):
        part["file"]["pages"] = pages
    else:
        part["pages"] = pages

    return part


def build_new_page_part(
    page_count: int = 1, page_size: str = DEFAULT_PAGE_SIZE
) -> Dict[str, Any]:
    """Build a part that generates blank pages."""
    return {"page": "new", "pageCount": page_count, "layout": {"size": page_size}}


def part_pages(part: Dict[str, Any]) -> Optional[Dict[str, int]]:
    """Return a part's page bounds wherever they are attached."""
    if "pages" in part:
        return part["pages"]
    file_descriptor = part.get("file")
    if isinstance(file_descriptor, dict):
        return file_descriptor.get("pages")
    return None
