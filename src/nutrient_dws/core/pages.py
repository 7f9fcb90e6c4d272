"""
Pure functions for page range parsing.
"""

from typing import List

from ..exceptions import InvalidRangeError


def _parse_page_number(token: str, range_spec: str) -> int:
    try:
        page = int(token.strip())
    except ValueError as e:
        raise InvalidRangeError(
            f"Invalid page range: {range_spec!r} ({token.strip()!r} is not a page number)",
            {"ranges": range_spec, "token": token.strip()},
        ) from e

    if page < 1:
        raise InvalidRangeError(
            f"Invalid page range: {range_spec!r} (pages are numbered from 1)",
            {"ranges": range_spec, "token": token.strip()},
        )
    return page


def parse_page_ranges(range_spec: str) -> List[int]:
    """
    Convert a 1-based page range string into zero-based page indexes.

    Tokens are comma separated and either a page number or an inclusive
    ``A-B`` range. Token order is preserved and duplicates are kept.

    Args:
        range_spec: Range string such as ``"1,3-5"``

    Returns:
        Zero-based indexes, e.g. ``[0, 2, 3, 4]``

    Raises:
        InvalidRangeError: If any token is not a number or a range
    """
    if not isinstance(range_spec, str) or not range_spec.strip():
        raise InvalidRangeError("Page range cannot be empty", {"ranges": range_spec})

    page_indexes: List[int] = []
    for token in range_spec.split(","):
        token = token.strip()
        if "-" in token:
            bounds = token.split("-")
            if len(bounds) != 2:
                raise InvalidRangeError(
                    f"Invalid page range: {range_spec!r} ({token!r} is not a range)",
                    {"ranges": range_spec, "token": token},
                )
            start_page = _parse_page_number(bounds[0], range_spec)
            end_page = _parse_page_number(bounds[1], range_spec)
            page_indexes.extend(page - 1 for page in range(start_page, end_page + 1))
        else:
            page_indexes.append(_parse_page_number(token, range_spec) - 1)

    return page_indexes
