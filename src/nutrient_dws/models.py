"""
Data models for build instructions, file references and operation options.
"""

import json
import os
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, BinaryIO, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import UnsupportedFileTypeError

URL_PATTERN = re.compile(r"\Ahttps?://")


@dataclass(frozen=True)
class LocalPath:
    """A file on the local filesystem, read when the request is encoded."""

    path: str


@dataclass(frozen=True)
class InMemoryHandle:
    """An open binary stream; ``name`` supplies the upload filename if known."""

    stream: BinaryIO
    name: Optional[str] = None


@dataclass(frozen=True)
class RemoteURL:
    """A document the service fetches itself; never uploaded."""

    url: str


FileReference = Union[LocalPath, InMemoryHandle, RemoteURL]

FileInput = Union[FileReference, str, "os.PathLike[str]", bytes, bytearray, BinaryIO]


def is_url(value: Any) -> bool:
    """Check whether a raw string input points at an http(s) URL."""
    return isinstance(value, str) and bool(URL_PATTERN.match(value))


def as_file_reference(value: Any) -> FileReference:
    """
    Coerce caller input into a tagged FileReference.

    Accepts existing references, URL strings, paths, raw bytes and any
    object with a ``read`` method.

    Raises:
        UnsupportedFileTypeError: If the input matches none of the above
    """
    if isinstance(value, (LocalPath, InMemoryHandle, RemoteURL)):
        return value

    if isinstance(value, str):
        if is_url(value):
            return RemoteURL(value)
        return LocalPath(value)

    if isinstance(value, os.PathLike):
        return LocalPath(os.fspath(value))

    if isinstance(value, (bytes, bytearray)):
        return InMemoryHandle(BytesIO(bytes(value)))

    if callable(getattr(value, "read", None)):
        name = getattr(value, "name", None)
        return InMemoryHandle(value, name if isinstance(name, str) else None)

    raise UnsupportedFileTypeError(
        f"Unsupported file type: {type(value).__name__}",
        {"type": type(value).__name__},
    )


@dataclass(frozen=True)
class PageSelector:
    """
    Zero-based, inclusive page bounds.

    An ``end`` of -1 selects through the last page.
    """

    start: int
    end: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass
class InstructionDocument:
    """
    The build pipeline sent to the service.

    ``parts`` are concatenated in order, then ``actions`` run in order over
    the result; ``output`` selects the result format.
    """

    parts: List[Dict[str, Any]]
    actions: Optional[List[Dict[str, Any]]] = None
    output: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"parts": self.parts}
        if self.actions is not None:
            document["actions"] = self.actions
        if self.output is not None:
            document["output"] = self.output
        return document

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class BuildRequest:
    """
    An instruction document and the manifest of files it references.

    ``files`` maps role keys to references in upload order. URL entries are
    kept so the encoder can tell a URL-only request apart.
    """

    instructions: InstructionDocument
    files: Dict[str, FileReference] = field(default_factory=dict)


class WatermarkOptions(BaseModel):
    """
    Geometry and styling for a watermark action.

    Only ``width`` and ``height`` carry defaults; every other field is sent
    only when set.

    Example:
        >>> WatermarkOptions(font_size=72, opacity=0.5).to_action_fields()
        {'width': 200, 'height': 50, 'fontSize': 72, 'opacity': 0.5}
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    width: Union[int, float, str] = 200
    height: Union[int, float, str] = 50
    font_size: Optional[Union[int, float]] = Field(default=None, alias="fontSize")
    font_family: Optional[str] = Field(default=None, alias="fontFamily")
    font_color: Optional[str] = Field(default=None, alias="fontColor")
    opacity: Optional[float] = None
    rotation: Optional[Union[int, float]] = None
    top: Optional[Union[int, float, str]] = None
    left: Optional[Union[int, float, str]] = None
    right: Optional[Union[int, float, str]] = None
    bottom: Optional[Union[int, float, str]] = None

    def to_action_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def text_fields(self) -> Dict[str, Any]:
        fields = self.to_action_fields()
        return {k: fields[k] for k in ("fontSize", "fontFamily", "fontColor") if k in fields}

    def geometry_fields(self) -> Dict[str, Any]:
        fields = self.to_action_fields()
        return {
            k: fields[k]
            for k in ("opacity", "rotation", "top", "left", "right", "bottom")
            if k in fields
        }


class PageLabel(BaseModel):
    """A label for one page or an inclusive page range."""

    model_config = ConfigDict(extra="forbid")

    label: str
    page: Optional[int] = None
    start_page: Optional[int] = None
    end_page: Optional[int] = None
