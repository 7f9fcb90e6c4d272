"""
Nutrient DWS

Python client for the Nutrient DWS Processor API.
"""

from .client import NutrientClient
from .config import Settings, setup_logging
from .models import (
    FileReference,
    LocalPath,
    InMemoryHandle,
    RemoteURL,
    PageSelector,
    InstructionDocument,
    BuildRequest,
    WatermarkOptions,
    PageLabel,
    as_file_reference,
)
from .exceptions import (
    NutrientError,
    ValidationError,
    ArgumentError,
    InvalidRangeError,
    UnsupportedFormatError,
    InvalidRotationError,
    UnsupportedFileTypeError,
    AuthenticationError,
    APIError,
)

__version__ = "1.0.0"

__all__ = [
    "NutrientClient",
    "Settings",
    "setup_logging",
    "FileReference",
    "LocalPath",
    "InMemoryHandle",
    "RemoteURL",
    "PageSelector",
    "InstructionDocument",
    "BuildRequest",
    "WatermarkOptions",
    "PageLabel",
    "as_file_reference",
    "NutrientError",
    "ValidationError",
    "ArgumentError",
    "InvalidRangeError",
    "UnsupportedFormatError",
    "InvalidRotationError",
    "UnsupportedFileTypeError",
    "AuthenticationError",
    "APIError",
]
