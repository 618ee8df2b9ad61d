from __future__ import annotations

from .api import ApiError, FilesApiClient
from .session import DocumentSession, natural_sort_key, sort_filenames

__all__ = [
    "ApiError",
    "FilesApiClient",
    "DocumentSession",
    "natural_sort_key",
    "sort_filenames",
]
