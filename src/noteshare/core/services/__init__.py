"""
Service layer interfaces and implementations.
"""

from .interfaces import (
    INoteService,
    ISearchService,
    ISharingService,
    IHealthService,
)

from .note_service import NoteService
from .search_service import SearchService
from .sharing_service import SharingService
from .health_service import HealthService

__all__ = [
    # Interfaces
    "INoteService",
    "ISearchService",
    "ISharingService",
    "IHealthService",

    # Implementations
    "NoteService",
    "SearchService",
    "SharingService",
    "HealthService",
]
