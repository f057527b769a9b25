"""Content catalog access (drills, programs, skill mastery paths)"""

from progression.catalog.repository import (
    CatalogRepository,
    InMemoryCatalog,
    JsonCatalogRepository,
    get_recommended_drills,
    program_progress_percent,
)

__all__ = [
    "CatalogRepository",
    "InMemoryCatalog",
    "JsonCatalogRepository",
    "get_recommended_drills",
    "program_progress_percent",
]
