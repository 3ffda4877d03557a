"""
Centralized FastAPI dependencies for the category routes.

Routes ask for the source, the current tree or the shared resolver through
these functions so tests can swap them with app.dependency_overrides.
"""

import os
from typing import List, Optional

from fastapi import Depends

from catalog.cache import DEFAULT_MAX_SIZE, CachedCategoryResolver
from catalog.models import CategoryNode
from catalog.sources import CategoryTreeSource, get_category_source

_resolver_instance: Optional[CachedCategoryResolver] = None


def get_source() -> CategoryTreeSource:
    """The configured category tree source."""
    return get_category_source()


async def get_category_tree(source: CategoryTreeSource = Depends(get_source)) -> List[CategoryNode]:
    """
    Current category tree for this request.

    Raises CatalogServiceError (rendered as 502) if the source cannot supply one.
    """
    return await source.get_category_tree()


def get_resolver() -> CachedCategoryResolver:
    """Process-wide memoizing resolver, sized from CATEGORY_RESOLVER_CACHE_SIZE."""
    global _resolver_instance
    if _resolver_instance is None:
        max_size = int(os.getenv("CATEGORY_RESOLVER_CACHE_SIZE", str(DEFAULT_MAX_SIZE)))
        _resolver_instance = CachedCategoryResolver(max_size=max_size)
    return _resolver_instance


def reset_resolver() -> None:
    """Drop the shared resolver (useful for testing or config changes)."""
    global _resolver_instance
    _resolver_instance = None
