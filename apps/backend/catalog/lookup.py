"""Category lookup helpers: slug parsing, tree walking and facet mapping.

Everything here is synchronous and side-effect free. The category tree is
always passed in explicitly and never mutated; fetching and caching live in
``catalog.sources`` and ``catalog.cache``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from exceptions import EmptyPathError, InvalidLevelError, MissingSlugError, UnsupportedDepthError

from .models import MAX_CATEGORY_DEPTH, PATH_SEPARATOR, SLUG_SEPARATOR, CategoryNode, FacetField

logger = logging.getLogger(__name__)

FACET_FIELD_PREFIX = "categories.lvl"
CATEGORY_URL_PREFIX = "/c/"


def parse_category_slug(slug: Optional[str]) -> List[str]:
    """Split a category slug into its path segments.

    "men/mens-apparel/casual-shirts" -> ["men", "mens-apparel", "casual-shirts"]
    Leading, trailing and repeated slashes are ignored.
    """
    if not slug or not slug.strip():
        return []
    return [part for part in slug.strip(SLUG_SEPARATOR).split(SLUG_SEPARATOR) if part]


def _expected_slug(slug_path: Sequence[str], index: int) -> str:
    # Level 1 slugs are bare ("men"); deeper ones carry the whole prefix
    # ("men/mens-apparel").
    if index == 0:
        return slug_path[0]
    return SLUG_SEPARATOR.join(slug_path[: index + 1])


def find_category_by_slug_path(
    slug_path: Sequence[str],
    categories: Sequence[CategoryNode],
) -> Optional[CategoryNode]:
    """Walk the tree level by level following ``slug_path``.

    Returns None when any segment is missing at its level, or when the path
    continues past a leaf. The first sibling with a matching slug wins.
    """
    if not slug_path or not categories:
        return None

    current_level: Sequence[CategoryNode] = categories
    found: Optional[CategoryNode] = None

    for index in range(len(slug_path)):
        expected = _expected_slug(slug_path, index)
        found = next((node for node in current_level if node.slug == expected), None)

        if found is None:
            logger.debug(f"[CategoryLookup] No category for slug {expected!r} at level {index + 1}")
            return None

        if index < len(slug_path) - 1:
            if not found.children:
                return None
            current_level = found.children

    return found


def find_category_by_slug(slug: str, categories: Sequence[CategoryNode]) -> Optional[CategoryNode]:
    """Convenience wrapper: parse ``slug`` and resolve it against the tree."""
    return find_category_by_slug_path(parse_category_slug(slug), categories)


def _count_levels(category_path: Optional[str]) -> int:
    if not category_path:
        return 0
    return len([part for part in category_path.split(PATH_SEPARATOR) if part.strip()])


def get_category_facet_field(category_path: str) -> FacetField:
    """Map a breadcrumb path to the search backend's leveled facet.

    "Men" -> categories.lvl0, "Men > Mens Apparel" -> categories.lvl1, ...
    The value is the full trimmed breadcrumb string, never just the leaf.
    """
    if not category_path or not category_path.strip():
        raise EmptyPathError("Category path cannot be empty")

    level_count = _count_levels(category_path)
    if level_count < 1 or level_count > MAX_CATEGORY_DEPTH:
        raise UnsupportedDepthError(level_count, detail={"path": category_path})

    return FacetField(
        field=f"{FACET_FIELD_PREFIX}{level_count - 1}",
        value=category_path.strip(),
    )


def build_category_filter(category_path: str) -> str:
    """Equality filter expression for the search backend, e.g. categories.lvl0:"Men"."""
    return get_category_facet_field(category_path).to_filter()


def build_category_url(category: CategoryNode) -> str:
    """Browsing URL for a category. The slug is trusted to be cumulative already."""
    if not category.slug:
        raise MissingSlugError(
            "Category must have a slug to build URL",
            detail={"id": category.id, "name": category.name},
        )
    return f"{CATEGORY_URL_PREFIX}{category.slug}"


def get_category_breadcrumb_path(
    target: CategoryNode,
    categories: Sequence[CategoryNode],
) -> List[CategoryNode]:
    """Ancestors of ``target`` from the root down, including ``target``.

    Nodes carry no parent links, so each ancestor is found again by resolving
    the matching prefix of the target's own slug.
    """
    breadcrumbs: List[CategoryNode] = []
    slug_parts = parse_category_slug(target.slug)

    for index in range(len(slug_parts)):
        category = find_category_by_slug_path(slug_parts[: index + 1], categories)
        if category is not None:
            breadcrumbs.append(category)

    return breadcrumbs


def is_valid_category_path(category_path: str) -> bool:
    """True when ``category_path`` can be mapped to a facet field."""
    try:
        get_category_facet_field(category_path)
    except (EmptyPathError, UnsupportedDepthError):
        return False
    return True


def get_category_children(category: CategoryNode) -> List[CategoryNode]:
    return list(category.children or [])


def has_children(category: CategoryNode) -> bool:
    return bool(category.children)


def get_category_level(category_path: str) -> int:
    """Depth (1-3) of a breadcrumb path."""
    level_count = _count_levels(category_path)
    if level_count < 1 or level_count > MAX_CATEGORY_DEPTH:
        raise InvalidLevelError(level_count, detail={"path": category_path})
    return level_count


__all__ = [
    "CATEGORY_URL_PREFIX",
    "FACET_FIELD_PREFIX",
    "build_category_filter",
    "build_category_url",
    "find_category_by_slug",
    "find_category_by_slug_path",
    "get_category_breadcrumb_path",
    "get_category_children",
    "get_category_facet_field",
    "get_category_level",
    "has_children",
    "is_valid_category_path",
    "parse_category_slug",
]
