"""Category tree resolution: slug lookup, facet mapping and breadcrumbs."""

from .models import BreadcrumbItem, CategoryNode, FacetField
from .lookup import (
    build_category_filter,
    build_category_url,
    find_category_by_slug,
    find_category_by_slug_path,
    get_category_breadcrumb_path,
    get_category_children,
    get_category_facet_field,
    get_category_level,
    has_children,
    is_valid_category_path,
    parse_category_slug,
)
from .breadcrumbs import build_breadcrumbs_from_path, build_category_breadcrumbs, build_product_breadcrumbs
from .tree import build_category_tree, build_tree_from_nested, iter_category_nodes
from .cache import CachedCategoryResolver
from .sources import (
    CategoryTreeSource,
    RemoteCategorySource,
    StaticCategorySource,
    get_category_source,
    reset_category_source,
)

__all__ = [
    "BreadcrumbItem",
    "CategoryNode",
    "FacetField",
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
    "build_breadcrumbs_from_path",
    "build_category_breadcrumbs",
    "build_product_breadcrumbs",
    "build_category_tree",
    "build_tree_from_nested",
    "iter_category_nodes",
    "CachedCategoryResolver",
    "CategoryTreeSource",
    "RemoteCategorySource",
    "StaticCategorySource",
    "get_category_source",
    "reset_category_source",
]
