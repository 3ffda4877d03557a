"""
Category browsing endpoints.

Serves the category tree to the storefront and resolves /c/<slug> browsing
paths into everything a category page needs: the node, its search facet
filter, breadcrumbs and subcategories.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from catalog.breadcrumbs import build_category_breadcrumbs
from catalog.cache import CachedCategoryResolver
from catalog.lookup import build_category_url, get_category_children, get_category_facet_field
from catalog.models import BreadcrumbItem, CategoryNode, FacetField
from catalog.sources import CategoryTreeSource
from dependencies import get_category_tree, get_resolver, get_source
from exceptions import CategoryNotFoundError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["categories"])


class CatalogCategory(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    active: bool
    order: int


class SubcategoryLink(BaseModel):
    id: str
    name: str
    url: str
    product_count: Optional[int] = None


class CategoryPageResponse(BaseModel):
    category: CategoryNode
    url: str
    facet: FacetField
    filter: str
    breadcrumbs: List[BreadcrumbItem]
    children: List[SubcategoryLink]


class CacheStatsResponse(BaseModel):
    resolver: Dict[str, Any]
    source: Dict[str, Any]


def _resolve_or_404(slug: str, tree: List[CategoryNode], resolver: CachedCategoryResolver) -> CategoryNode:
    category = resolver.resolve(slug, tree)
    if category is None:
        logger.info("Category not found", extra={"slug": slug})
        raise CategoryNotFoundError(slug)
    return category


@router.get("/api/categories", response_model=List[CategoryNode])
async def list_category_tree(tree: List[CategoryNode] = Depends(get_category_tree)):
    """Full category tree, top-level nodes with children nested."""
    return tree


@router.get("/api/catalog-categories", response_model=List[CatalogCategory])
async def list_catalog_categories(tree: List[CategoryNode] = Depends(get_category_tree)):
    """Active top-level categories in display order (header navigation)."""
    active = sorted((node for node in tree if node.active), key=lambda node: node.order)
    return [
        CatalogCategory(
            id=node.id,
            name=node.name,
            slug=node.slug,
            description=node.description,
            active=node.active,
            order=node.order,
        )
        for node in active
    ]


@router.get("/api/categories/by-slug/{slug:path}", response_model=CategoryPageResponse)
async def get_category_page(
    slug: str,
    tree: List[CategoryNode] = Depends(get_category_tree),
    resolver: CachedCategoryResolver = Depends(get_resolver),
):
    """
    Resolve a browsing slug (e.g. men/mens-apparel) for a category page.

    404 when the slug does not resolve; 422 when the resolved node carries a
    malformed breadcrumb path.
    """
    category = _resolve_or_404(slug, tree, resolver)
    facet = get_category_facet_field(category.path)

    logger.info(
        "Category resolved",
        extra={"slug": slug, "category_id": category.id, "facet_field": facet.field},
    )

    return CategoryPageResponse(
        category=category,
        url=build_category_url(category),
        facet=facet,
        filter=facet.to_filter(),
        breadcrumbs=build_category_breadcrumbs(category, tree),
        children=[
            SubcategoryLink(
                id=child.id,
                name=child.name,
                url=build_category_url(child),
                product_count=child.product_count,
            )
            for child in get_category_children(category)
        ],
    )


@router.get("/api/categories/breadcrumbs/{slug:path}", response_model=List[BreadcrumbItem])
async def get_category_breadcrumbs(
    slug: str,
    home_label: str = Query("Home", max_length=100),
    tree: List[CategoryNode] = Depends(get_category_tree),
    resolver: CachedCategoryResolver = Depends(get_resolver),
):
    category = _resolve_or_404(slug, tree, resolver)
    return build_category_breadcrumbs(category, tree, home_label=home_label)


@router.get("/api/categories/facet", response_model=FacetField)
async def get_facet_for_path(path: str = Query(..., max_length=500)):
    """Facet field/value for a breadcrumb path such as 'Men > Mens Apparel'."""
    return get_category_facet_field(path)


@router.get("/api/categories/cache", response_model=CacheStatsResponse)
async def get_cache_stats(
    source: CategoryTreeSource = Depends(get_source),
    resolver: CachedCategoryResolver = Depends(get_resolver),
):
    return CacheStatsResponse(resolver=resolver.stats().to_dict(), source=source.cache_stats())


@router.delete("/api/categories/cache", response_model=CacheStatsResponse)
async def clear_caches(
    source: CategoryTreeSource = Depends(get_source),
    resolver: CachedCategoryResolver = Depends(get_resolver),
):
    """Drop the memoized resolutions and the cached tree."""
    resolver.clear()
    source.clear_cache()
    return CacheStatsResponse(resolver=resolver.stats().to_dict(), source=source.cache_stats())
