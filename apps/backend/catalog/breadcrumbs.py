"""Breadcrumb items for category and product pages."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .lookup import build_category_url, get_category_breadcrumb_path
from .models import SLUG_SEPARATOR, BreadcrumbItem, CategoryNode

DEFAULT_HOME_LABEL = "Home"
DEFAULT_HOME_HREF = "/"
PRODUCT_URL_PREFIX = "/p/"


def build_category_breadcrumbs(
    category: CategoryNode,
    categories: Sequence[CategoryNode],
    *,
    home_label: str = DEFAULT_HOME_LABEL,
    home_href: str = DEFAULT_HOME_HREF,
) -> List[BreadcrumbItem]:
    """Home entry followed by every ancestor of ``category``; only the last is active."""
    breadcrumbs = [BreadcrumbItem(label=home_label, href=home_href, is_active=False)]

    hierarchy = get_category_breadcrumb_path(category, categories)
    for index, node in enumerate(hierarchy):
        breadcrumbs.append(
            BreadcrumbItem(
                label=node.name,
                href=build_category_url(node),
                is_active=index == len(hierarchy) - 1,
            )
        )

    return breadcrumbs


def build_product_breadcrumbs(
    product_name: str,
    product_slug: str,
    category: CategoryNode,
    categories: Sequence[CategoryNode],
) -> List[BreadcrumbItem]:
    """Category breadcrumbs (all inactive) with the product appended as the active item."""
    items = [
        item.model_copy(update={"is_active": False})
        for item in build_category_breadcrumbs(category, categories)
    ]
    items.append(
        BreadcrumbItem(
            label=product_name,
            href=f"{PRODUCT_URL_PREFIX}{product_slug}",
            is_active=True,
        )
    )
    return items


def build_breadcrumbs_from_path(path: str, current_label: Optional[str] = None) -> List[BreadcrumbItem]:
    """
    Fallback breadcrumbs when only a URL path is known and the tree is not.

    Each segment becomes a capitalized label linking to its prefix;
    ``current_label`` replaces the label of the last segment.
    """
    breadcrumbs = [BreadcrumbItem(label=DEFAULT_HOME_LABEL, href=DEFAULT_HOME_HREF, is_active=False)]

    segments = [segment for segment in (path or "").split(SLUG_SEPARATOR) if segment]
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        label = current_label if (current_label and is_last) else segment[:1].upper() + segment[1:]
        breadcrumbs.append(
            BreadcrumbItem(
                label=label,
                href=SLUG_SEPARATOR + SLUG_SEPARATOR.join(segments[: index + 1]),
                is_active=is_last,
            )
        )

    return breadcrumbs
