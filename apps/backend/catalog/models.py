"""Typed models for the category tree and its derived outputs."""

from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

PATH_SEPARATOR = " > "
SLUG_SEPARATOR = "/"
MAX_CATEGORY_DEPTH = 3


class CategoryNode(BaseModel):
    """One category in the storefront tree.

    ``slug`` is a bare segment at level 1 and a cumulative slash-joined path
    at deeper levels (``men``, ``men/mens-apparel``, ...). ``path`` is the
    human-readable breadcrumb (``Men > Mens Apparel``).
    """

    id: str
    name: str
    slug: str = ""
    level: int = Field(1, ge=1, le=MAX_CATEGORY_DEPTH)
    path: str = ""
    description: Optional[str] = None
    active: bool = True
    order: int = 0
    image_url: Optional[str] = None
    product_count: Optional[int] = Field(None, ge=0)
    children: List[CategoryNode] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> str:
        return str(value)

    @field_validator("children", mode="before")
    @classmethod
    def _ensure_children(cls, value: Optional[Sequence[object]]) -> List[object]:
        if value is None:
            return []
        return list(value)


class FacetField(BaseModel):
    """Search-backend facet attribute and the value to match exactly."""

    field: str
    value: str

    def to_filter(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'{self.field}:"{escaped}"'


class BreadcrumbItem(BaseModel):
    label: str
    href: str
    is_active: bool = False


CategoryNode.model_rebuild()
