"""Assemble and walk category trees supplied by a catalog source."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Set

from .models import MAX_CATEGORY_DEPTH, PATH_SEPARATOR, CategoryNode

logger = logging.getLogger(__name__)


def _warn_on_level_mismatch(raw: Mapping[str, Any], depth: int) -> None:
    declared = raw.get("level")
    if declared is None:
        return
    try:
        matches = int(declared) == depth
    except (TypeError, ValueError):
        matches = False
    if not matches:
        logger.warning(
            "Category level disagrees with its nesting depth, using depth",
            extra={"category_id": raw.get("id"), "declared_level": declared, "depth": depth},
        )


def _node_fields(record: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": record["id"],
        "name": record["name"],
        "slug": record.get("slug") or "",
        "description": record.get("description"),
        "active": record.get("active", True),
        "order": record.get("order") or 0,
        "image_url": record.get("image_url") or record.get("imageUrl"),
        "product_count": record.get("product_count", record.get("productCount")),
    }


def build_category_tree(records: Sequence[Mapping[str, Any]]) -> List[CategoryNode]:
    """Build a nested tree from flat records linked by ``parent_id``.

    Level comes from the record's depth and ``path`` from its ancestors'
    names. Records deeper than three levels, whose parent is unknown, or
    that cannot be reached from a root (parent cycles) are skipped and logged.
    """
    children_by_parent: Dict[Optional[str], List[Mapping[str, Any]]] = defaultdict(list)
    known_ids = {str(record["id"]) for record in records}
    placed_ids: Set[str] = set()
    dropped_ids: Set[str] = set()

    for record in records:
        parent_id = record.get("parent_id", record.get("parentId"))
        parent_key = str(parent_id) if parent_id not in (None, "") else None
        if parent_key is not None and parent_key not in known_ids:
            logger.warning(
                "Dropping category with unknown parent",
                extra={"category_id": record["id"], "parent_id": parent_key},
            )
            dropped_ids.add(str(record["id"]))
            continue
        children_by_parent[parent_key].append(record)

    def build_level(parent_key: Optional[str], ancestors: List[str]) -> List[CategoryNode]:
        level = len(ancestors) + 1
        siblings = sorted(children_by_parent.get(parent_key, []), key=lambda r: r.get("order") or 0)
        if level > MAX_CATEGORY_DEPTH:
            for record in siblings:
                logger.warning(
                    "Dropping category deeper than supported depth",
                    extra={"category_id": record["id"], "depth": level},
                )
                dropped_ids.add(str(record["id"]))
            return []

        nodes = []
        for record in siblings:
            placed_ids.add(str(record["id"]))
            names = ancestors + [record["name"]]
            nodes.append(
                CategoryNode(
                    **_node_fields(record),
                    level=level,
                    path=PATH_SEPARATOR.join(names),
                    children=build_level(str(record["id"]), names),
                )
            )
        return nodes

    tree = build_level(None, [])

    for record in records:
        record_id = str(record["id"])
        if record_id not in placed_ids and record_id not in dropped_ids:
            logger.warning(
                "Dropping category not reachable from a root category",
                extra={"category_id": record["id"], "parent_id": record.get("parent_id", record.get("parentId"))},
            )
    return tree


def build_tree_from_nested(
    nodes: Sequence[Mapping[str, Any]],
    ancestors: Optional[List[str]] = None,
) -> List[CategoryNode]:
    """Normalize an already-nested payload (as returned by the catalog service).

    ``path`` is rebuilt from ancestor names and ``level`` from the nesting
    depth; a payload level that disagrees is logged and ignored.
    Children below the third level are discarded.
    """
    ancestors = ancestors or []
    depth = len(ancestors) + 1
    tree = []
    for raw in nodes:
        names = ancestors + [raw["name"]]
        _warn_on_level_mismatch(raw, depth)
        raw_children = raw.get("children") or []
        children: List[CategoryNode] = []
        if raw_children and depth < MAX_CATEGORY_DEPTH:
            children = build_tree_from_nested(raw_children, names)
        elif raw_children:
            logger.warning(
                "Discarding children below supported depth",
                extra={"category_id": raw.get("id"), "dropped": len(raw_children)},
            )
        tree.append(
            CategoryNode(
                **_node_fields(raw),
                level=depth,
                path=PATH_SEPARATOR.join(names),
                children=children,
            )
        )
    return tree


def iter_category_nodes(categories: Sequence[CategoryNode]) -> Iterator[CategoryNode]:
    """Depth-first, pre-order iteration over every node of the tree."""
    for node in categories:
        yield node
        yield from iter_category_nodes(node.children)


def get_categories_by_level(categories: Sequence[CategoryNode], level: int) -> List[CategoryNode]:
    return [node for node in iter_category_nodes(categories) if node.level == level]


def find_category_by_id(categories: Sequence[CategoryNode], category_id: str) -> Optional[CategoryNode]:
    return next((node for node in iter_category_nodes(categories) if node.id == str(category_id)), None)
