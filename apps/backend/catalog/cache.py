"""Optional memoization layer in front of the stateless slug resolver."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from observability.metrics import (
    category_resolutions_total,
    category_resolver_cache_size,
    category_resolver_cache_total,
)

from .lookup import find_category_by_slug_path, parse_category_slug
from .models import SLUG_SEPARATOR, CategoryNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 512


@dataclass
class ResolverCacheStats:
    hits: int = 0
    misses: int = 0
    size: int = 0
    max_size: int = DEFAULT_MAX_SIZE

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> Dict[str, float]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "max_size": self.max_size,
            "hit_rate": round(self.hit_rate, 4),
        }


class CachedCategoryResolver:
    """LRU memo of slug -> category, scoped to one tree object.

    Entries remember the tree they were computed against; passing a different
    tree (e.g. after the source refreshed) is treated as a miss. ``None``
    results are cached as well so repeated 404s stay cheap.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: "OrderedDict[str, Tuple[Sequence[CategoryNode], Optional[CategoryNode]]]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    @staticmethod
    def normalize_slug(slug: str) -> str:
        return SLUG_SEPARATOR.join(parse_category_slug(slug))

    def resolve(self, slug: str, categories: Sequence[CategoryNode]) -> Optional[CategoryNode]:
        key = self.normalize_slug(slug)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] is categories:
                self._entries.move_to_end(key)
                self._hits += 1
                category_resolver_cache_total.labels(result="hit").inc()
                result = entry[1]
                self._record_outcome(result)
                return result

        result = find_category_by_slug_path(parse_category_slug(key), categories)

        with self._lock:
            self._misses += 1
            category_resolver_cache_total.labels(result="miss").inc()
            self._entries[key] = (categories, result)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"[ResolverCache] Evicted {evicted!r}")
            category_resolver_cache_size.set(len(self._entries))

        self._record_outcome(result)
        return result

    def _record_outcome(self, result: Optional[CategoryNode]) -> None:
        category_resolutions_total.labels(outcome="found" if result is not None else "not_found").inc()

    def stats(self) -> ResolverCacheStats:
        with self._lock:
            return ResolverCacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                max_size=self.max_size,
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            category_resolver_cache_size.set(0)
        logger.info("Category resolver cache cleared")
