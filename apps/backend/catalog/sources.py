"""
Category Tree Sources

Pluggable providers of the category tree consumed by the lookup helpers.
Backends:
  - StaticCategorySource: built-in sample tree (or any tree handed to it)
  - RemoteCategorySource: fetches the tree from the catalog service over HTTP

Usage:
  source = get_category_source()
  tree = await source.get_category_tree()
"""

import asyncio
import logging
import os
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import httpx

from exceptions import CatalogServiceError
from observability.metrics import category_tree_fetch_duration_seconds, category_tree_fetch_total

from .models import CategoryNode
from .sample_data import SAMPLE_CATEGORY_RECORDS
from .tree import build_category_tree, build_tree_from_nested

logger = logging.getLogger(__name__)

DEFAULT_TREE_PATH = "/api/category-tree"
DEFAULT_TIMEOUT = 10.0
DEFAULT_CACHE_TTL = 300.0


class CategoryTreeSource(ABC):
    """Base interface for category tree providers."""

    name: str = "base"

    @abstractmethod
    async def get_category_tree(self) -> List[CategoryNode]:
        """Return the full category tree (top-level nodes, children nested)."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable."""
        ...

    def clear_cache(self) -> None:
        """Drop any cached tree."""

    def cache_stats(self) -> Dict[str, Any]:
        return {"source": self.name, "size": 0}


# ── Static source ────────────────────────────────────────────────────────────


class StaticCategorySource(CategoryTreeSource):
    """Serves a fixed tree; defaults to the built-in sample categories."""

    name = "static"

    def __init__(self, tree: Optional[Sequence[CategoryNode]] = None):
        self._tree = list(tree) if tree is not None else build_category_tree(SAMPLE_CATEGORY_RECORDS)

    async def get_category_tree(self) -> List[CategoryNode]:
        category_tree_fetch_total.labels(source=self.name, status="ok").inc()
        return self._tree

    async def health_check(self) -> bool:
        return True

    def cache_stats(self) -> Dict[str, Any]:
        return {"source": self.name, "size": 1}


# ── Remote source ────────────────────────────────────────────────────────────


class RemoteCategorySource(CategoryTreeSource):
    """
    Fetches the category tree from the catalog service.

    The response is either a JSON list of nested nodes or an envelope
    ``{"status": {"code": 0, "message": ""}, "tree": [...]}``; a non-zero
    status code is treated as a backend failure.

    The tree is cached for ``cache_ttl`` seconds. When a refresh fails and an
    expired tree is still held, that tree is served and a warning logged.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        *,
        tree_path: str = DEFAULT_TREE_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required for RemoteCategorySource")
        self.base_url = base_url.rstrip("/")
        self.tree_path = tree_path if tree_path.startswith("/") else f"/{tree_path}"
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._api_key = api_key
        self._transport = transport
        self._cached_tree: Optional[List[CategoryNode]] = None
        self._fetched_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def tree_url(self) -> str:
        return f"{self.base_url}{self.tree_path}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _is_fresh(self) -> bool:
        if self._cached_tree is None or self._fetched_at is None:
            return False
        return (time.monotonic() - self._fetched_at) < self.cache_ttl

    async def get_category_tree(self) -> List[CategoryNode]:
        async with self._lock:
            if self._is_fresh():
                category_tree_fetch_total.labels(source=self.name, status="cached").inc()
                return self._cached_tree

            try:
                tree = await self._fetch_tree()
            except CatalogServiceError as e:
                if self._cached_tree is not None:
                    logger.warning(
                        "Serving expired category tree after catalog service failure",
                        extra={"error": e.message, "age_seconds": self._age_seconds()},
                    )
                    category_tree_fetch_total.labels(source=self.name, status="stale").inc()
                    return self._cached_tree
                category_tree_fetch_total.labels(source=self.name, status="error").inc()
                raise

            self._cached_tree = tree
            self._fetched_at = time.monotonic()
            category_tree_fetch_total.labels(source=self.name, status="ok").inc()
            logger.info(f"[CategorySource] Fetched {len(tree)} top-level categories from {self.tree_url}")
            return tree

    async def _fetch_tree(self) -> List[CategoryNode]:
        start_time = time.time()
        try:
            async with self._client() as client:
                resp = await client.get(self.tree_url, headers=self._headers())
                resp.raise_for_status()
                payload = resp.json()
        except httpx.TimeoutException as e:
            raise CatalogServiceError(
                f"Catalog service timeout after {self.timeout}s",
                detail={"url": self.tree_url},
            ) from e
        except httpx.HTTPStatusError as e:
            raise CatalogServiceError(
                f"Catalog service returned status {e.response.status_code}",
                detail={"url": self.tree_url, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise CatalogServiceError(
                f"Catalog service request failed: {e}",
                detail={"url": self.tree_url},
            ) from e
        except ValueError as e:
            raise CatalogServiceError("Catalog service returned invalid JSON", detail={"url": self.tree_url}) from e
        finally:
            category_tree_fetch_duration_seconds.labels(source=self.name).observe(time.time() - start_time)

        return self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> List[CategoryNode]:
        if isinstance(payload, dict):
            status = payload.get("status") or {}
            code = status.get("code", 0)
            if code != 0:
                raise CatalogServiceError(
                    f"Backend service error: {status.get('message', 'unknown error')}",
                    detail={"code": code},
                )
            nodes = payload.get("tree")
        else:
            nodes = payload

        if not isinstance(nodes, list):
            raise CatalogServiceError("Catalog service response has no category tree", detail={"url": self.tree_url})

        try:
            return build_tree_from_nested(nodes)
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogServiceError(f"Malformed category tree: {e}", detail={"url": self.tree_url}) from e

    def _age_seconds(self) -> Optional[float]:
        if self._fetched_at is None:
            return None
        return round(time.monotonic() - self._fetched_at, 1)

    async def health_check(self) -> bool:
        try:
            async with self._client() as client:
                resp = await client.get(self.tree_url, headers=self._headers())
                return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"[CategorySource] Health check failed: {e}")
            return False

    def clear_cache(self) -> None:
        self._cached_tree = None
        self._fetched_at = None
        logger.info("Category tree cache cleared")

    def cache_stats(self) -> Dict[str, Any]:
        return {
            "source": self.name,
            "size": 1 if self._cached_tree is not None else 0,
            "age_seconds": self._age_seconds(),
            "ttl_seconds": self.cache_ttl,
        }


# ── Factory ──────────────────────────────────────────────────────────────

_source_instance: Optional[CategoryTreeSource] = None


def get_category_source() -> CategoryTreeSource:
    """
    Return the configured category source.

    Reads CATEGORY_SOURCE env var:
      - "static" (default): StaticCategorySource with the sample tree
      - "remote": RemoteCategorySource against CATALOG_SERVICE_URL
        (falls back to static when the URL is not set)
    """
    global _source_instance

    if _source_instance is not None:
        return _source_instance

    backend = os.getenv("CATEGORY_SOURCE", "static").strip().lower()

    if backend == "remote":
        base_url = os.getenv("CATALOG_SERVICE_URL", "").strip()
        if base_url:
            logger.info(f"[CategorySource] Using remote catalog service at {base_url}")
            _source_instance = RemoteCategorySource(
                base_url,
                tree_path=os.getenv("CATALOG_TREE_PATH", DEFAULT_TREE_PATH),
                timeout=float(os.getenv("CATALOG_REQUEST_TIMEOUT", str(DEFAULT_TIMEOUT))),
                cache_ttl=float(os.getenv("CATEGORY_CACHE_TTL", str(DEFAULT_CACHE_TTL))),
                api_key=os.getenv("CATALOG_API_KEY") or None,
            )
            return _source_instance
        logger.warning("[CategorySource] CATEGORY_SOURCE=remote but CATALOG_SERVICE_URL is not set, using static data")

    logger.info("[CategorySource] Using static sample categories")
    _source_instance = StaticCategorySource()
    return _source_instance


def reset_category_source() -> None:
    """Reset the cached source (useful for testing or config changes)."""
    global _source_instance
    _source_instance = None
