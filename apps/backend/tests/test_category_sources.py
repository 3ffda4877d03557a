"""Tests for category tree sources and the source factory."""

import httpx
import pytest

from catalog.sources import (
    RemoteCategorySource,
    StaticCategorySource,
    get_category_source,
)
from exceptions import CatalogServiceError

NESTED_TREE = [
    {
        "id": "1",
        "name": "Men",
        "slug": "men",
        "level": 1,
        "children": [
            {"id": "2", "name": "Mens Apparel", "slug": "men/mens-apparel", "level": 2},
        ],
    }
]


def _source(handler, **kwargs) -> RemoteCategorySource:
    return RemoteCategorySource(
        "https://catalog.test/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_static_source_defaults_to_sample_tree():
    tree = await StaticCategorySource().get_category_tree()
    assert [node.slug for node in tree][:2] == ["men", "women"]
    assert await StaticCategorySource().health_check()


@pytest.mark.asyncio
async def test_remote_source_parses_plain_list():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=NESTED_TREE)

    source = _source(handler, api_key="secret-key")
    tree = await source.get_category_tree()

    assert tree[0].children[0].path == "Men > Mens Apparel"
    assert str(requests[0].url) == "https://catalog.test/api/category-tree"
    assert requests[0].headers["Authorization"] == "Bearer secret-key"


@pytest.mark.asyncio
async def test_remote_source_parses_status_envelope():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": {"code": 0, "message": "ok"}, "tree": NESTED_TREE})

    tree = await _source(handler).get_category_tree()
    assert tree[0].name == "Men"


@pytest.mark.asyncio
async def test_remote_source_rejects_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": {"code": 3, "message": "shard offline"}, "tree": []})

    with pytest.raises(CatalogServiceError, match="shard offline") as exc_info:
        await _source(handler).get_category_tree()
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_remote_source_caches_within_ttl():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, json=NESTED_TREE)

    source = _source(handler, cache_ttl=300)
    first = await source.get_category_tree()
    second = await source.get_category_tree()

    assert first is second
    assert calls["count"] == 1
    assert source.cache_stats()["size"] == 1


@pytest.mark.asyncio
async def test_remote_source_serves_stale_tree_on_failure():
    responses = [httpx.Response(200, json=NESTED_TREE), httpx.Response(503)]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    source = _source(handler, cache_ttl=0)
    first = await source.get_category_tree()
    second = await source.get_category_tree()

    assert second is first


@pytest.mark.asyncio
async def test_remote_source_raises_without_cached_tree():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(CatalogServiceError, match="status 500"):
        await _source(handler).get_category_tree()


@pytest.mark.asyncio
async def test_remote_source_wraps_timeouts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(CatalogServiceError, match="timeout"):
        await _source(handler, timeout=1.5).get_category_tree()


@pytest.mark.asyncio
async def test_remote_source_rejects_invalid_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    with pytest.raises(CatalogServiceError, match="invalid JSON"):
        await _source(handler).get_category_tree()


@pytest.mark.asyncio
async def test_clear_cache_forces_refetch():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, json=NESTED_TREE)

    source = _source(handler)
    await source.get_category_tree()
    source.clear_cache()
    assert source.cache_stats()["size"] == 0
    await source.get_category_tree()
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_remote_health_check():
    healthy = _source(lambda request: httpx.Response(200, json=[]))
    down = _source(lambda request: httpx.Response(503))
    assert await healthy.health_check()
    assert not await down.health_check()


def test_remote_source_requires_url():
    with pytest.raises(ValueError):
        RemoteCategorySource("")


def test_factory_defaults_to_static(monkeypatch):
    monkeypatch.delenv("CATEGORY_SOURCE", raising=False)
    assert isinstance(get_category_source(), StaticCategorySource)


def test_factory_builds_remote_source(monkeypatch):
    monkeypatch.setenv("CATEGORY_SOURCE", "remote")
    monkeypatch.setenv("CATALOG_SERVICE_URL", "https://catalog.internal")
    monkeypatch.setenv("CATEGORY_CACHE_TTL", "60")

    source = get_category_source()
    assert isinstance(source, RemoteCategorySource)
    assert source.cache_ttl == 60.0
    assert get_category_source() is source


def test_factory_falls_back_without_url(monkeypatch):
    monkeypatch.setenv("CATEGORY_SOURCE", "remote")
    monkeypatch.delenv("CATALOG_SERVICE_URL", raising=False)
    assert isinstance(get_category_source(), StaticCategorySource)
