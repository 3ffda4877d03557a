import os
import sys

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path to allow importing catalog and main
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catalog.models import CategoryNode  # noqa: E402
from catalog.sources import StaticCategorySource, reset_category_source  # noqa: E402
from dependencies import get_source, reset_resolver  # noqa: E402


def _men_tree():
    return [
        CategoryNode(
            id="1",
            name="Men",
            slug="men",
            level=1,
            path="Men",
            order=1,
            children=[
                CategoryNode(
                    id="2",
                    name="Mens Apparel",
                    slug="men/mens-apparel",
                    level=2,
                    path="Men > Mens Apparel",
                    order=1,
                    children=[
                        CategoryNode(
                            id="3",
                            name="Casual Short Sleeve Shirts",
                            slug="men/mens-apparel/casual-short-sleeve-shirts",
                            level=3,
                            path="Men > Mens Apparel > Casual Short Sleeve Shirts",
                            order=1,
                            product_count=12,
                        )
                    ],
                ),
                CategoryNode(
                    id="4",
                    name="Accessories",
                    slug="men/accessories",
                    level=2,
                    path="Men > Accessories",
                    order=2,
                ),
            ],
        ),
        CategoryNode(
            id="5",
            name="Women",
            slug="women",
            level=1,
            path="Women",
            order=2,
        ),
    ]


@pytest.fixture(name="category_tree")
def category_tree_fixture():
    """Men > Mens Apparel > Casual Short Sleeve Shirts, Men > Accessories, Women."""
    return _men_tree()


@pytest.fixture(name="casual_shirts")
def casual_shirts_fixture(category_tree):
    return category_tree[0].children[0].children[0]


@pytest.fixture(autouse=True)
def reset_singletons():
    reset_category_source()
    reset_resolver()
    yield
    reset_category_source()
    reset_resolver()


@pytest.fixture(name="client")
def client_fixture(category_tree):
    from main import app

    source = StaticCategorySource(category_tree)
    app.dependency_overrides[get_source] = lambda: source

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
