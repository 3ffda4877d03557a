"""Tests for slug parsing, tree walking and facet mapping."""

import pytest

from catalog.lookup import (
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
from catalog.models import CategoryNode
from catalog.tree import iter_category_nodes
from exceptions import (
    CategoryPathError,
    EmptyPathError,
    InvalidLevelError,
    MissingSlugError,
    UnsupportedDepthError,
)


class TestParseCategorySlug:
    def test_single_level(self):
        assert parse_category_slug("men") == ["men"]

    def test_multi_level(self):
        assert parse_category_slug("men/mens-apparel/casual-short-sleeve-shirts") == [
            "men",
            "mens-apparel",
            "casual-short-sleeve-shirts",
        ]

    def test_leading_and_trailing_slashes(self):
        assert parse_category_slug("/men/mens-apparel/") == ["men", "mens-apparel"]

    def test_repeated_slashes_collapse(self):
        assert parse_category_slug("men//mens-apparel") == ["men", "mens-apparel"]

    @pytest.mark.parametrize("slug", ["", "   ", "///", None])
    def test_blank_input_is_empty(self, slug):
        assert parse_category_slug(slug) == []

    def test_segments_are_not_validated(self):
        assert parse_category_slug("Men & Boys/50% off") == ["Men & Boys", "50% off"]

    @pytest.mark.parametrize("slug", ["men", "/men//mens-apparel/", "a/b/c", "//x///y//"])
    def test_reparse_is_idempotent(self, slug):
        parsed = parse_category_slug(slug)
        assert parse_category_slug("/".join(parsed)) == parsed


class TestFindCategoryBySlugPath:
    def test_level_one(self, category_tree):
        result = find_category_by_slug_path(["men"], category_tree)
        assert result is not None
        assert result.name == "Men"

    def test_level_two(self, category_tree):
        result = find_category_by_slug_path(["men", "mens-apparel"], category_tree)
        assert result.name == "Mens Apparel"
        assert result.slug == "men/mens-apparel"

    def test_level_three(self, category_tree):
        result = find_category_by_slug_path(
            ["men", "mens-apparel", "casual-short-sleeve-shirts"], category_tree
        )
        assert result.name == "Casual Short Sleeve Shirts"

    def test_missing_child_returns_none(self, category_tree):
        assert find_category_by_slug_path(["men", "missing"], category_tree) is None

    def test_missing_root_returns_none(self, category_tree):
        assert find_category_by_slug_path(["kids"], category_tree) is None

    def test_empty_inputs_return_none(self, category_tree):
        assert find_category_by_slug_path([], category_tree) is None
        assert find_category_by_slug_path(["men"], []) is None

    def test_path_past_leaf_returns_none(self, category_tree):
        assert find_category_by_slug_path(["women", "dresses"], category_tree) is None
        assert find_category_by_slug_path(["men", "accessories", "belts"], category_tree) is None

    def test_deep_level_requires_cumulative_slug(self):
        tree = [
            CategoryNode(
                id="1", name="Men", slug="men", level=1, path="Men",
                children=[CategoryNode(id="2", name="Shoes", slug="shoes", level=2, path="Men > Shoes")],
            )
        ]
        assert find_category_by_slug_path(["men", "shoes"], tree) is None

    def test_first_match_wins_for_duplicate_slugs(self):
        tree = [
            CategoryNode(id="a", name="Sale", slug="sale", level=1, path="Sale"),
            CategoryNode(id="b", name="Sale", slug="sale", level=1, path="Sale"),
        ]
        assert find_category_by_slug_path(["sale"], tree).id == "a"

    def test_every_node_resolves_from_its_own_slug(self, category_tree):
        for node in iter_category_nodes(category_tree):
            assert find_category_by_slug_path(parse_category_slug(node.slug), category_tree) is node

    def test_does_not_mutate_tree(self, category_tree):
        before = [node.model_dump() for node in category_tree]
        find_category_by_slug_path(["men", "mens-apparel"], category_tree)
        assert [node.model_dump() for node in category_tree] == before


class TestFindCategoryBySlug:
    def test_complete_slug(self, category_tree):
        assert find_category_by_slug("men/mens-apparel", category_tree).id == "2"

    def test_slug_with_slashes(self, category_tree):
        assert find_category_by_slug("/men/mens-apparel/", category_tree).id == "2"

    def test_unknown_slug(self, category_tree):
        assert find_category_by_slug("men/unknown", category_tree) is None


class TestGetCategoryFacetField:
    def test_level_one(self):
        facet = get_category_facet_field("Men")
        assert facet.field == "categories.lvl0"
        assert facet.value == "Men"

    def test_level_two(self):
        facet = get_category_facet_field("Men > Mens Apparel")
        assert facet.field == "categories.lvl1"
        assert facet.value == "Men > Mens Apparel"

    def test_level_three(self):
        facet = get_category_facet_field("Men > Mens Apparel > Casual Short Sleeve Shirts")
        assert facet.field == "categories.lvl2"
        assert facet.value == "Men > Mens Apparel > Casual Short Sleeve Shirts"

    def test_value_is_trimmed_but_not_rejoined(self):
        facet = get_category_facet_field("  Home & Garden > Furniture  ")
        assert facet.value == "Home & Garden > Furniture"

    def test_four_levels_rejected(self):
        with pytest.raises(UnsupportedDepthError, match="4 levels") as exc_info:
            get_category_facet_field("A > B > C > D")
        assert exc_info.value.level_count == 4
        assert exc_info.value.status_code == 422

    @pytest.mark.parametrize("path", ["", "   "])
    def test_empty_path_rejected(self, path):
        with pytest.raises(EmptyPathError):
            get_category_facet_field(path)

    def test_separator_only_counts_zero_levels(self):
        with pytest.raises(UnsupportedDepthError) as exc_info:
            get_category_facet_field(" > ")
        assert exc_info.value.level_count == 0

    def test_errors_share_a_base(self):
        with pytest.raises(CategoryPathError):
            get_category_facet_field("A > B > C > D")

    def test_field_follows_node_level(self, category_tree):
        for node in iter_category_nodes(category_tree):
            facet = get_category_facet_field(node.path)
            assert facet.field == f"categories.lvl{node.level - 1}"
            assert facet.value == node.path


class TestBuildCategoryFilter:
    def test_quoted_equality_filter(self):
        assert build_category_filter("Men > Mens Apparel") == 'categories.lvl1:"Men > Mens Apparel"'

    def test_embedded_quotes_are_escaped(self):
        assert build_category_filter('12" Records') == 'categories.lvl0:"12\\" Records"'


class TestBuildCategoryUrl:
    def test_uses_slug_verbatim(self, category_tree):
        assert build_category_url(category_tree[0].children[0]) == "/c/men/mens-apparel"

    def test_missing_slug_rejected(self):
        with pytest.raises(MissingSlugError):
            build_category_url(CategoryNode(id="9", name="Orphan", slug="", level=1, path="Orphan"))

    def test_url_round_trips_through_resolver(self, category_tree):
        for node in iter_category_nodes(category_tree):
            url = build_category_url(node)
            assert url.startswith("/c/")
            assert find_category_by_slug(url[len("/c/"):], category_tree) is node


class TestGetCategoryBreadcrumbPath:
    def test_root_to_leaf(self, category_tree, casual_shirts):
        names = [node.name for node in get_category_breadcrumb_path(casual_shirts, category_tree)]
        assert names == ["Men", "Mens Apparel", "Casual Short Sleeve Shirts"]

    def test_root_only(self, category_tree):
        assert get_category_breadcrumb_path(category_tree[0], category_tree) == [category_tree[0]]

    def test_unrelated_target_gives_empty_list(self, category_tree):
        stranger = CategoryNode(id="99", name="Kids", slug="kids", level=1, path="Kids")
        assert get_category_breadcrumb_path(stranger, category_tree) == []


class TestLevelsAndHelpers:
    def test_level_matches_node(self, category_tree):
        for node in iter_category_nodes(category_tree):
            assert get_category_level(node.path) == node.level

    @pytest.mark.parametrize("path,count", [("", 0), ("A > B > C > D", 4)])
    def test_invalid_level(self, path, count):
        with pytest.raises(InvalidLevelError, match=f"Invalid category level: {count}"):
            get_category_level(path)

    def test_is_valid_category_path(self):
        assert is_valid_category_path("Men")
        assert is_valid_category_path("Men > Mens Apparel > Casual Short Sleeve Shirts")
        assert not is_valid_category_path("")
        assert not is_valid_category_path("A > B > C > D")

    def test_children_accessors(self, category_tree, casual_shirts):
        men = category_tree[0]
        assert has_children(men)
        assert [child.name for child in get_category_children(men)] == ["Mens Apparel", "Accessories"]
        assert not has_children(casual_shirts)
        assert get_category_children(casual_shirts) == []

    def test_children_accessor_returns_copy(self, category_tree):
        men = category_tree[0]
        get_category_children(men).clear()
        assert len(men.children) == 2

    def test_null_children_normalized(self):
        node = CategoryNode.model_validate(
            {"id": 7, "name": "Leaf", "slug": "leaf", "level": 1, "path": "Leaf", "children": None}
        )
        assert node.id == "7"
        assert get_category_children(node) == []
        assert not has_children(node)
