"""
Test the tagging APIs
"""
from __future__ import annotations

import ddt  # type: ignore[import]
import pytest
from django.test import override_settings
from django.test.testcases import TestCase

from recipe_tagging.core.tagging import api
from recipe_tagging.core.tagging.models import RecipeBookmark, TagRecord

from .test_models import TestTagTaxonomyMixin


def image(recipe_id):
    return f"https://img.example.com/{recipe_id}.jpg"


def recipe_ids(items):
    return [item.recipe_id for item in items]


def by_name(nodes):
    return {node["full_name"]: node for node in nodes}


@ddt.ddt
class TestApiLookups(TestTagTaxonomyMixin, TestCase):
    """
    Test the tag lookup functions
    """

    def test_get_tags(self):
        tags = list(api.get_tags("alice"))
        assert len(tags) == 11
        assert [tag.seq_id for tag in tags] == list(range(1, 12))
        assert not api.get_tags("bob").exists()

    def test_get_tag(self):
        assert api.get_tag("alice", "料理中華") == self.chinese
        assert api.get_tag("alice", "料理中") is None
        assert api.get_tag("alice", "") is None
        assert api.get_tag("bob", "料理中華") is None

    @ddt.data(
        ((0, "素材別"), "素材別"),
        ((1, "素材別", "お肉"), "素材別お肉"),
        ((2, "素材別", "お肉", "牛肉"), "素材別お肉牛肉"),
        ((3, "料理", "和食", "煮物", "肉じゃが"), "料理和食煮物肉じゃが"),
        # Keys below the level are ignored
        ((0, "料理", "和食", "煮物"), "料理"),
        ((1, "料理", "中華", "xyz"), "料理中華"),
        # No such tag
        ((1, "料理", "洋食"), None),
        ((2, "料理", "中華"), None),
    )
    @ddt.unpack
    def test_get_tag_name_by_hierarchy(self, args, expected):
        assert api.get_tag_name_by_hierarchy("alice", *args) == expected

    def test_get_tag_name_by_hierarchy_other_owner(self):
        assert api.get_tag_name_by_hierarchy("bob", 0, "素材別") is None

    @ddt.data(-1, 4)
    def test_get_tag_name_by_hierarchy_invalid_level(self, level):
        with pytest.raises(ValueError):
            api.get_tag_name_by_hierarchy("alice", level, "素材別")


@ddt.ddt
class TestApiListChildren(TestTagTaxonomyMixin, TestCase):
    """
    Test the drill-down list
    """

    def test_roots(self):
        nodes = api.list_children("alice", 0)
        assert nodes == [
            {
                "id": 1,
                "disp_name": "素材別",
                "full_name": "素材別",
                "level": 0,
                "image_uri": "",
                "has_image": False,
                "child_count": 2,
                "item_count": 0,
                "marker": "▼",
            },
            {
                "id": 6,
                "disp_name": "料理",
                "full_name": "料理",
                "level": 0,
                "image_uri": "",
                "has_image": False,
                "child_count": 3,
                "item_count": 0,
                "marker": "▼",
            },
        ]

    def test_roots_ignore_parent(self):
        assert api.list_children("alice", 0, "料理") == api.list_children("alice", 0)

    def test_level_1(self):
        nodes = api.list_children("alice", 1, "素材別")
        assert [node["disp_name"] for node in nodes] == ["お肉", "野菜"]
        meat, vegetables = nodes
        assert meat["child_count"] == 2
        assert meat["marker"] == "▼"
        assert vegetables["child_count"] == 0
        assert vegetables["item_count"] == 0
        assert vegetables["marker"] == "0 件"
        assert vegetables["image_uri"] == ""
        assert not vegetables["has_image"]

    def test_leaf_counts_and_images(self):
        """
        The image comes from the most popular recipe; ties go to the highest recipe number.
        """
        nodes = by_name(api.list_children("alice", 2, "素材別お肉"))
        assert list(nodes) == ["素材別お肉牛肉", "素材別お肉豚肉"]

        beef = nodes["素材別お肉牛肉"]
        # bob's recipe isn't counted
        assert beef["item_count"] == 3
        assert beef["child_count"] == 0
        assert beef["marker"] == "3 件"
        assert beef["image_uri"] == image(104)
        assert beef["has_image"]

        pork = nodes["素材別お肉豚肉"]
        assert pork["item_count"] == 1
        assert pork["marker"] == "1 件"
        assert pork["image_uri"] == image(103)

    def test_whole_tag_matching(self):
        """
        A recipe tagged "料理中華風" is not counted for "料理中華".
        """
        nodes = by_name(api.list_children("alice", 1, "料理"))
        assert list(nodes) == ["料理中華", "料理中華風", "料理和食"]
        assert nodes["料理中華"]["item_count"] == 1
        assert nodes["料理中華"]["image_uri"] == image(102)
        assert nodes["料理中華風"]["item_count"] == 1
        assert nodes["料理中華風"]["image_uri"] == image(103)

    def test_tagged_internal_node(self):
        """
        A tag with children always drills down, even if recipes are tagged with it directly.
        """
        japanese = by_name(api.list_children("alice", 1, "料理"))["料理和食"]
        assert japanese["item_count"] == 1
        assert japanese["child_count"] == 1
        assert japanese["marker"] == "▼"
        assert japanese["image_uri"] == image(101)

    def test_deepest_level(self):
        nodes = api.list_children("alice", 3, "料理和食煮物")
        assert len(nodes) == 1
        assert nodes[0]["full_name"] == "料理和食煮物肉じゃが"
        assert nodes[0]["child_count"] == 0
        assert nodes[0]["marker"] == "1 件"

    def test_children_of_sibling_with_shared_prefix(self):
        """
        Children are matched on the hierarchy keys, not on a name prefix.
        """
        TagRecord.objects.create(
            taxonomy=self.taxonomy, seq_id=20, level=2, disp_name="点心",
            full_name="料理中華風点心", l="料理", m="中華風", s="点心",
        )
        assert api.list_children("alice", 2, "料理中華") == []
        assert [node["disp_name"] for node in api.list_children("alice", 2, "料理中華風")] == ["点心"]

    def test_tags_differing_in_case(self):
        """
        Tag names are case-sensitive: a recipe tagged "素材別Beef" is not counted for "素材別beef".
        """
        for seq_id, name in ((20, "beef"), (21, "Beef")):
            TagRecord.objects.create(
                taxonomy=self.taxonomy, seq_id=seq_id, level=1, disp_name=name,
                full_name=f"素材別{name}", l="素材別", m=name,
            )
        RecipeBookmark.objects.create(owner="alice", recipe_id=106, rank_score=1, image=image(106), tags="素材別Beef")

        nodes = by_name(api.list_children("alice", 1, "素材別"))
        assert nodes["素材別beef"]["item_count"] == 0
        assert nodes["素材別beef"]["image_uri"] == ""
        assert nodes["素材別Beef"]["item_count"] == 1
        assert nodes["素材別Beef"]["image_uri"] == image(106)

    @ddt.data(
        (1, "調味料"),
        (1, "素材別お肉"),  # exists, but at level 1
        (2, "素材別"),  # exists, but at level 0
        (2, ""),
    )
    @ddt.unpack
    def test_unknown_parent(self, level, parent):
        assert api.list_children("alice", level, parent) == []

    @ddt.data(-1, 4, 10)
    def test_invalid_level(self, level):
        with pytest.raises(ValueError):
            api.list_children("alice", level, "素材別")

    def test_other_owner(self):
        assert api.list_children("bob", 0) == []
        assert api.list_children("bob", 1, "素材別") == []

    @override_settings(RECIPE_TAGGING={"DRILL_DOWN_MARKER": ">", "LEAF_COUNT_FORMAT": "({count})"})
    def test_custom_markers(self):
        nodes = by_name(api.list_children("alice", 1, "素材別"))
        assert nodes["素材別お肉"]["marker"] == ">"
        assert nodes["素材別野菜"]["marker"] == "(0)"


class TestApiBreadcrumb(TestTagTaxonomyMixin, TestCase):
    """
    Test the breadcrumb trail
    """

    def test_breadcrumb(self):
        trail = api.breadcrumb("alice", "料理和食煮物肉じゃが")
        assert [node["disp_name"] for node in trail] == ["料理", "和食", "煮物", "肉じゃが"]
        assert [node["level"] for node in trail] == [0, 1, 2, 3]
        assert trail[-1]["marker"] == "1 件"
        assert trail[0]["marker"] == "▼"

    def test_root(self):
        trail = api.breadcrumb("alice", "素材別")
        assert [node["full_name"] for node in trail] == ["素材別"]

    def test_unknown(self):
        assert api.breadcrumb("alice", "調味料") == []
        assert api.breadcrumb("alice", "") == []
        assert api.breadcrumb("bob", "素材別") == []

    def test_missing_ancestor(self):
        TagRecord.objects.filter(full_name="料理和食").delete()
        trail = api.breadcrumb("alice", "料理和食煮物肉じゃが")
        assert [node["disp_name"] for node in trail] == ["煮物", "肉じゃが"]


class TestApiSelectNode(TestTagTaxonomyMixin, TestCase):
    """
    Test the drill-down navigation state machine
    """

    def test_root(self):
        step = api.select_node("alice")
        assert step.state == "root"
        assert step.level == 0
        assert [node["disp_name"] for node in step.children] == ["素材別", "料理"]
        assert not step.is_leaf

    def test_internal(self):
        step = api.select_node("alice", "素材別お肉")
        assert step.state == "internal"
        assert step.level == 2
        assert step.full_name == "素材別お肉"
        assert [node["disp_name"] for node in step.children] == ["牛肉", "豚肉"]
        assert step.items == []

    def test_leaf(self):
        step = api.select_node("alice", "素材別お肉牛肉")
        assert step.is_leaf
        assert step.level == 2
        assert step.children == []
        assert recipe_ids(step.items) == [104, 102, 101]

    def test_leaf_above_deepest_level(self):
        step = api.select_node("alice", "素材別野菜")
        assert step.is_leaf
        assert step.items == []

    def test_deepest_level(self):
        step = api.select_node("alice", "料理和食煮物肉じゃが")
        assert step.is_leaf
        assert recipe_ids(step.items) == [104]

    def test_unknown(self):
        with pytest.raises(api.TagDoesNotExist):
            api.select_node("alice", "調味料")
        with pytest.raises(api.TagDoesNotExist):
            api.select_node("bob", "素材別お肉牛肉")


@ddt.ddt
class TestApiItems(TestTagTaxonomyMixin, TestCase):
    """
    Test filtering recipes by tag
    """

    @ddt.data(
        ("素材別お肉牛肉", "desc", [104, 102, 101]),
        ("素材別お肉牛肉", "asc", [101, 104, 102]),
        ("料理中華", "desc", [102]),
        ("料理中華風", "desc", [103]),
        ("料理和食", "desc", [101]),
        ("料理", "desc", []),
        ("素材別野菜", "desc", []),
        ("調味料", "desc", []),
        ("", "desc", []),
    )
    @ddt.unpack
    def test_find_items_by_tag(self, full_name, sort, expected):
        assert recipe_ids(api.find_items_by_tag("alice", full_name, sort)) == expected

    def test_scoped_by_owner(self):
        assert recipe_ids(api.find_items_by_tag("bob", "素材別お肉牛肉")) == [201]

    def test_invalid_sort(self):
        with pytest.raises(ValueError):
            api.find_items_by_tag("alice", "素材別お肉牛肉", "random")

    def test_substring_tags_not_matched(self):
        RecipeBookmark.objects.create(owner="alice", recipe_id=106, rank_score=1, tags="料理中華風 素材別野菜")
        assert recipe_ids(api.find_items_by_tag("alice", "料理中華")) == [102]
        assert recipe_ids(api.find_items_by_tag("alice", "料理中華風")) == [103, 106]

    def test_find_untagged_items(self):
        assert recipe_ids(api.find_untagged_items("alice")) == [105]
        assert recipe_ids(api.find_untagged_items("bob")) == []

    def test_untagged_with_blank_tags(self):
        # Bypass save() normalization
        RecipeBookmark.objects.filter(recipe_id=103).update(tags="   ")
        assert recipe_ids(api.find_untagged_items("alice")) == [103, 105]

    def test_matches_tag(self):
        assert api.matches_tag("料理中華 素材別野菜", "料理中華")
        assert not api.matches_tag("料理中華風 素材別野菜", "料理中華")

    def test_tags_differing_in_case(self):
        RecipeBookmark.objects.create(owner="alice", recipe_id=106, rank_score=1, tags="素材別Pasta 料理pasta")
        assert recipe_ids(api.find_items_by_tag("alice", "素材別pasta")) == []
        assert recipe_ids(api.find_items_by_tag("alice", "素材別Pasta")) == [106]
        assert recipe_ids(api.find_items_by_tag("alice", "料理Pasta")) == []
        assert recipe_ids(api.find_items_by_tag("alice", "料理pasta")) == [106]
