"""
Test the tagging base models
"""
from __future__ import annotations

import ddt  # type: ignore[import]
import pytest
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.utils import IntegrityError
from django.test.testcases import TestCase
from freezegun import freeze_time

from recipe_tagging.core.tagging.models import (
    Generation,
    MasterTagRow,
    RecipeBookmark,
    TagImportTask,
    TagImportTaskState,
    TagRecord,
    Taxonomy,
)
from recipe_tagging.core.tagging.models.utils import hierarchy_filter, join_tags, matches_tag, split_tags


def get_tag(full_name):
    """
    Fetches and returns the tag with the given full name.
    """
    return TagRecord.objects.get(full_name=full_name)


class TestTagTaxonomyMixin:
    """
    Base class that uses the taxonomy fixture to load a base taxonomy, tags and recipes for testing.
    """

    fixtures = ["tests/recipe_tagging/core/fixtures/tagging.yaml"]

    owner = "alice"

    def setUp(self):
        super().setUp()
        self.taxonomy = Taxonomy.objects.get(owner=self.owner)

        # References to some tags:
        self.ingredients = get_tag("素材別")
        self.meat = get_tag("素材別お肉")
        self.beef = get_tag("素材別お肉牛肉")
        self.pork = get_tag("素材別お肉豚肉")
        self.vegetables = get_tag("素材別野菜")
        self.dishes = get_tag("料理")
        self.chinese = get_tag("料理中華")
        self.chinese_style = get_tag("料理中華風")
        self.japanese = get_tag("料理和食")
        self.stews = get_tag("料理和食煮物")
        self.nikujaga = get_tag("料理和食煮物肉じゃが")


@ddt.ddt
class TestModelTagRecord(TestTagTaxonomyMixin, TestCase):
    """
    Test the TagRecord model and its hierarchy invariants
    """

    def test_representations(self):
        assert str(self.beef) == "<TagRecord> (3) L2 素材別お肉牛肉"
        assert repr(self.beef) == "<TagRecord> (3) L2 素材別お肉牛肉"
        assert str(self.taxonomy) == f"<Taxonomy> ({self.taxonomy.id}) alice r1"

    def test_lineage(self):
        assert self.ingredients.lineage == ["素材別"]
        assert self.beef.lineage == ["素材別", "お肉", "牛肉"]
        assert self.nikujaga.lineage == ["料理", "和食", "煮物", "肉じゃが"]
        assert self.beef.hierarchy_keys == ["素材別", "お肉", "牛肉", ""]

    def test_parent_full_name(self):
        assert self.ingredients.parent_full_name == ""
        assert self.meat.parent_full_name == "素材別"
        assert self.beef.parent_full_name == "素材別お肉"
        assert self.nikujaga.parent_full_name == "料理和食煮物"

    def test_fixture_is_a_valid_prefix_tree(self):
        """
        Every non-root tag has exactly one parent, one level up.
        """
        records = {record.full_name: record for record in TagRecord.objects.filter(taxonomy=self.taxonomy)}
        for record in records.values():
            record.full_clean()
            assert record.full_name.endswith(record.disp_name)
            if record.level == 0:
                assert record.parent_full_name == ""
            else:
                parent = records[record.parent_full_name]
                assert parent.level == record.level - 1

    @ddt.data(
        # level, disp_name, full_name, keys, message
        (4, "x", "abcdex", ["a", "b", "c", "d"], "cannot be deeper"),
        (1, "", "素材別", ["素材別", "", "", ""], "cannot be empty"),
        (1, "お 肉", "素材別お 肉", ["素材別", "お 肉", "", ""], "whitespace"),
        (2, "牛肉", "素材別牛肉", ["素材別", "", "牛肉", ""], "without gaps"),
        (2, "お肉", "素材別お肉", ["素材別", "お肉", "", ""], "must match the number"),
        (1, "牛肉", "素材別牛肉", ["素材別", "お肉", "", ""], "deepest hierarchy key"),
        (1, "お肉", "素材別お肉X", ["素材別", "お肉", "", ""], "concatenation"),
    )
    @ddt.unpack
    def test_clean_invalid(self, level, disp_name, full_name, keys, message):
        record = TagRecord(
            taxonomy=self.taxonomy,
            seq_id=100,
            level=level,
            disp_name=disp_name,
            full_name=full_name,
            **hierarchy_filter(keys),
        )
        with pytest.raises(ValidationError) as exc:
            record.clean()
        assert message in str(exc.value)

    def test_unique_full_name(self):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                TagRecord.objects.create(
                    taxonomy=self.taxonomy,
                    seq_id=100,
                    level=0,
                    disp_name="素材別",
                    full_name="素材別",
                    l="素材別",
                )

    def test_unique_seq_id(self):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                TagRecord.objects.create(
                    taxonomy=self.taxonomy,
                    seq_id=1,
                    level=0,
                    disp_name="調味料",
                    full_name="調味料",
                    l="調味料",
                )

    def test_same_full_name_in_another_taxonomy(self):
        other = Taxonomy.objects.create(owner="bob")
        record = TagRecord.objects.create(
            taxonomy=other,
            seq_id=1,
            level=0,
            disp_name="素材別",
            full_name="素材別",
            l="素材別",
        )
        assert record.id

    def test_case_sensitive_full_name(self):
        taxonomy = Taxonomy.objects.create(owner="carol")
        TagRecord.objects.create(taxonomy=taxonomy, seq_id=1, level=0, disp_name="Beef", full_name="Beef", l="Beef")
        TagRecord.objects.create(taxonomy=taxonomy, seq_id=2, level=0, disp_name="beef", full_name="beef", l="beef")
        assert TagRecord.objects.filter(taxonomy=taxonomy, full_name="beef").count() == 1

    def test_delete_taxonomy_cascades(self):
        self.taxonomy.delete()
        assert not TagRecord.objects.exists()
        assert not MasterTagRow.objects.exists()


class TestModelMasterTagRow(TestTagTaxonomyMixin, TestCase):
    """
    Test the MasterTagRow model
    """

    def test_columns(self):
        row = MasterTagRow.objects.get(taxonomy=self.taxonomy, generation=Generation.CURRENT, seq_id=3)
        assert row.columns == ["素材別", "野菜", "", ""]
        assert str(row) == "<MasterTagRow> current #3: 素材別/野菜//"

    def test_unique_seq_id_per_generation(self):
        MasterTagRow.objects.create(taxonomy=self.taxonomy, generation=Generation.PREVIOUS, seq_id=1, l="素材別")
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                MasterTagRow.objects.create(taxonomy=self.taxonomy, generation=Generation.CURRENT, seq_id=1, l="x")


@ddt.ddt
class TestModelRecipeBookmark(TestTagTaxonomyMixin, TestCase):
    """
    Test the RecipeBookmark model
    """

    def test_tag_names(self):
        bookmark = RecipeBookmark.objects.get(owner="alice", recipe_id=102)
        assert bookmark.tag_names == ["素材別お肉牛肉", "料理中華"]
        assert bookmark.has_tag("料理中華")
        assert not bookmark.has_tag("料理")
        assert not bookmark.has_tag("")

    def test_save_normalizes_tags(self):
        bookmark = RecipeBookmark.objects.create(
            owner="alice",
            recipe_id=300,
            title="カレー",
            tags="  料理和食   素材別お肉牛肉\t",
        )
        bookmark.refresh_from_db()
        assert bookmark.tags == "料理和食 素材別お肉牛肉"

    def test_unique_recipe_per_owner(self):
        RecipeBookmark.objects.create(owner="bob", recipe_id=101)
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                RecipeBookmark.objects.create(owner="alice", recipe_id=101)

    @ddt.data(
        ("料理中華 素材別野菜", "料理中華", True),
        ("料理中華風 素材別野菜", "料理中華", False),
        ("素材別野菜 料理中華", "料理中華", True),
        ("料理中華", "料理", False),
        ("", "料理中華", False),
        (None, "料理中華", False),
        ("料理中華", "", False),
    )
    @ddt.unpack
    def test_matches_tag(self, tag_string, full_name, expected):
        assert matches_tag(tag_string, full_name) is expected

    def test_split_and_join(self):
        assert split_tags(" a  b ") == ["a", "b"]
        assert split_tags(None) == []
        assert join_tags(["a", "", "b"]) == "a b"

    def test_hierarchy_filter(self):
        assert hierarchy_filter(["素材別", "お肉"]) == {"l": "素材別", "m": "お肉"}
        assert hierarchy_filter([]) == {}
        with pytest.raises(ValueError):
            hierarchy_filter(["a", "b", "c", "d", "e"])


class TestModelTagImportTask(TestTagTaxonomyMixin, TestCase):
    """
    Test the TagImportTask model
    """

    @freeze_time("2026-03-01 09:30:00")
    def test_create_and_log(self):
        task = TagImportTask.create(self.taxonomy)
        assert task.status == TagImportTaskState.LOADING_DATA
        assert task.log == "[2026-03-01 09:30:00] Import task created\n"

        task.add_log("Something happened")
        task.refresh_from_db()
        assert task.log.endswith("[2026-03-01 09:30:00] Something happened\n")

    def test_log_exception(self):
        task = TagImportTask.create(self.taxonomy)
        task.log_exception(ValueError("boom"))
        task.refresh_from_db()
        assert task.status == TagImportTaskState.ERROR
        assert "ValueError('boom')" in task.log

    def test_end_success(self):
        task = TagImportTask.create(self.taxonomy)
        task.end_success()
        task.refresh_from_db()
        assert task.status == TagImportTaskState.SUCCESS
        assert "Execution finished" in task.log
