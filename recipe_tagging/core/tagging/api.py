"""
Tagging API

Anyone using the recipe_tagging app should use these APIs instead of querying
the models directly.

No permissions/rules are enforced by these methods -- these must be enforced in the views.
Every function is scoped by ``owner``, the identifier of the user whose
taxonomy and recipes are being browsed.

Tags are browsed level by level ("drill-down"):

    list_children(owner, 0)                        -> the level-0 tags
    list_children(owner, 1, "素材別")               -> the level-1 tags under 素材別
    list_children(owner, 2, "素材別お肉")            -> ...

Once a tag without children is selected, `find_items_by_tag` lists the recipes
tagged with it.
"""
from __future__ import annotations

import logging
from typing import Sequence

from django.db import models
from django.db.models import F, OuterRef, Q, QuerySet, Subquery, Value
from django.db.models.functions import Coalesce, StrIndex, Trim

from .conf import get_setting
from .data import DisplayNode, NavigationStep
from .models import RecipeBookmark, TagRecord
from .models.utils import HIERARCHY_FIELDS, TAXONOMY_MAX_DEPTH, hierarchy_filter, matches_tag, token_padded
from .tree import TagForest, build_tag_tree

log = logging.getLogger(__name__)

# Export this as part of the API
TagDoesNotExist = TagRecord.DoesNotExist

__all__ = [
    "TagDoesNotExist",
    "breadcrumb",
    "find_items_by_tag",
    "find_untagged_items",
    "get_tag",
    "get_tag_name_by_hierarchy",
    "get_tag_tree",
    "get_tags",
    "list_children",
    "matches_tag",
    "select_node",
]

ITEM_SORT_ORDERS = ("desc", "asc")


def get_tags(owner: str) -> QuerySet[TagRecord]:
    """
    Returns all the tag records of the given owner, in display order.
    """
    return TagRecord.objects.filter(taxonomy__owner=owner).order_by("seq_id")


def get_tag(owner: str, full_name: str) -> TagRecord | None:
    """
    Returns the tag with the given full name, or None if the owner has no such tag.
    """
    if not full_name:
        return None
    return get_tags(owner).filter(full_name=full_name).first()


def get_tag_name_by_hierarchy(owner: str, level: int, l: str, m="", s="", ss="") -> str | None:  # noqa: E741
    """
    Returns the full name of the tag at `level` with the given hierarchy keys.

    Keys below `level` are ignored, so the same call can be used at any level:

        get_tag_name_by_hierarchy(owner, 1, "素材別", "お肉") == "素材別お肉"
    """
    _check_level(level)
    keys = [l, m, s, ss][:level + 1]
    return (
        get_tags(owner)
        .filter(level=level, **hierarchy_filter(keys))
        .values_list("full_name", flat=True)
        .first()
    )


def get_tag_tree(owner: str, name_prefixes: Sequence[str] = ()) -> TagForest:
    """
    Returns the owner's tags as a tree, optionally limited to the trees whose
    root tag starts with one of `name_prefixes`.

    e.g. get_tag_tree(owner, ["素材別"]) returns the ingredient trees only.
    """
    qs = TagRecord.objects.filter(taxonomy__owner=owner)
    if name_prefixes:
        prefix_filter = Q()
        for prefix in name_prefixes:
            prefix_filter |= Q(full_name__startswith=prefix)
        qs = qs.filter(prefix_filter)
    return build_tag_tree(qs.order_by("level", "seq_id"), name_prefixes)


def list_children(owner: str, level: int, parent_full_name: str = "") -> list[DisplayNode]:
    """
    Returns the tags at `level` whose parent is `parent_full_name`, ready to
    display.

    At level 0 the parent is ignored and all the root tags are returned. At
    deeper levels, an unknown parent returns an empty list.

    Children are matched on the exact hierarchy keys of the parent, never on a
    name prefix: the children of "料理中華" are not mixed up with those of
    "料理中華風".
    """
    _check_level(level)
    qs = _display_queryset(owner, level)
    if level > 0:
        parent = get_tags(owner).filter(level=level - 1, full_name=parent_full_name).first()
        if parent is None:
            log.debug("Unknown parent tag %r at level %s", parent_full_name, level - 1)
            return []
        qs = qs.filter(**hierarchy_filter(parent.lineage))
    return [_to_display_node(row) for row in qs]


def breadcrumb(owner: str, full_name: str) -> list[DisplayNode]:
    """
    Returns the path from the root tag down to the given tag, as DisplayNodes.

    The tag itself is the last element. Returns an empty list for an unknown tag.
    """
    tag = get_tag(owner, full_name)
    if tag is None:
        return []

    path = []
    lineage = tag.lineage
    # Walk up from the tag itself, one level at a time
    for level in range(tag.level, -1, -1):
        keys = lineage[:level + 1]
        row = _display_queryset(owner, level).filter(**hierarchy_filter(keys)).first()
        if row is None:
            # The store doesn't contain a complete lineage for this tag
            log.warning("Tag %r is missing its ancestor at level %s", full_name, level)
            break
        path.append(_to_display_node(row))
    path.reverse()
    return path


def select_node(owner: str, full_name: str = "") -> NavigationStep:
    """
    Selects a tag in the drill-down navigation and returns where that leads.

    * an empty `full_name` goes back to the root tags;
    * a tag with children shows them (one level deeper);
    * a tag without children shows the recipes tagged with it.

    Raises TagDoesNotExist for an unknown tag.
    """
    if not full_name:
        return NavigationStep(state="root", level=0, children=list_children(owner, 0))

    tag = get_tag(owner, full_name)
    if tag is None:
        raise TagDoesNotExist(f"Tag {full_name!r} does not exist")

    if tag.level < TAXONOMY_MAX_DEPTH:
        children = list_children(owner, tag.level + 1, tag.full_name)
        if children:
            return NavigationStep(state="internal", level=tag.level + 1, full_name=tag.full_name, children=children)

    items = list(find_items_by_tag(owner, tag.full_name))
    return NavigationStep(state="leaf", level=tag.level, full_name=tag.full_name, items=items)


def find_items_by_tag(owner: str, full_name: str, sort: str = "desc") -> QuerySet[RecipeBookmark]:
    """
    Returns the owner's recipes tagged with `full_name`.

    Only whole tags match: "料理中華" matches a recipe tagged "料理中華 素材別野菜"
    but not one tagged "料理中華風 素材別野菜".

    Recipes are sorted by popularity (`sort` is "desc" or "asc"), then by the
    most recent recipe number.
    """
    if sort not in ITEM_SORT_ORDERS:
        raise ValueError(f"Invalid sort order: {sort}")
    if not full_name:
        return RecipeBookmark.objects.none()

    rank_order = "-rank_score" if sort == "desc" else "rank_score"
    return _tagged_items(owner, Value(full_name)).order_by(rank_order, "-recipe_id")


def find_untagged_items(owner: str) -> QuerySet[RecipeBookmark]:
    """
    Returns the owner's recipes that don't have any tags yet.
    """
    return (
        RecipeBookmark.objects.filter(owner=owner)
        .annotate(trimmed_tags=Trim("tags"))
        .filter(trimmed_tags="")
        .order_by("-rank_score", "-recipe_id")
    )


def _check_level(level: int):
    if not 0 <= level <= TAXONOMY_MAX_DEPTH:
        raise ValueError(f"Tag level must be between 0 and {TAXONOMY_MAX_DEPTH}, got {level}")


def _tagged_items(owner: str, full_name) -> QuerySet[RecipeBookmark]:
    """
    The owner's recipes tagged with the tag named by the `full_name` expression.

    Both sides are padded with spaces so only whole tags match. StrIndex is used
    rather than `__contains`, because LIKE ignores ASCII case on SQLite.
    """
    return RecipeBookmark.objects.filter(owner=owner).annotate(
        tag_position=StrIndex(token_padded(F("tags")), token_padded(full_name)),
    ).filter(tag_position__gt=0)


def _display_queryset(owner: str, level: int) -> QuerySet:
    """
    The owner's tags at `level`, annotated with everything a DisplayNode needs.

    Image, child count and item count are computed with correlated subqueries,
    so the whole list is loaded with one query.
    """
    tagged_items = _tagged_items(owner, OuterRef("full_name"))
    top_image = tagged_items.order_by("-rank_score", "-recipe_id").values("image")[:1]
    item_count = tagged_items.order_by().annotate(
        # We need to use Func() to get Count() without GROUP BY - see https://stackoverflow.com/a/69031027
        count=models.Func(F("id"), function="Count")
    ).values("count")

    qs = get_tags(owner).filter(level=level)
    if level < TAXONOMY_MAX_DEPTH:
        children = TagRecord.objects.filter(
            taxonomy=OuterRef("taxonomy"),
            level=level + 1,
            **{field: OuterRef(field) for field in HIERARCHY_FIELDS[:level + 1]},
        ).order_by().annotate(
            count=models.Func(F("id"), function="Count")
        ).values("count")
        child_count = Coalesce(Subquery(children), 0, output_field=models.IntegerField())
    else:
        child_count = Value(0)

    return qs.annotate(
        image_uri=Coalesce(Subquery(top_image), Value(""), output_field=models.CharField()),
        child_count=child_count,
        item_count=Coalesce(Subquery(item_count), 0, output_field=models.IntegerField()),
    ).values("seq_id", "disp_name", "full_name", "level", "image_uri", "child_count", "item_count")


def _to_display_node(row: dict) -> DisplayNode:
    """
    Adds the display-only fields to a row from `_display_queryset`.
    """
    child_count = row["child_count"] or 0
    item_count = row["item_count"] or 0
    if child_count > 0:
        marker = get_setting("DRILL_DOWN_MARKER")
    else:
        marker = get_setting("LEAF_COUNT_FORMAT").format(count=item_count)
    image_uri = row["image_uri"] or ""
    return {
        "id": row["seq_id"],
        "disp_name": row["disp_name"],
        "full_name": row["full_name"],
        "level": row["level"],
        "image_uri": image_uri,
        "has_image": bool(image_uri),
        "child_count": child_count,
        "item_count": item_count,
        "marker": marker,
    }
