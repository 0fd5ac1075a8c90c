"""
Utilities for tagging and taxonomy models
"""
from __future__ import annotations

from typing import Iterable, Sequence

from django.db.models import TextField, Value
from django.db.models.functions import Concat

# Deepest level a tag can live at; levels are 0 (coarsest) ... 3 (finest).
TAXONOMY_MAX_DEPTH = 3

# Longest tag name, and longest concatenation of (TAXONOMY_MAX_DEPTH + 1) of them.
TAG_NAME_MAX_LENGTH = 190
FULL_NAME_MAX_LENGTH = TAG_NAME_MAX_LENGTH * (TAXONOMY_MAX_DEPTH + 1)

# Hierarchy-key columns, from the root level down.
HIERARCHY_FIELDS = ("l", "m", "s", "ss")

# Separator used in an item's tag-membership string,
# e.g. tags="素材別お肉牛肉 料理中華"
TAG_SEPARATOR = " "


def has_whitespace(value: str) -> bool:
    """
    Tag names may not contain whitespace, since the membership string is
    whitespace-joined.
    """
    return any(ch.isspace() for ch in value)


def hierarchy_filter(keys: Sequence[str]) -> dict[str, str]:
    """
    Build keyword filters matching the given hierarchy keys exactly, level by level.

        hierarchy_filter(["素材別", "お肉"]) == {"l": "素材別", "m": "お肉"}
    """
    if len(keys) > len(HIERARCHY_FIELDS):
        raise ValueError(f"Too many hierarchy keys: {list(keys)}")
    return {field: key for field, key in zip(HIERARCHY_FIELDS, keys)}


def token_padded(expression) -> Concat:
    """
    Surround an SQL expression with separators, so that a membership string can
    be searched for a whole token: " b " is found in " a b c " but not in " a bc ".
    """
    return Concat(Value(TAG_SEPARATOR), expression, Value(TAG_SEPARATOR), output_field=TextField())


def split_tags(tag_string: str | None) -> list[str]:
    """
    Split a tag-membership string into its tag names.
    """
    return (tag_string or "").split()


def join_tags(tag_names: Iterable[str]) -> str:
    """
    Join tag names into a normalized tag-membership string.
    """
    return TAG_SEPARATOR.join(name for name in tag_names if name)


def matches_tag(tag_string: str | None, full_name: str) -> bool:
    """
    Is `full_name` one of the tokens of `tag_string`?

    Substring matches don't count: "料理中華" does not match "料理中華風 素材別野菜".
    """
    if not full_name:
        return False
    return full_name in split_tags(tag_string)
