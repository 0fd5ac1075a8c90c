"""
Data models used by recipe-tagging
"""
from __future__ import annotations

from typing import Literal, TypedDict

from attrs import define, field
from typing_extensions import NotRequired

from .models import RecipeBookmark


class DisplayNode(TypedDict):
    """
    A tag record prepared for display in a drill-down list.

    This is computed per request and never stored. Like the other API data, it
    is a plain dictionary rather than an instance of this class.
    """
    # The tag's seq_id within its taxonomy
    id: int
    disp_name: str
    full_name: str
    level: int
    # Image of the most popular recipe with this tag, or "" if no recipe has it
    image_uri: str
    has_image: bool
    child_count: int
    item_count: int
    # "▼" when the tag can be drilled into, otherwise the recipe count, e.g. "3 件"
    marker: str


class TreeNodeData(TypedDict):
    """
    One node of a nested tag forest, as returned by the tree REST endpoint.
    """
    id: int
    level: int
    disp_name: str
    full_name: str
    selectable: bool
    children: NotRequired[list[TreeNodeData]]


NavigationState = Literal["root", "internal", "leaf"]


@define
class NavigationStep:
    """
    Where the user ends up after selecting a tag in the drill-down list.

    Selecting an internal tag shows its children; selecting a leaf tag shows
    the recipes tagged with it.
    """

    state: NavigationState
    level: int
    full_name: str = ""
    children: list[DisplayNode] = field(factory=list)
    items: list[RecipeBookmark] = field(factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.state == "leaf"
