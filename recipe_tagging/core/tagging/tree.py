"""
Rebuild a navigable tag tree from flat tag records.

Tag records don't store a parent pointer: a tag's parent is the record whose
full name is the tag's own full name with its display name removed from the
end. For example, the parent of ("素材別お肉牛肉", "牛肉") is "素材別お肉".

    forest = build_tag_tree(records, name_prefixes=["素材別"])
    for depth, node in forest.walk():
        print("  " * depth, node.disp_name, "" if node.selectable else "▼")

Nodes are kept in a flat list (``TagForest.nodes``) and refer to each other by
index, so the forest never holds reference cycles.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Protocol, Sequence

from attrs import define, field

log = logging.getLogger(__name__)


class TagLike(Protocol):
    """
    Anything with the tag record fields the tree needs (e.g. a TagRecord).
    """
    seq_id: int
    level: int
    disp_name: str
    full_name: str


@define
class TagNode:
    """
    A tag in the forest.

    A node is selectable (can be applied to a recipe) only if it has no
    children.
    """

    id: int
    level: int
    disp_name: str
    full_name: str
    parent: int | None = None
    children: list[int] = field(factory=list)
    selectable: bool = True


@define
class TagForest:
    """
    Tag nodes in arena storage, plus the indexes of the root nodes.
    """

    nodes: list[TagNode] = field(factory=list)
    root_indexes: list[int] = field(factory=list)
    _by_name: dict[str, int] = field(factory=dict)

    @property
    def roots(self) -> list[TagNode]:
        return [self.nodes[index] for index in self.root_indexes]

    def children(self, node: TagNode) -> list[TagNode]:
        return [self.nodes[index] for index in node.children]

    def parent(self, node: TagNode) -> TagNode | None:
        return None if node.parent is None else self.nodes[node.parent]

    def find(self, full_name: str) -> TagNode | None:
        """
        Returns the node with the given full name, if it is part of the forest.
        """
        index = self._by_name.get(full_name)
        if index is None or not self._is_reachable(index):
            return None
        return self.nodes[index]

    def walk(self) -> Iterator[tuple[int, TagNode]]:
        """
        Yields (depth, node) for every node reachable from a root, depth first,
        in display order.
        """
        stack = [(0, index) for index in reversed(self.root_indexes)]
        while stack:
            depth, index = stack.pop()
            node = self.nodes[index]
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))

    def selectable(self) -> list[TagNode]:
        """
        All the leaf nodes of the forest, in display order.
        """
        return [node for _depth, node in self.walk() if node.selectable]

    def _is_reachable(self, index: int) -> bool:
        node = self.nodes[index]
        while node.parent is not None:
            node = self.nodes[node.parent]
        return self._by_name[node.full_name] in self.root_indexes


def build_tag_tree(records: Iterable[TagLike], name_prefixes: Sequence[str] = ()) -> TagForest:
    """
    Build a forest from flat tag records.

    Only root nodes whose full name starts with one of `name_prefixes` are
    kept (all of them if no prefix is given). Records whose parent can't be
    found become roots themselves, and are dropped if they don't match a
    prefix; malformed input never raises.

    Roots and children are sorted by id.
    """
    forest = TagForest()

    # First pass: one node per distinct full name
    for record in records:
        if record.full_name in forest._by_name:  # pylint: disable=protected-access
            log.debug("Ignoring duplicate tag record %r", record.full_name)
            continue
        forest._by_name[record.full_name] = len(forest.nodes)  # pylint: disable=protected-access
        forest.nodes.append(TagNode(
            id=record.seq_id,
            level=record.level,
            disp_name=record.disp_name,
            full_name=record.full_name,
        ))

    # Second pass: attach every node to its parent, if it has one
    candidate_roots = []
    for index, node in enumerate(forest.nodes):
        parent_name = node.full_name[:-len(node.disp_name)] if node.disp_name else ""
        parent_index = forest._by_name.get(parent_name) if parent_name else None  # pylint: disable=protected-access
        if parent_index is not None and parent_index != index:
            parent = forest.nodes[parent_index]
            parent.children.append(index)
            parent.selectable = False
            node.parent = parent_index
        else:
            candidate_roots.append(index)

    # Third pass: keep the roots that match a prefix
    forest.root_indexes = [
        index for index in candidate_roots
        if forest.nodes[index].parent is None and _matches_prefix(forest.nodes[index].full_name, name_prefixes)
    ]

    def sort_key(index: int) -> int:
        return forest.nodes[index].id

    for node in forest.nodes:
        node.children.sort(key=sort_key)
    forest.root_indexes.sort(key=sort_key)
    return forest


def _matches_prefix(full_name: str, name_prefixes: Sequence[str]) -> bool:
    if not name_prefixes:
        return True
    return any(full_name.startswith(prefix) for prefix in name_prefixes)
