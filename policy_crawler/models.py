"""
Listing Tree Model
==================
Immutable value types produced by a crawl.

``ListingNode`` holds the two facts extracted from one listing page.
``TreeNode`` arranges them into the rooted, ordered tree of "similar"
discoveries. Trees are assembled through ``TreeNodeDraft`` during the single
build pass and frozen before being handed to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ListingNode:
    """Title and developer privacy-policy URL of one listing."""
    title: str
    policy_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'policy_url': self.policy_url,
        }

    def to_row(self) -> Tuple[str, str]:
        """(title, policy_url) pair for tabular export."""
        return (self.title, self.policy_url or "")


@dataclass(frozen=True, eq=False, repr=False)
class TreeNode:
    """A listing and the listings discovered as similar to it.

    Equality, hashing and ``repr`` walk the tree with an explicit stack, so
    very deep trees never hit the recursion limit.
    """
    value: ListingNode
    children: Tuple["TreeNode", ...] = ()

    def shape(self) -> List[Tuple[ListingNode, int]]:
        """Pre-order ``(value, child count)`` pairs; identifies the tree exactly."""
        out: List[Tuple[ListingNode, int]] = []
        stack: List[TreeNode] = [self]
        while stack:
            node = stack.pop()
            out.append((node.value, len(node.children)))
            stack.extend(reversed(node.children))
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self is other or self.shape() == other.shape()

    def __hash__(self) -> int:
        return hash(tuple(self.shape()))

    def __repr__(self) -> str:
        return f"TreeNode(value={self.value!r}, children={len(self.children)}, size={self.size()})"

    def size(self) -> int:
        """Number of nodes in this subtree, including this one."""
        total = 0
        stack: List[TreeNode] = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total

    def depth(self) -> int:
        """Levels below this node (a leaf has depth 0)."""
        deepest = 0
        stack: List[Tuple[TreeNode, int]] = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest


@dataclass
class TreeNodeDraft:
    """Mutable builder-side node. Only the tree builder appends to it."""
    value: ListingNode
    children: List["TreeNodeDraft"] = field(default_factory=list)

    def append(self, child: "TreeNodeDraft") -> None:
        self.children.append(child)

    def freeze(self) -> TreeNode:
        """Convert this draft and all descendants into immutable TreeNodes."""
        # Post-order over an explicit stack so deep trees stay off the C stack
        frozen = {}
        stack: List[Tuple[TreeNodeDraft, bool]] = [(self, False)]
        while stack:
            draft, expanded = stack.pop()
            if expanded:
                frozen[id(draft)] = TreeNode(
                    value=draft.value,
                    children=tuple(frozen.pop(id(c)) for c in draft.children),
                )
                continue
            stack.append((draft, True))
            for child in reversed(draft.children):
                stack.append((child, False))
        return frozen[id(self)]
