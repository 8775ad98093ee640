"""
Pre-order flattening of a listing tree into export records.
"""

from __future__ import annotations

from typing import List

from .models import ListingNode, TreeNode


def flatten(tree: TreeNode) -> List[ListingNode]:
    """
    Depth-first, pre-order walk: a node's listing, then its children left to right.

    Listings without a policy URL (only the root can have one) are left out.
    """
    records: List[ListingNode] = []
    stack: List[TreeNode] = [tree]
    while stack:
        node = stack.pop()
        if node.value.policy_url is not None:
            records.append(node.value)
        # Reversed so the leftmost child is popped first
        stack.extend(reversed(node.children))
    return records
