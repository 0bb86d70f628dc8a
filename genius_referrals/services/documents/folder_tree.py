"""
Folder tree traversal.

Storage-independent: the tree is given as a child -> parent mapping.
"""

from collections import deque
from collections.abc import Mapping


def collect_subtree(root_id: int, parent_of: Mapping[int, int | None]) -> list[int]:
    """
    Folder IDs of the subtree rooted at root_id, breadth-first.

    The root comes first. Each folder appears once even if the mapping
    contains a cycle.

    Args:
        root_id: Folder to start from
        parent_of: Folder ID -> parent folder ID (None for top level)

    Returns:
        List of folder IDs including root_id

    Example:
        >>> collect_subtree(1, {1: None, 2: 1, 3: 2, 4: None})
        [1, 2, 3]
    """
    children: dict[int, list[int]] = {}
    for folder_id, parent_id in parent_of.items():
        if parent_id is not None:
            children.setdefault(parent_id, []).append(folder_id)

    seen = {root_id}
    order = [root_id]
    queue = deque([root_id])

    while queue:
        current = queue.popleft()
        for child in sorted(children.get(current, ())):
            if child not in seen:
                seen.add(child)
                order.append(child)
                queue.append(child)

    return order
