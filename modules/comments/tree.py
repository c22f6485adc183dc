"""
Comment tree construction and descendant collection.

Both functions work on the flat list of a post's comments and never
mutate it. They are iterative, so arbitrarily deep reply chains are safe.
"""

from collections import deque
from typing import Iterable, Optional, Sequence

from .models import Comment, CommentNode


def build_comment_tree(comments: Sequence[Comment]) -> list[CommentNode]:
    """
    Arrange a flat comment list into a forest.

    Roots are comments with no parent, or whose parent is not in the list
    (orphans are promoted). Siblings keep their order from the input.
    A parent cycle, which a well-formed store never contains, is broken by
    promoting the first member of the cycle seen in input order.
    """
    nodes: dict[str, CommentNode] = {}
    position: dict[str, int] = {}
    for comment in comments:
        if comment.id in nodes:
            continue
        nodes[comment.id] = CommentNode(**comment.model_dump(exclude={"children"}))
        position[comment.id] = len(position)

    def parent_of(comment_id: str) -> Optional[str]:
        parent_id = nodes[comment_id].parent_id
        if parent_id is None or parent_id == comment_id or parent_id not in nodes:
            return None
        return parent_id

    # Any comment whose ancestor chain loops back is promoted to a root
    promoted: set[str] = set()
    state: dict[str, int] = {}  # 1 = on current path, 2 = resolved
    for start in position:
        if start in state:
            continue
        path: list[str] = []
        current: Optional[str] = start
        while current is not None and current not in state:
            state[current] = 1
            path.append(current)
            current = parent_of(current)
        if current is not None and state.get(current) == 1:
            cycle = path[path.index(current):]
            promoted.add(min(cycle, key=position.__getitem__))
        for comment_id in path:
            state[comment_id] = 2

    roots: list[CommentNode] = []
    for comment_id in position:
        node = nodes[comment_id]
        parent_id = None if comment_id in promoted else parent_of(comment_id)
        if parent_id is None:
            roots.append(node)
        else:
            nodes[parent_id].children.append(node)
    return roots


def collect_descendant_ids(comments: Iterable[Comment], target_id: str) -> list[str]:
    """
    Return the target id followed by every transitive reply, breadth first.

    Each id appears once; a corrupt parent cycle cannot loop forever.
    """
    children: dict[str, list[str]] = {}
    for comment in comments:
        if comment.parent_id is not None:
            children.setdefault(comment.parent_id, []).append(comment.id)

    collected = [target_id]
    seen = {target_id}
    queue = deque([target_id])
    while queue:
        current = queue.popleft()
        for child_id in children.get(current, []):
            if child_id not in seen:
                seen.add(child_id)
                collected.append(child_id)
                queue.append(child_id)
    return collected
