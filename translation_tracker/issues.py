"""Registry of nodes carrying unresolved translation issues."""

from typing import List, Tuple, Union

NodeId = Union[int, str]

TITLE = "title"
GLOBAL = "global"


def _sort_key(node_id: NodeId) -> Tuple[int, Union[int, str]]:
    # Special string ids ('global', 'title') first, then section numbers ascending
    if isinstance(node_id, int):
        return (1, node_id)
    if node_id.isdigit():
        return (1, int(node_id))
    return (0, node_id)


class IssueRegistry:
    """Ordered set of node ids with issues."""

    def __init__(self):
        self._nodes: List[NodeId] = []

    def set_issues(self, node_id: NodeId, has_issues: bool):
        """Track or untrack a node.

        Args:
            node_id: Section number or one of the special ids 'title' and 'global'
            has_issues: True if the node has unresolved issues
        """
        if node_id in self._nodes:
            if not has_issues:
                self._nodes.remove(node_id)
            return

        if not has_issues:
            return

        self._nodes.append(node_id)
        self._nodes.sort(key=_sort_key)

    def has_issues(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    @property
    def nodes(self) -> List[NodeId]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)
