"""
Department hierarchy resolution.
Walks the department forest to find a department's subtree.
"""

from collections import deque
from typing import Dict, FrozenSet, Iterable, List

from taskhub.domain.models.department import Department


class DepartmentHierarchyResolver:
    """
    Domain service answering subtree questions over a department forest.

    Built from a snapshot of departments and never mutates them. Every walk
    keeps a visited set, so a malformed cycle terminates.
    """

    def __init__(self, departments: Iterable[Department]):
        self._departments: Dict[str, Department] = {}
        self._children: Dict[str, List[str]] = {}

        for department in departments:
            self._departments[department.id] = department
        for department in self._departments.values():
            if department.parent_id is not None:
                self._children.setdefault(department.parent_id, []).append(department.id)

    def resolve_subtree(self, root_id: str) -> FrozenSet[str]:
        """
        Return the root and all its descendants, however deep.

        An unknown root resolves to just itself.
        """
        visited = {root_id}
        queue = deque([root_id])

        while queue:
            current = queue.popleft()
            for child_id in self._children.get(current, ()):
                if child_id not in visited:
                    visited.add(child_id)
                    queue.append(child_id)

        return frozenset(visited)

    def is_in_subtree(self, root_id: str, department_id: str) -> bool:
        return department_id in self.resolve_subtree(root_id)

    def ancestors(self, department_id: str) -> List[str]:
        """Parent chain from the direct parent up to the root."""
        chain: List[str] = []
        seen = {department_id}
        current = self._departments.get(department_id)

        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            chain.append(current.parent_id)
            current = self._departments.get(current.parent_id)

        return chain

    def department_names(self) -> Dict[str, str]:
        """Map of department id to name."""
        return {d.id: d.name for d in self._departments.values()}
