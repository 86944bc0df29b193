"""
Role registry for the ACL evaluator.

Roles form a multi-parent inheritance graph. Parent order matters: the
parent added last is searched first when rules are resolved.
"""

from typing import Dict, List, Optional, Union
from dataclasses import dataclass, field

from shared.errors import DuplicateRoleError, UnknownRoleError, UnknownParentError


@dataclass
class RoleNode:
    """Registered role and its direct links."""
    role_id: str
    parents: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)


class RoleRegistry:
    """Registry of roles with ordered multi-parent inheritance."""

    def __init__(self):
        self._roles: Dict[str, RoleNode] = {}

    def add(self, role_id: str, parents: Optional[Union[str, List[str]]] = None) -> "RoleRegistry":
        """Register a role under the given parents."""
        if self.has(role_id):
            raise DuplicateRoleError(role_id)

        if parents is None:
            parents = []
        elif not isinstance(parents, (list, tuple)):
            parents = [parents]

        # Validate everything before linking anything
        for parent in parents:
            if not self.has(parent):
                raise UnknownParentError(parent, role_id, "role")

        node = RoleNode(role_id=role_id)
        for parent in parents:
            if parent in node.parents:
                continue
            node.parents.append(parent)
            self._roles[parent].children.append(role_id)

        self._roles[role_id] = node
        return self

    def get(self, role_id: str) -> str:
        """Return the identifier of a registered role."""
        if not self.has(role_id):
            raise UnknownRoleError(role_id)
        return self._roles[role_id].role_id

    def has(self, role_id) -> bool:
        """Check whether a role is registered."""
        try:
            return role_id in self._roles
        except TypeError:
            return False

    def get_parents(self, role_id: str) -> List[str]:
        """Return the direct parents of a role, in priority order."""
        if not self.has(role_id):
            raise UnknownRoleError(role_id)
        return list(self._roles[role_id].parents)

    def inherits(self, role_id: str, ancestor_id: str, only_parents: bool = False) -> bool:
        """Check whether a role inherits from another one.

        With ``only_parents`` only direct parents are considered.
        """
        if not self.has(role_id):
            raise UnknownRoleError(role_id)
        if not self.has(ancestor_id):
            raise UnknownRoleError(ancestor_id)

        parents = self._roles[role_id].parents
        if ancestor_id in parents or only_parents:
            return ancestor_id in parents

        visited = {role_id}
        stack = list(parents)
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            if current == ancestor_id:
                return True
            visited.add(current)
            stack.extend(self._roles[current].parents)

        return False

    def remove(self, role_id: str) -> "RoleRegistry":
        """Remove a role and unlink it from its parents and children.

        Children are kept; they simply lose this parent.
        """
        if not self.has(role_id):
            raise UnknownRoleError(role_id)

        node = self._roles[role_id]
        for child in node.children:
            self._roles[child].parents.remove(role_id)
        for parent in node.parents:
            self._roles[parent].children.remove(role_id)

        del self._roles[role_id]
        return self

    def remove_all(self) -> "RoleRegistry":
        """Remove every role."""
        self._roles.clear()
        return self

    def list_ids(self) -> List[str]:
        """Return role identifiers in insertion order."""
        return list(self._roles)

    def __len__(self) -> int:
        return len(self._roles)
