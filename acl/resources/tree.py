"""
Resource tree for the ACL evaluator.

Each resource has at most one parent. Removing a resource removes its
whole subtree.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from shared.errors import DuplicateResourceError, UnknownResourceError, UnknownParentError
from ..rules.models import ResourceReference


def resource_id_of(resource: Any) -> Any:
    """Resolve a resource reference to its identifier.

    Plain identifiers are returned unchanged.
    """
    if isinstance(resource, ResourceReference):
        return resource.get_resource_id()
    return resource


@dataclass
class ResourceNode:
    """Registered resource and its direct links."""
    resource_id: str
    parent: Optional[str] = None
    children: List[str] = field(default_factory=list)


class ResourceTree:
    """Forest of resources with single-parent inheritance."""

    def __init__(self):
        self._resources: Dict[str, ResourceNode] = {}

    def add(self, resource_id: str, parent: Optional[str] = None) -> "ResourceTree":
        """Register a resource, optionally under a parent."""
        if self.has(resource_id):
            raise DuplicateResourceError(resource_id)

        if parent is not None:
            if not self.has(parent):
                raise UnknownParentError(parent, resource_id, "resource")
            self._resources[parent].children.append(resource_id)

        self._resources[resource_id] = ResourceNode(resource_id=resource_id, parent=parent)
        return self

    def get(self, resource_id: str) -> str:
        """Return the identifier of a registered resource."""
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)
        return self._resources[resource_id].resource_id

    def has(self, resource_id) -> bool:
        """Check whether a resource is registered."""
        try:
            return resource_id in self._resources
        except TypeError:
            return False

    def get_parent(self, resource_id: str) -> Optional[str]:
        """Return the parent of a resource, or None for a root."""
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)
        return self._resources[resource_id].parent

    def get_children(self, resource_id: str) -> List[str]:
        """Return the direct children of a resource."""
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)
        return list(self._resources[resource_id].children)

    def get_descendants(self, resource_id: str) -> List[str]:
        """Return every descendant of a resource, deepest first per branch."""
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)

        result: List[str] = []
        for child in self._resources[resource_id].children:
            result.extend(self.get_descendants(child))
            result.append(child)
        return result

    def inherits(self, resource_id: str, ancestor_id: str, only_parent: bool = False) -> bool:
        """Check whether a resource inherits from another one.

        With ``only_parent`` only the direct parent is considered.
        """
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)
        if not self.has(ancestor_id):
            raise UnknownResourceError(ancestor_id)

        parent = self._resources[resource_id].parent
        if parent is None:
            return False
        if parent == ancestor_id:
            return True
        if only_parent:
            return False

        while parent is not None:
            if parent == ancestor_id:
                return True
            parent = self._resources[parent].parent

        return False

    def remove(self, resource_id: str) -> List[str]:
        """Remove a resource and its subtree.

        Returns the identifiers of every removed resource.
        """
        if not self.has(resource_id):
            raise UnknownResourceError(resource_id)

        parent = self._resources[resource_id].parent
        if parent is not None:
            self._resources[parent].children.remove(resource_id)

        removed = [resource_id] + self.get_descendants(resource_id)
        for removed_id in removed:
            del self._resources[removed_id]

        return removed

    def remove_all(self) -> List[str]:
        """Remove every resource and return their identifiers."""
        removed = list(self._resources)
        self._resources.clear()
        return removed

    def list_ids(self) -> List[str]:
        """Return resource identifiers in insertion order."""
        return list(self._resources)

    def __len__(self) -> int:
        return len(self._resources)
