"""
Rule editor for the ACL evaluator.

Normalizes role, resource and privilege arguments into scope lists and
applies add/remove operations to the rule table.
"""

from typing import Any, List, Optional

from shared.errors import InvalidEffectError, UnknownOperationError
from shared.logging import get_logger
from ..roles.registry import RoleRegistry
from ..resources.tree import ResourceTree, resource_id_of
from .models import RuleEffect, RuleOperation, Assertion
from .table import RuleTable


def normalize_effect(effect: Any) -> RuleEffect:
    """Coerce an effect value, case-insensitively."""
    if isinstance(effect, RuleEffect):
        return effect
    if isinstance(effect, str):
        try:
            return RuleEffect(effect.lower())
        except ValueError:
            pass
    raise InvalidEffectError(effect)


def normalize_operation(operation: Any) -> RuleOperation:
    """Coerce an operation value."""
    if isinstance(operation, RuleOperation):
        return operation
    if isinstance(operation, str):
        try:
            return RuleOperation(operation.lower())
        except ValueError:
            pass
    raise UnknownOperationError(operation)


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


class RuleEditor:
    """Mutation API over the rule table."""

    def __init__(self, roles: RoleRegistry, resources: ResourceTree, table: RuleTable):
        self.logger = get_logger("acl.rule_editor")
        self.roles = roles
        self.resources = resources
        self.table = table

    def role_scopes(self, roles: Any) -> List[Optional[str]]:
        """Validate roles and return their scopes; empty means all roles."""
        items = _as_list(roles)
        if not items:
            return [None]
        return [None if role is None else self.roles.get(role) for role in items]

    def resource_scopes(self, resources: Any) -> List[Optional[str]]:
        """Validate resources and expand each one to its subtree.

        A bare ``None`` with resources registered covers the all-resources
        scope plus every concrete resource.
        """
        if resources is None and len(self.resources) > 0:
            items: List[Any] = [None] + self.resources.list_ids()
        else:
            items = _as_list(resources)
            if not items:
                items = [None]

        scopes: List[Optional[str]] = []
        for resource in items:
            if resource is None:
                scopes.append(None)
                continue
            resource_id = self.resources.get(resource_id_of(resource))
            scopes.extend(self.resources.get_descendants(resource_id))
            scopes.append(resource_id)
        return scopes

    @staticmethod
    def privilege_scopes(privileges: Any) -> List[str]:
        """Normalize privileges; empty means the all-privileges rule."""
        if privileges is None:
            return []
        return [privilege for privilege in _as_list(privileges) if privilege is not None]

    def set_rule(
        self,
        operation: Any,
        effect: Any,
        roles: Any = None,
        resources: Any = None,
        privileges: Any = None,
        assertion: Optional[Assertion] = None
    ) -> int:
        """Add or remove rules for every (resource, role) pair.

        Returns the number of rules written or erased.
        """
        effect = normalize_effect(effect)
        operation = normalize_operation(operation)
        role_scopes = self.role_scopes(roles)
        resource_scopes = self.resource_scopes(resources)
        privilege_scopes = self.privilege_scopes(privileges) or [None]

        changed = 0
        for resource in resource_scopes:
            for role in role_scopes:
                for privilege in privilege_scopes:
                    if operation is RuleOperation.ADD:
                        self.table.set_rule(resource, role, privilege, effect, assertion)
                        changed += 1
                    elif self.table.remove_rule(resource, role, privilege, effect):
                        changed += 1

        self.logger.debug(
            "Rules updated",
            operation=operation.value,
            effect=effect.value,
            resources=resource_scopes,
            roles=role_scopes,
            privileges=privilege_scopes,
            changed=changed
        )
        return changed
