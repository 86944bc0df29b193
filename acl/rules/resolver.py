"""
Access decision resolver for the ACL evaluator.

A query walks the resource ancestry outward, from the queried resource up
to the all-resources scope. At each level the queried role and its
ancestors are searched depth-first, then the all-roles rules are
consulted. The default rule at the all-resources/all-roles scope always
resolves, so the walk terminates.
"""

from typing import Any, Callable, Optional, Set
from dataclasses import dataclass

from ..roles.registry import RoleRegistry
from ..resources.tree import ResourceTree, resource_id_of
from .models import RuleEffect
from .table import RuleTable

# Returns a decision for one role, or None to keep searching
RoleVisitor = Callable[[str], Optional[bool]]


@dataclass
class QueryContext:
    """Arguments of the running query, as passed to assertions."""
    role: Optional[str]
    resource: Optional[str]
    resource_arg: Any = None
    identity: Any = None


class Resolver:
    """Resolves is-allowed queries against the rule table."""

    def __init__(
        self,
        roles: RoleRegistry,
        resources: ResourceTree,
        table: RuleTable,
        identity_role: str,
        identity_provider: Callable[[], Any]
    ):
        self.roles = roles
        self.resources = resources
        self.table = table
        self.identity_role = identity_role
        self.identity_provider = identity_provider

    def is_allowed(self, role: Any = None, resource: Any = None, privilege: Optional[str] = None) -> bool:
        """Decide whether role may exercise privilege on resource.

        ``None`` means all roles, all resources or all privileges.
        """
        role_id = None if role is None else self.roles.get(role)
        resource_id = None if resource is None else self.resources.get(resource_id_of(resource))

        identity = None
        if role_id is not None and role_id == self.identity_role:
            identity = self.identity_provider()

        query = QueryContext(role=role_id, resource=resource_id, resource_arg=resource, identity=identity)
        if privilege is None:
            return self._resolve_all_privileges(query)
        return self._resolve_privilege(query, privilege)

    def rule_type(
        self,
        query: QueryContext,
        resource: Optional[str],
        role: Optional[str],
        privilege: Optional[str]
    ) -> Optional[RuleEffect]:
        """Return the effect of the rule stored for an exact scope triple.

        A failed assertion makes the rule inapplicable, except on the default
        rule where it flips the effect.
        """
        rule = self.table.get_rule(resource, role, privilege)
        if rule is None:
            return None
        if rule.assertion is None:
            return rule.effect

        subject = query.identity if query.identity is not None else role
        # Assertions see the resource exactly as the caller passed it
        target = query.resource_arg if query.resource is not None else resource
        if rule.assertion(subject, target, privilege) is True:
            return rule.effect

        if resource is None and role is None and privilege is None:
            return rule.effect.opposite()
        return None

    def _resolve_privilege(self, query: QueryContext, privilege: str) -> bool:
        resource = query.resource
        seen: Set[str] = set()

        def visit(role: str) -> Optional[bool]:
            effect = self.rule_type(query, resource, role, privilege)
            if effect is None:
                effect = self.rule_type(query, resource, role, None)
            if effect is None:
                return None
            return effect is RuleEffect.ALLOW

        while True:
            if query.role is not None:
                result = self._search_roles(query.role, visit)
                if result is not None:
                    return result

            effect = self.rule_type(query, resource, None, privilege)
            if effect is not None:
                return effect is RuleEffect.ALLOW

            effect = self.rule_type(query, resource, None, None)
            if effect is not None:
                allowed = effect is RuleEffect.ALLOW
                # A deny below the root still lets an ancestor allow
                if allowed or resource is None:
                    return allowed

            resource = self._next_resource(resource, seen)

    def _resolve_all_privileges(self, query: QueryContext) -> bool:
        resource = query.resource
        seen: Set[str] = set()

        def visit(role: str) -> Optional[bool]:
            return self._entry_decision(query, resource, role)

        while True:
            if query.role is not None:
                result = self._search_roles(query.role, visit)
                if result is not None:
                    return result

            result = self._entry_decision(query, resource, None)
            if result is not None:
                return result

            resource = self._next_resource(resource, seen)

    def _entry_decision(self, query: QueryContext, resource: Optional[str], role: Optional[str]) -> Optional[bool]:
        """All-privileges decision for one scope pair.

        Any denied privilege makes "all privileges" false.
        """
        entry = self.table.get_entry(resource, role)
        if entry is None:
            return None

        for privilege in list(entry.by_privilege):
            if self.rule_type(query, resource, role, privilege) is RuleEffect.DENY:
                return False

        effect = self.rule_type(query, resource, role, None)
        if effect is None:
            return None
        return effect is RuleEffect.ALLOW

    def _search_roles(self, role: str, visit: RoleVisitor) -> Optional[bool]:
        """Depth-first search over a role and its ancestors.

        Parents are pushed in stored order, so the last-added parent is
        visited first.
        """
        visited: Set[str] = set()
        stack = [role]
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            result = visit(current)
            if result is not None:
                return result
            visited.add(current)
            stack.extend(self.roles.get_parents(current))
        return None

    def _next_resource(self, resource: Optional[str], seen: Set[str]) -> Optional[str]:
        if resource in seen:
            raise RuntimeError(f"Resource inheritance cycle detected at '{resource}'")
        seen.add(resource)
        return self.resources.get_parent(resource)
