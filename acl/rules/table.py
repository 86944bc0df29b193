"""
Rule table for the ACL evaluator.

Rules are keyed by resource scope, then role scope, then privilege
scope. ``None`` at any level is the "all" wildcard. Entries are created
lazily on write, so a missing entry means "no applicable rule" rather
than a deny.
"""

from typing import Dict, Iterable, List, Optional

from shared.logging import get_logger
from .models import Rule, RuleEffect, RuleEntry, ResourceScopeRules, RuleSnapshot, Assertion


class RuleTable:
    """Nested resource -> role -> privilege rule storage."""

    def __init__(self):
        self.logger = get_logger("acl.rule_table")
        self._all_resources = ResourceScopeRules()
        self._by_resource: Dict[str, ResourceScopeRules] = {}
        self.reset()

    def reset(self):
        """Drop every rule and restore the default deny rule."""
        self._all_resources = ResourceScopeRules(
            all_roles=RuleEntry(all_privileges=Rule(RuleEffect.DENY))
        )
        self._by_resource.clear()

    def get_entry(self, resource: Optional[str], role: Optional[str], create: bool = False) -> Optional[RuleEntry]:
        """Get the entry for a (resource, role) scope pair."""
        if resource is None:
            scope = self._all_resources
        else:
            scope = self._by_resource.get(resource)
            if scope is None:
                if not create:
                    return None
                scope = self._by_resource[resource] = ResourceScopeRules()

        if role is None:
            if scope.all_roles is None and create:
                scope.all_roles = RuleEntry()
            return scope.all_roles

        entry = scope.by_role.get(role)
        if entry is None and create:
            entry = scope.by_role[role] = RuleEntry()
        return entry

    def get_rule(self, resource: Optional[str], role: Optional[str], privilege: Optional[str]) -> Optional[Rule]:
        """Get the stored rule for an exact scope triple."""
        entry = self.get_entry(resource, role)
        if entry is None:
            return None
        if privilege is None:
            return entry.all_privileges
        return entry.by_privilege.get(privilege)

    def set_rule(
        self,
        resource: Optional[str],
        role: Optional[str],
        privilege: Optional[str],
        effect: RuleEffect,
        assertion: Optional[Assertion] = None
    ):
        """Write a rule, replacing whatever the scope held."""
        entry = self.get_entry(resource, role, create=True)
        rule = Rule(effect=effect, assertion=assertion)
        if privilege is None:
            entry.all_privileges = rule
        else:
            entry.by_privilege[privilege] = rule

    def remove_rule(
        self,
        resource: Optional[str],
        role: Optional[str],
        privilege: Optional[str],
        effect: RuleEffect
    ) -> bool:
        """Erase a rule if its stored effect matches.

        Removing the default rule's effect resets it to deny and clears its
        privilege rules instead of deleting it. Returns whether anything
        changed.
        """
        entry = self.get_entry(resource, role)
        if entry is None:
            return False

        if privilege is not None:
            rule = entry.by_privilege.get(privilege)
            if rule is None or rule.effect != effect:
                return False
            del entry.by_privilege[privilege]
            return True

        if resource is None and role is None:
            if entry.all_privileges.effect != effect:
                return False
            entry.all_privileges = Rule(RuleEffect.DENY)
            entry.by_privilege.clear()
            return True

        if entry.all_privileges is None or entry.all_privileges.effect != effect:
            return False
        entry.all_privileges = None
        return True

    def drop_resources(self, resource_ids: Iterable[str]):
        """Delete every rule scoped to the given resources."""
        for resource_id in resource_ids:
            if self._by_resource.pop(resource_id, None) is not None:
                self.logger.debug("Resource rules dropped", resource=resource_id)

    def drop_role(self, role_id: str):
        """Delete every rule scoped to a role, across all resources."""
        scopes = [self._all_resources] + list(self._by_resource.values())
        for scope in scopes:
            scope.by_role.pop(role_id, None)

    def drop_all_roles(self):
        """Delete every role-specific rule, keeping all-roles rules."""
        self._all_resources.by_role.clear()
        for scope in self._by_resource.values():
            scope.by_role.clear()

    def snapshot(self) -> List[RuleSnapshot]:
        """Return a flat listing of every stored rule."""
        snapshots: List[RuleSnapshot] = []
        scopes = [(None, self._all_resources)] + list(self._by_resource.items())
        for resource, scope in scopes:
            entries = [(None, scope.all_roles)] + list(scope.by_role.items())
            for role, entry in entries:
                if entry is None:
                    continue
                rules = [(None, entry.all_privileges)] + list(entry.by_privilege.items())
                for privilege, rule in rules:
                    if rule is None:
                        continue
                    snapshots.append(RuleSnapshot(
                        resource=resource,
                        role=role,
                        privilege=privilege,
                        effect=rule.effect,
                        has_assertion=rule.assertion is not None
                    ))
        return snapshots

    def count(self) -> int:
        """Count stored rules."""
        return len(self.snapshot())
