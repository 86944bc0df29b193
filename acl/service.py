"""
Access control service for the ACL evaluator.

Owns the role registry, resource tree and rule table of one evaluator
instance and exposes the public API: identity handling, role and
resource management, rule editing and access queries.
"""

import time
from typing import Dict, Any, Optional, List

from prometheus_client import CollectorRegistry

from shared.config import AclConfig, get_config
from shared.errors import (
    InvalidIdentityError, NoIdentityError, ValidationError, UnknownRoleError
)
from shared.logging import configure_logging, get_logger
from shared.metrics import AclMetrics
from .resources.tree import ResourceTree, resource_id_of
from .roles.registry import RoleRegistry
from .rules.editor import RuleEditor
from .rules.models import Identity, RuleEffect, RuleOperation, RuleSnapshot, Assertion
from .rules.resolver import Resolver
from .rules.table import RuleTable


def _require_identifier(value: Any, kind: str) -> str:
    if not isinstance(value, str) or value == "":
        raise ValidationError(
            f"{kind.capitalize()} identifier must be a non-empty string",
            {"kind": kind, "id": repr(value)}
        )
    return value


class AclService:
    """In-memory role-based access control evaluator."""

    def __init__(self, config: Optional[AclConfig] = None, registry: Optional[CollectorRegistry] = None):
        self.config = config or get_config()
        if self.config.setup_logging:
            configure_logging("acl", self.config.log_level)
        self.logger = get_logger("acl.service")
        self.metrics = AclMetrics(registry) if self.config.metrics_enabled else None

        self._identity: Any = None
        self._roles = RoleRegistry()
        self._resources = ResourceTree()
        self._rules = RuleTable()
        self._editor = RuleEditor(self._roles, self._resources, self._rules)
        self._resolver = Resolver(
            self._roles,
            self._resources,
            self._rules,
            identity_role=self.config.identity_role,
            identity_provider=self.get_identity
        )

    @property
    def identity_role(self) -> str:
        """Identifier of the synthetic role standing for the identity."""
        return self.config.identity_role

    # -- Identity --------------------------------------------------------------

    def get_identity(self) -> Any:
        """Return the current identity, if any."""
        return self._identity

    def set_identity(self, identity: Any) -> "AclService":
        """Associate an identity, replacing the previous one.

        The synthetic identity role is recreated with exactly the roles the
        identity declares as parents.
        """
        if not isinstance(identity, Identity) or not callable(identity.get_roles):
            raise InvalidIdentityError(details={"identity": repr(identity)})

        roles = identity.get_roles()
        if roles is None:
            roles = []
        elif isinstance(roles, str):
            roles = [roles]
        else:
            roles = list(roles)

        for role in roles:
            if role == self.identity_role or not self._roles.has(role):
                raise UnknownRoleError(role)

        if self._roles.has(self.identity_role):
            self._remove_role(self.identity_role)
        self._roles.add(self.identity_role, roles)
        self._identity = identity

        self.logger.info("Identity set", roles=roles)
        self._update_entity_counts()
        return self

    def clear_identity(self) -> "AclService":
        """Forget the current identity and drop its synthetic role."""
        self._identity = None
        if self._roles.has(self.identity_role):
            self._remove_role(self.identity_role)
            self.logger.info("Identity cleared")
            self._update_entity_counts()
        return self

    def can(self, resource: Any = None, privilege: Optional[str] = None) -> bool:
        """Check access for the current identity."""
        if self._identity is None:
            raise NoIdentityError()
        return self.is_allowed(self.identity_role, resource, privilege)

    # -- Roles -----------------------------------------------------------------

    def add_role(self, role: str, parents: Any = None) -> "AclService":
        """Add a role inheriting from the given parents.

        Parents added later take precedence over earlier ones.
        """
        _require_identifier(role, "role")
        self._roles.add(role, parents)
        self.logger.info("Role added", role=role, parents=self._roles.get_parents(role))
        self._update_entity_counts()
        return self

    def get_role(self, role: str) -> str:
        return self._roles.get(role)

    def get_role_parents(self, role: str) -> List[str]:
        return self._roles.get_parents(role)

    def list_roles(self) -> List[str]:
        return self._roles.list_ids()

    def has_role(self, role: str) -> bool:
        return self._roles.has(role)

    def inherits_role(self, role: str, inherit: str, only_parents: bool = False) -> bool:
        return self._roles.inherits(role, inherit, only_parents)

    def remove_role(self, role: str) -> "AclService":
        """Remove a role and every rule scoped to it."""
        self._remove_role(role)
        if role == self.identity_role:
            self._identity = None
        self._update_entity_counts()
        return self

    def _remove_role(self, role: str):
        self._roles.remove(role)
        self._rules.drop_role(role)
        self.logger.info("Role removed", role=role)

    def remove_all_roles(self) -> "AclService":
        """Remove every role and every role-specific rule."""
        self._roles.remove_all()
        self._rules.drop_all_roles()
        self._identity = None
        self.logger.info("All roles removed")
        self._update_entity_counts()
        return self

    # -- Resources -------------------------------------------------------------

    def add_resource(self, resource: Any, parent: Any = None) -> "AclService":
        """Add a resource, optionally under a parent resource."""
        resource_id = _require_identifier(resource_id_of(resource), "resource")
        parent_id = None if parent is None else resource_id_of(parent)
        self._resources.add(resource_id, parent_id)
        self.logger.info("Resource added", resource=resource_id, parent=parent_id)
        self._update_entity_counts()
        return self

    def get_resource(self, resource: Any) -> str:
        return self._resources.get(resource_id_of(resource))

    def list_resources(self) -> List[str]:
        return self._resources.list_ids()

    def has_resource(self, resource: Any) -> bool:
        return self._resources.has(resource_id_of(resource))

    def inherits_resource(self, resource: Any, inherit: Any, only_parent: bool = False) -> bool:
        return self._resources.inherits(resource_id_of(resource), resource_id_of(inherit), only_parent)

    def remove_resource(self, resource: Any) -> "AclService":
        """Remove a resource, its descendants and every rule scoped to them."""
        removed = self._resources.remove(resource_id_of(resource))
        self._rules.drop_resources(removed)
        self.logger.info("Resource removed", resource=removed[0], cascaded=removed[1:])
        self._update_entity_counts()
        return self

    def remove_all_resources(self) -> "AclService":
        """Remove every resource and every resource-scoped rule."""
        removed = self._resources.remove_all()
        self._rules.drop_resources(removed)
        self.logger.info("All resources removed", count=len(removed))
        self._update_entity_counts()
        return self

    # -- Rules -----------------------------------------------------------------

    def allow(self, roles: Any = None, resources: Any = None, privileges: Any = None,
              assertion: Optional[Assertion] = None) -> "AclService":
        """Add an allow rule. ``None`` arguments mean all."""
        return self.set_rule(RuleOperation.ADD, RuleEffect.ALLOW, roles, resources, privileges, assertion)

    def deny(self, roles: Any = None, resources: Any = None, privileges: Any = None,
             assertion: Optional[Assertion] = None) -> "AclService":
        """Add a deny rule. ``None`` arguments mean all."""
        return self.set_rule(RuleOperation.ADD, RuleEffect.DENY, roles, resources, privileges, assertion)

    def remove_allow(self, roles: Any = None, resources: Any = None, privileges: Any = None,
                     assertion: Optional[Assertion] = None) -> "AclService":
        """Remove allow rules matching the arguments."""
        return self.set_rule(RuleOperation.REMOVE, RuleEffect.ALLOW, roles, resources, privileges, assertion)

    def remove_deny(self, roles: Any = None, resources: Any = None, privileges: Any = None,
                    assertion: Optional[Assertion] = None) -> "AclService":
        """Remove deny rules matching the arguments."""
        return self.set_rule(RuleOperation.REMOVE, RuleEffect.DENY, roles, resources, privileges, assertion)

    def set_rule(self, operation: Any, effect: Any, roles: Any = None, resources: Any = None,
                 privileges: Any = None, assertion: Optional[Assertion] = None) -> "AclService":
        """Apply a rule operation; the primitive behind allow/deny and removal."""
        changed = self._editor.set_rule(operation, effect, roles, resources, privileges, assertion)
        operation_name = getattr(operation, "value", str(operation)).lower()
        effect_name = getattr(effect, "value", str(effect)).lower()
        self.logger.info(
            "Rules changed",
            operation=operation_name,
            effect=effect_name,
            roles=roles,
            resources=resources,
            privileges=privileges,
            changed=changed
        )
        if self.metrics:
            self.metrics.record_mutation(operation_name, effect_name)
        return self

    def list_rules(self) -> List[RuleSnapshot]:
        """Return every stored rule. ``None`` scopes mean all."""
        return self._rules.snapshot()

    # -- Queries ---------------------------------------------------------------

    def is_allowed(self, role: Any = None, resource: Any = None, privilege: Optional[str] = None) -> bool:
        """Decide whether role may exercise privilege on resource.

        ``None`` means all roles, all resources or all privileges.
        """
        start_time = time.time()
        allowed = self._resolver.is_allowed(role, resource, privilege)
        duration = time.time() - start_time

        if self.metrics:
            mode = "all_privileges" if privilege is None else "privilege"
            self.metrics.record_decision(mode, allowed, duration)
        if self.config.log_decisions:
            self.logger.debug(
                "Access decision",
                role=role,
                resource=resource_id_of(resource),
                privilege=privilege,
                allowed=allowed
            )
        return allowed

    # -- Housekeeping ----------------------------------------------------------

    def reset(self) -> "AclService":
        """Return to a freshly constructed state."""
        self._identity = None
        self._roles.remove_all()
        self._resources.remove_all()
        self._rules.reset()
        self.logger.info("ACL reset")
        self._update_entity_counts()
        return self

    def get_stats(self) -> Dict[str, Any]:
        """Get evaluator statistics."""
        return {
            "total_roles": len(self._roles),
            "total_resources": len(self._resources),
            "total_rules": self._rules.count(),
            "identity_set": self._identity is not None
        }

    def _update_entity_counts(self):
        if self.metrics:
            self.metrics.set_entity_count("roles", len(self._roles))
            self.metrics.set_entity_count("resources", len(self._resources))
