"""
In-memory role-based access control evaluator.

This package decides whether a role may exercise a privilege on a
resource by combining explicit allow/deny rules with role and resource
inheritance and optional runtime assertions. It provides:

- acl.service: AclService, the public API of one evaluator instance.
- acl.roles: Role registry with ordered multi-parent inheritance.
- acl.resources: Resource tree with single-parent inheritance.
- acl.rules: Rule model, rule table, rule editor and resolver.

Guidelines:
- Every AclService owns its own state; create one per policy.
- State is not locked; serialize access when sharing an instance
  between threads.
"""

from .service import AclService
from .rules.models import RuleEffect, RuleOperation, RuleSnapshot, Identity, ResourceReference

__all__ = [
    "AclService",
    "RuleEffect",
    "RuleOperation",
    "RuleSnapshot",
    "Identity",
    "ResourceReference",
]
