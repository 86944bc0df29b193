"""
Rule data models for the ACL evaluator.
"""

from typing import Dict, Any, Optional, List, Callable, Protocol, Union, runtime_checkable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class RuleEffect(str, Enum):
    """Rule effect types."""
    ALLOW = "allow"
    DENY = "deny"

    def opposite(self) -> "RuleEffect":
        """Return the other effect."""
        return RuleEffect.DENY if self is RuleEffect.ALLOW else RuleEffect.ALLOW


class RuleOperation(str, Enum):
    """Rule table operations."""
    ADD = "add"
    REMOVE = "remove"


@runtime_checkable
class Identity(Protocol):
    """Principal that reports the roles it claims."""

    def get_roles(self) -> Union[str, List[str]]: ...


@runtime_checkable
class ResourceReference(Protocol):
    """Object standing in for a resource identifier."""

    def get_resource_id(self) -> str: ...


# Called as assertion(role_or_identity, resource, privilege)
Assertion = Callable[[Any, Optional[str], Optional[str]], bool]


@dataclass
class Rule:
    """Stored effect with an optional runtime assertion."""
    effect: RuleEffect
    assertion: Optional[Assertion] = None


@dataclass
class RuleEntry:
    """Rules stored for one (resource scope, role scope) pair."""
    all_privileges: Optional[Rule] = None
    by_privilege: Dict[str, Rule] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """Whether the entry holds no rule at all."""
        return self.all_privileges is None and not self.by_privilege


@dataclass
class ResourceScopeRules:
    """Role-keyed rule entries for one resource scope."""
    all_roles: Optional[RuleEntry] = None
    by_role: Dict[str, RuleEntry] = field(default_factory=dict)


class RuleSnapshot(BaseModel):
    """Read-only view of one stored rule. ``None`` scopes mean all."""
    resource: Optional[str] = Field(None, description="Resource scope")
    role: Optional[str] = Field(None, description="Role scope")
    privilege: Optional[str] = Field(None, description="Privilege scope")
    effect: RuleEffect = Field(..., description="Stored effect")
    has_assertion: bool = Field(False, description="Whether an assertion gates the rule")
