"""
Shared configuration management for the ACL evaluator.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AclConfig(BaseSettings):
    """Evaluator configuration, overridable through ``ACL_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    setup_logging: bool = Field(default=False)

    # Identity
    identity_role: str = Field(default="acl.identity", min_length=1)

    # Observability
    metrics_enabled: bool = Field(default=True)
    log_decisions: bool = Field(default=False)


def get_config(**overrides) -> AclConfig:
    """Get evaluator configuration."""
    return AclConfig(**overrides)
