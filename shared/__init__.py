"""
Shared utilities for the ACL evaluator.

This package aggregates the ambient building blocks used by the
evaluator:

- config: Evaluator configuration via pydantic-settings
- logging: Structured logging with structlog
- metrics: Prometheus metrics for decisions and mutations
- errors: Canonical error types and responses

Do not import from the acl package into shared/.
"""
