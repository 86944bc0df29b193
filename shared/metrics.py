"""
Shared metrics configuration for the ACL evaluator.
"""

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry
from typing import Dict, Any, Optional


class AclMetrics:
    """Prometheus metrics for one evaluator instance."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        # Private registry by default so independent instances never collide
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up evaluator metrics."""
        self._metrics["acl_decisions_total"] = Counter(
            "acl_decisions_total",
            "Total access decisions",
            ["mode", "decision"],
            registry=self.registry
        )

        self._metrics["acl_decision_duration_seconds"] = Histogram(
            "acl_decision_duration_seconds",
            "Access decision duration in seconds",
            ["mode"],
            registry=self.registry
        )

        self._metrics["acl_rule_mutations_total"] = Counter(
            "acl_rule_mutations_total",
            "Total rule table mutations",
            ["operation", "effect"],
            registry=self.registry
        )

        self._metrics["acl_entities"] = Gauge(
            "acl_entities",
            "Number of registered roles and resources",
            ["kind"],
            registry=self.registry
        )

    def record_decision(self, mode: str, allowed: bool, duration: float):
        """Record an access decision."""
        decision = "allow" if allowed else "deny"
        self._metrics["acl_decisions_total"].labels(mode=mode, decision=decision).inc()
        self._metrics["acl_decision_duration_seconds"].labels(mode=mode).observe(duration)

    def record_mutation(self, operation: str, effect: str):
        """Record a rule table mutation."""
        self._metrics["acl_rule_mutations_total"].labels(operation=operation, effect=effect).inc()

    def set_entity_count(self, kind: str, count: int):
        """Set the number of registered entities of a kind."""
        self._metrics["acl_entities"].labels(kind=kind).set(count)

