"""
Unit tests for the rule table.
"""

import pytest

from acl.rules.models import RuleEffect
from acl.rules.table import RuleTable


class TestRuleTable:
    """Test cases for RuleTable."""

    @pytest.fixture
    def table(self):
        """Create RuleTable instance."""
        return RuleTable()

    def test_default_rule_is_deny(self, table):
        """Test a fresh table holds only the default deny rule."""
        rule = table.get_rule(None, None, None)

        assert rule.effect is RuleEffect.DENY
        assert rule.assertion is None
        assert table.count() == 1

    def test_missing_entry_is_not_deny(self, table):
        """Test lookups on unwritten scopes report no rule."""
        assert table.get_entry("post", None) is None
        assert table.get_entry(None, "user") is None
        assert table.get_rule("post", "user", "edit") is None

    def test_entries_created_lazily(self, table):
        """Test create=True builds the scope path on demand."""
        entry = table.get_entry("post", "user", create=True)

        assert entry is not None
        assert entry.is_empty() is True
        assert table.get_entry("post", "user") is entry
        assert table.get_entry("post", None) is None

    def test_set_rule_privilege(self, table):
        """Test writing a privilege rule leaves the all-privileges rule unset."""
        table.set_rule("post", "user", "edit", RuleEffect.ALLOW)

        assert table.get_rule("post", "user", "edit").effect is RuleEffect.ALLOW
        assert table.get_rule("post", "user", None) is None

    def test_remove_rule_requires_matching_effect(self, table):
        """Test removal only erases rules with the same effect."""
        table.set_rule("post", "user", "edit", RuleEffect.ALLOW)

        assert table.remove_rule("post", "user", "edit", RuleEffect.DENY) is False
        assert table.get_rule("post", "user", "edit") is not None

        assert table.remove_rule("post", "user", "edit", RuleEffect.ALLOW) is True
        assert table.get_rule("post", "user", "edit") is None

    def test_remove_all_privileges_rule(self, table):
        """Test removing a non-default all-privileges rule."""
        table.set_rule("post", "user", None, RuleEffect.DENY)

        assert table.remove_rule("post", "user", None, RuleEffect.DENY) is True
        assert table.get_rule("post", "user", None) is None
        assert table.remove_rule("post", "user", None, RuleEffect.DENY) is False

    def test_remove_default_rule_resets_to_deny(self, table):
        """Test removing the default rule's effect resets it."""
        table.set_rule(None, None, None, RuleEffect.ALLOW, lambda *args: True)
        table.set_rule(None, None, "view", RuleEffect.ALLOW)

        assert table.remove_rule(None, None, None, RuleEffect.ALLOW) is True

        rule = table.get_rule(None, None, None)
        assert rule.effect is RuleEffect.DENY
        assert rule.assertion is None
        assert table.get_rule(None, None, "view") is None

    def test_remove_default_rule_other_effect_is_noop(self, table):
        """Test removing allow from a deny default changes nothing."""
        table.set_rule(None, None, "view", RuleEffect.ALLOW)

        assert table.remove_rule(None, None, None, RuleEffect.ALLOW) is False
        assert table.get_rule(None, None, "view") is not None

    def test_drop_resources(self, table):
        """Test dropping resource scopes."""
        table.set_rule("post", "user", None, RuleEffect.ALLOW)
        table.set_rule("page", None, None, RuleEffect.ALLOW)

        table.drop_resources(["post", "unknown"])

        assert table.get_entry("post", "user") is None
        assert table.get_rule("page", None, None) is not None

    def test_drop_role(self, table):
        """Test dropping a role from every resource scope."""
        table.set_rule(None, "user", None, RuleEffect.ALLOW)
        table.set_rule("post", "user", "edit", RuleEffect.ALLOW)
        table.set_rule("post", "admin", "edit", RuleEffect.ALLOW)

        table.drop_role("user")

        assert table.get_entry(None, "user") is None
        assert table.get_entry("post", "user") is None
        assert table.get_entry("post", "admin") is not None

    def test_drop_all_roles_keeps_all_roles_rules(self, table):
        """Test role-specific rules go while all-roles rules stay."""
        table.set_rule("post", None, None, RuleEffect.ALLOW)
        table.set_rule("post", "user", None, RuleEffect.DENY)

        table.drop_all_roles()

        assert table.get_entry("post", "user") is None
        assert table.get_rule("post", None, None).effect is RuleEffect.ALLOW

    def test_snapshot(self, table):
        """Test the flat rule listing."""
        table.set_rule("post", "user", "edit", RuleEffect.ALLOW, lambda *args: True)

        snapshots = table.snapshot()

        assert len(snapshots) == 2
        default, edit = snapshots
        assert (default.resource, default.role, default.privilege) == (None, None, None)
        assert default.effect is RuleEffect.DENY
        assert (edit.resource, edit.role, edit.privilege) == ("post", "user", "edit")
        assert edit.has_assertion is True

    def test_reset(self, table):
        """Test reset restores the initial state."""
        table.set_rule(None, None, None, RuleEffect.ALLOW)
        table.set_rule("post", "user", None, RuleEffect.ALLOW)

        table.reset()

        assert table.count() == 1
        assert table.get_rule(None, None, None).effect is RuleEffect.DENY
