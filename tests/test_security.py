"""Unit tests for filebridge.engine.security — RecordAccessPolicy."""

from types import SimpleNamespace

import pytest

from filebridge.engine.context import ExecutionContext, set_execution_context
from filebridge.engine.security import WILDCARD, RecordAccessPolicy


def _type(name, view):
    return SimpleNamespace(name=name, view_groups=view)


class TestCanView:
    def setup_method(self):
        self.policy = RecordAccessPolicy()

    def test_wildcard_is_public(self):
        assert self.policy.can_view([WILDCARD]) is True

    def test_no_context_denies_restricted(self):
        assert self.policy.can_view(["sales"]) is False

    def test_no_groups_declared_denies(self, execution_context):
        assert self.policy.can_view([], execution_context) is False

    def test_group_intersection(self, execution_context):
        assert self.policy.can_view(["sales", "managers"], execution_context) is True
        assert self.policy.can_view(["support"], execution_context) is False

    def test_system_admin_sees_everything(self, admin_context):
        assert self.policy.can_view(["support"], admin_context) is True
        assert self.policy.can_view([], admin_context) is True

    def test_uses_current_context_by_default(self, execution_context):
        set_execution_context(execution_context)
        assert self.policy.can_view(["sales"]) is True


class TestFilterAccessible:
    @pytest.fixture
    def types(self):
        return [
            _type("Account", ["*"]),
            _type("Opportunity", ["sales"]),
            _type("Case", ["support"]),
        ]

    def test_anonymous(self, types):
        names = [t.name for t in RecordAccessPolicy().filter_accessible(types)]
        assert names == ["Account"]

    def test_sales_user(self, types, execution_context):
        names = [t.name for t in RecordAccessPolicy().filter_accessible(types, execution_context)]
        assert names == ["Account", "Opportunity"]

    def test_admin(self, types, admin_context):
        names = [t.name for t in RecordAccessPolicy().filter_accessible(types, admin_context)]
        assert names == ["Account", "Opportunity", "Case"]

    def test_basic_user_without_groups(self, types):
        ctx = ExecutionContext(user_id=1, username="bob", user_type="basic", user_groups=set())
        names = [t.name for t in RecordAccessPolicy().filter_accessible(types, ctx)]
        assert names == ["Account"]
