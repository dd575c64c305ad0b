"""
Unit tests for the role / permission gate.
"""
import pytest

from paybox.errors import AuthorizationError
from paybox.schemas import Permissions, Role
from paybox.services.permissions import (
    can_act,
    effective_permissions,
    parse_role,
    require,
    require_privileged,
)

NONE = Permissions()
ALL = Permissions(can_create=True, can_edit=True, can_delete=True)


class TestEffectivePermissions:
    @pytest.mark.parametrize("role", ["admin", "developer"])
    def test_privileged_roles_ignore_stored(self, role):
        assert effective_permissions(role, NONE) == ALL

    def test_user_uses_stored(self):
        stored = Permissions(can_create=True)
        assert effective_permissions("user", stored) == stored

    @pytest.mark.parametrize("role", ["viewer", "auditor", None])
    def test_viewer_and_unknown_get_nothing(self, role):
        assert effective_permissions(role, ALL) == NONE

    def test_unknown_role_parses_as_viewer(self):
        assert parse_role("superuser") == Role.VIEWER


class TestCanAct:
    def test_user_edits_own_record(self):
        assert can_act("user", ALL, "edit", actor_id="u1", owner_id="u1")

    def test_user_cannot_edit_foreign_record(self):
        assert not can_act("user", ALL, "edit", actor_id="u1", owner_id="u2")

    def test_admin_edits_foreign_record(self):
        assert can_act("admin", NONE, "delete", actor_id="a1", owner_id="u2")

    def test_create_has_no_owner_check(self):
        assert can_act("user", Permissions(can_create=True), "create", actor_id="u1")


class TestRequire:
    def test_role_failure_message(self):
        with pytest.raises(AuthorizationError, match="role does not allow"):
            require("viewer", NONE, "create")

    def test_ownership_failure_message(self):
        with pytest.raises(AuthorizationError, match="Only the creator"):
            require("user", ALL, "delete", actor_id="u1", owner_id="u2")

    def test_require_privileged(self):
        require_privileged("developer")
        with pytest.raises(AuthorizationError):
            require_privileged("user")
