"""Tests for access-decision queries."""

from __future__ import annotations

import pytest

from hubcore import (
    NOT_A_PERMISSION,
    PermissionMap,
    Permissions,
    administrator_preset,
    can_access,
    can_access_tenant,
    can_act_on_owned,
    default_preset,
    has,
    has_all,
    has_any,
)
from hubcore.permissions import (
    can_delete_own_content,
    can_edit_own_content,
    can_manage_content,
    can_manage_registration_codes,
    can_manage_users,
    can_view_analytics,
    is_admin,
    is_moderator,
)


def _with(*granted: str) -> PermissionMap:
    values = default_preset().as_dict()
    for key in granted:
        values[key] = True
    return PermissionMap(values)


EDITOR = _with(Permissions.CONTENT_EDIT)
ADMIN = administrator_preset()
GUEST = default_preset()


class TestHas:
    """Tests for has()."""

    def test_granted(self) -> None:
        assert has(GUEST, Permissions.CONTENT_VIEW) is True

    def test_not_granted(self) -> None:
        assert has(GUEST, Permissions.CONTENT_CREATE) is False

    def test_unknown_key_is_false(self) -> None:
        assert has(ADMIN, "content.archive") is False

    def test_sentinel_is_false(self) -> None:
        assert has(ADMIN, NOT_A_PERMISSION) is False

    def test_plain_dict_truthy_values_are_not_grants(self) -> None:
        """Only the literal True grants."""
        assert has({"content.view": 1}, "content.view") is False

    def test_plain_dict_foreign_key_is_not_a_grant(self) -> None:
        """Keys outside the catalog never grant, whatever the map holds."""
        assert has({"foo.bar": True}, "foo.bar") is False
        assert has_any({"foo.bar": True}, ["foo.bar"]) is False


class TestHasAnyAll:
    """Tests for has_any() and has_all()."""

    def test_any(self) -> None:
        assert has_any(GUEST, [Permissions.CONTENT_CREATE, Permissions.CONTENT_VIEW]) is True
        assert has_any(GUEST, [Permissions.CONTENT_CREATE, Permissions.CONTENT_EDIT]) is False

    def test_all(self) -> None:
        assert has_all(GUEST, [Permissions.CONTENT_VIEW, Permissions.FORUM_VIEW]) is True
        assert has_all(GUEST, [Permissions.CONTENT_VIEW, Permissions.CONTENT_EDIT]) is False

    @pytest.mark.parametrize("perms", [GUEST, EDITOR, ADMIN])
    def test_empty_lists(self, perms: PermissionMap) -> None:
        """Empty all-of is vacuously true, empty any-of is false."""
        assert has_all(perms, []) is True
        assert has_any(perms, []) is False

    def test_unknown_key_in_all(self) -> None:
        assert has_all(ADMIN, [Permissions.CONTENT_VIEW, "content.archive"]) is False


class TestCanAccess:
    """Tests for can_access()."""

    def test_composed_key(self) -> None:
        assert can_access(EDITOR, "content", "edit") is True
        assert can_access(EDITOR, "content", "delete") is False

    def test_outside_catalog(self) -> None:
        assert can_access(ADMIN, "content", "archive") is False
        assert can_access(ADMIN, "content.edit", "") is False


class TestCanAccessTenant:
    """Tests for can_access_tenant()."""

    def test_same_tenant(self) -> None:
        assert can_access_tenant(GUEST, "t1", "t1") is True

    def test_other_tenant(self) -> None:
        assert can_access_tenant(EDITOR, "t1", "t2") is False

    def test_admin_crosses_tenants(self) -> None:
        assert can_access_tenant(ADMIN, "t1", "t2") is True
        assert can_access_tenant(_with(Permissions.ADMIN_ACCESS), None, "t2") is True

    def test_missing_identity_tenant(self) -> None:
        assert can_access_tenant(GUEST, None, None) is False


class TestCanActOnOwned:
    """Tests for can_act_on_owned()."""

    @pytest.mark.parametrize("perms", [GUEST, EDITOR, _with(Permissions.CONTENT_DELETE)])
    def test_own_resource_needs_base_capability(self, perms: PermissionMap) -> None:
        assert can_act_on_owned(perms, "u1", "u1", "content.edit") is has(perms, "content.edit")

    @pytest.mark.parametrize("perms", [GUEST, EDITOR])
    def test_foreign_resource_denied(self, perms: PermissionMap) -> None:
        assert can_act_on_owned(perms, "u1", "u2", "content.edit") is False

    def test_admin_acts_on_anything(self) -> None:
        assert can_act_on_owned(ADMIN, "u1", "u2", "content.edit") is True

    def test_anonymous_never_owns(self) -> None:
        assert can_act_on_owned(EDITOR, None, None, "content.edit") is False


class TestRoleHelpers:
    """Tests for the named role helpers."""

    def test_is_admin(self) -> None:
        assert is_admin(ADMIN) is True
        assert is_admin(EDITOR) is False

    def test_is_moderator(self) -> None:
        assert is_moderator(_with(Permissions.COMMENTS_MODERATE)) is True
        assert is_moderator(_with(Permissions.CONTENT_PUBLISH)) is True
        assert is_moderator(EDITOR) is False

    def test_can_manage_users(self) -> None:
        assert can_manage_users(_with(Permissions.USERS_VIEW)) is True
        assert can_manage_users(_with(Permissions.USERS_DELETE)) is False

    def test_can_view_analytics(self) -> None:
        assert can_view_analytics(_with(Permissions.ANALYTICS_VIEW)) is True
        assert can_view_analytics(GUEST) is False

    def test_can_manage_content(self) -> None:
        assert can_manage_content(EDITOR) is True
        assert can_manage_content(GUEST) is False

    def test_can_manage_registration_codes(self) -> None:
        """Viewing codes is not managing them."""
        assert can_manage_registration_codes(_with(Permissions.CODES_ANALYTICS)) is True
        assert can_manage_registration_codes(_with(Permissions.CODES_VIEW)) is False

    def test_own_content_helpers(self) -> None:
        assert can_edit_own_content(EDITOR, "u1", "u1") is True
        assert can_delete_own_content(EDITOR, "u1", "u1") is False
        assert can_delete_own_content(_with(Permissions.CONTENT_DELETE), "u1", "u1") is True
        assert can_edit_own_content(EDITOR, "u1", "u2") is False
