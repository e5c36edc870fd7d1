"""Tests for per-document access decisions."""

import pytest

from docshare.access.policy import can_access, can_delete, can_modify, can_team_delete
from docshare.models import Identity

OWNER_ID = "00000000-0000-0000-0000-000000000001"
OTHER_ID = "00000000-0000-0000-0000-000000000002"

OWNER = Identity(user_id=OWNER_ID, username="alice", roles=frozenset({"USER"}))
OTHER = Identity(user_id=OTHER_ID, username="bob", roles=frozenset({"USER"}))
ADMIN = Identity(
    user_id="00000000-0000-0000-0000-0000000000aa",
    username="root",
    roles=frozenset({"USER", "ADMIN"}),
)


class TestCanAccess:
    def test_owner_can_access_private_document(self, document_factory):
        assert can_access(OWNER, document_factory.make())

    def test_other_user_denied_private_document(self, document_factory):
        assert not can_access(OTHER, document_factory.make())

    def test_team_shared_document_open_to_everyone(self, document_factory):
        doc = document_factory.make({"team_shared": True})
        assert can_access(OTHER, doc)

    def test_explicit_share_grants_access(self, document_factory):
        doc = document_factory.make({"shared_with_users": frozenset({OTHER_ID})})
        assert can_access(OTHER, doc)

    def test_admin_role_alone_does_not_grant_read(self, document_factory):
        """Reads follow ownership and sharing, not the admin role."""
        assert not can_access(ADMIN, document_factory.make())

    @pytest.mark.parametrize("team_shared", [True, False])
    def test_anonymous_always_denied(self, document_factory, team_shared):
        doc = document_factory.make(
            {"team_shared": team_shared, "shared_with_users": frozenset({OTHER_ID})}
        )
        assert not can_access(None, doc)

    def test_matches_definition_for_all_combinations(self, document_factory):
        for team_shared in (True, False):
            for shared in (frozenset(), frozenset({OTHER_ID})):
                for owner_id in (OWNER_ID, OTHER_ID):
                    doc = document_factory.make(
                        {
                            "team_shared": team_shared,
                            "shared_with_users": shared,
                            "owner_id": owner_id,
                        }
                    )
                    expected = (
                        owner_id == OTHER_ID or team_shared or OTHER_ID in shared
                    )
                    assert can_access(OTHER, doc) is expected


class TestCanDelete:
    def test_owner_can_delete(self, document_factory):
        assert can_delete(OWNER, document_factory.make())

    def test_non_owner_cannot_delete_even_if_shared(self, document_factory):
        doc = document_factory.make(
            {"team_shared": True, "shared_with_users": frozenset({OTHER_ID})}
        )
        assert not can_delete(OTHER, doc)

    def test_admin_can_delete_private_document(self, document_factory):
        assert can_delete(ADMIN, document_factory.make())

    def test_anonymous_cannot_delete(self, document_factory):
        assert not can_delete(None, document_factory.make())


class TestCanTeamDelete:
    def test_admin_can_team_delete_team_document(self, document_factory):
        assert can_team_delete(ADMIN, document_factory.make({"team_shared": True}))

    def test_admin_cannot_team_delete_private_document(self, document_factory):
        assert not can_team_delete(ADMIN, document_factory.make({"team_shared": False}))

    def test_owner_without_admin_cannot_team_delete(self, document_factory):
        assert not can_team_delete(OWNER, document_factory.make({"team_shared": True}))


class TestCanModify:
    def test_any_authenticated_user_by_default(self, document_factory):
        assert can_modify(OTHER, document_factory.make())

    def test_anonymous_never(self, document_factory):
        assert not can_modify(None, document_factory.make())

    def test_owner_only_rejects_non_owner(self, document_factory):
        assert not can_modify(OTHER, document_factory.make(), owner_only=True)

    def test_owner_only_allows_owner_and_admin(self, document_factory):
        doc = document_factory.make()
        assert can_modify(OWNER, doc, owner_only=True)
        assert can_modify(ADMIN, doc, owner_only=True)
