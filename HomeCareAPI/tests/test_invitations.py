import pytest

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import Role
from HomeCareAPI.errors import InvalidRole
from HomeCareAPI.invitation_service import parse_grantable_role
from HomeCareAPI.models import PropertyAccess
from .conftest import register_user, share_property, unique_email


@pytest.mark.parametrize("role", ["admin", "edit", "view"])
def test_grantable_roles(role):
    assert parse_grantable_role(role) == Role(role)


@pytest.mark.parametrize("role", ["owner", "superuser", ""])
def test_owner_and_unknown_roles_cannot_be_granted(role):
    with pytest.raises(InvalidRole):
        parse_grantable_role(role)


def test_share_with_registered_user_binds_immediately(test_client, db_session, owner, owned_property):
    email = unique_email("friend")
    friend_id, friend_headers = register_user(test_client, email=email, name="Friend")

    response = share_property(test_client, owner[1], owned_property["id"], email, "edit")
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == friend_id
    assert body["invite_accepted"] is True
    assert body["accepted_at"] is not None
    assert body["message"] is None

    assert AccessEvaluator(db_session).resolve_role(friend_id, owned_property["id"]) == Role.EDIT
    listed = test_client.get("/properties/", headers=friend_headers).json()
    assert [p["id"] for p in listed] == [owned_property["id"]]
    assert listed[0]["is_owner"] is False


def test_share_with_unknown_email_is_pending(test_client, owner, owned_property):
    email = unique_email("later")
    response = share_property(test_client, owner[1], owned_property["id"], email, "view")
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] is None
    assert body["name"] == "Pending"
    assert body["invite_email"] == email
    assert body["invite_accepted"] is False
    assert "pending" in body["message"].lower()

    access = test_client.get(f"/properties/{owned_property['id']}/access", headers=owner[1]).json()["access"]
    assert {entry["role"] for entry in access} == {"owner", "view"}


def test_share_twice_conflicts_regardless_of_role(test_client, owner, owned_property):
    email = unique_email("twice")
    assert share_property(test_client, owner[1], owned_property["id"], email, "view").status_code == 201
    response = share_property(test_client, owner[1], owned_property["id"], email.upper(), "admin")
    assert response.status_code == 409

    registered = unique_email("bound")
    register_user(test_client, email=registered)
    assert share_property(test_client, owner[1], owned_property["id"], registered, "edit").status_code == 201
    assert share_property(test_client, owner[1], owned_property["id"], registered, "view").status_code == 409


def test_share_rejects_owner_role(test_client, owner, owned_property):
    response = share_property(test_client, owner[1], owned_property["id"], unique_email("x"), "owner")
    assert response.status_code == 400


def test_share_requires_admin(test_client, owned_property, member_factory):
    _, editor_headers = member_factory("edit")
    response = share_property(test_client, editor_headers, owned_property["id"], unique_email("y"), "view")
    assert response.status_code == 403

    _, admin_headers = member_factory("admin")
    response = share_property(test_client, admin_headers, owned_property["id"], unique_email("z"), "view")
    assert response.status_code == 201


def test_registration_accepts_pending_invites(test_client, db_session, owner, owned_property):
    email = unique_email("invitee")
    assert share_property(test_client, owner[1], owned_property["id"], email, "edit").status_code == 201

    invitee_id, _ = register_user(test_client, email=email.upper(), name="Invitee")

    grant = (
        db_session.query(PropertyAccess)
        .filter(PropertyAccess.property_id == owned_property["id"], PropertyAccess.user_id == invitee_id)
        .one()
    )
    assert grant.invite_accepted is True
    assert grant.accepted_at is not None
    assert AccessEvaluator(db_session).resolve_role(invitee_id, owned_property["id"]) == Role.EDIT


def test_update_role(test_client, db_session, owner, owned_property, member_factory):
    viewer_id, _ = member_factory("view")
    grant = (
        db_session.query(PropertyAccess)
        .filter(PropertyAccess.property_id == owned_property["id"], PropertyAccess.user_id == viewer_id)
        .one()
    )

    response = test_client.put(
        f"/properties/{owned_property['id']}/access/{grant.id}",
        json={"role": "admin"},
        headers=owner[1],
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Permission updated", "role": "admin"}

    db_session.expire_all()
    assert AccessEvaluator(db_session).resolve_role(viewer_id, owned_property["id"]) == Role.ADMIN

    response = test_client.put(
        f"/properties/{owned_property['id']}/access/{grant.id}",
        json={"role": "owner"},
        headers=owner[1],
    )
    assert response.status_code == 400


def test_owner_grant_cannot_be_modified(test_client, db_session, owner, owned_property, member_factory):
    _, admin_headers = member_factory("admin")
    owner_grant = (
        db_session.query(PropertyAccess)
        .filter(PropertyAccess.property_id == owned_property["id"], PropertyAccess.role == Role.OWNER)
        .one()
    )
    url = f"/properties/{owned_property['id']}/access/{owner_grant.id}"

    for headers in (owner[1], admin_headers):
        assert test_client.put(url, json={"role": "view"}, headers=headers).status_code == 403
        assert test_client.delete(url, headers=headers).status_code == 403

    db_session.expire_all()
    assert AccessEvaluator(db_session).resolve_role(owner[0], owned_property["id"]) == Role.OWNER


def test_revoke_removes_access(test_client, db_session, owner, owned_property, member_factory):
    editor_id, editor_headers = member_factory("edit")
    grant = (
        db_session.query(PropertyAccess)
        .filter(PropertyAccess.property_id == owned_property["id"], PropertyAccess.user_id == editor_id)
        .one()
    )

    response = test_client.delete(f"/properties/{owned_property['id']}/access/{grant.id}", headers=owner[1])
    assert response.status_code == 200

    assert test_client.get(f"/tasks/property/{owned_property['id']}", headers=editor_headers).status_code == 403
    response = test_client.delete(f"/properties/{owned_property['id']}/access/{grant.id}", headers=owner[1])
    assert response.status_code == 404


def test_unauthorized_callers_are_forbidden_before_validation(test_client, db_session, owned_property, member_factory):
    viewer_id, viewer_headers = member_factory("view")
    property_id = owned_property["id"]

    response = share_property(test_client, viewer_headers, property_id, unique_email("w"), "owner")
    assert response.status_code == 403
    response = share_property(test_client, viewer_headers, property_id, "", "superuser")
    assert response.status_code == 403

    grant = (
        db_session.query(PropertyAccess)
        .filter(PropertyAccess.property_id == property_id, PropertyAccess.user_id == viewer_id)
        .one()
    )
    response = test_client.put(
        f"/properties/{property_id}/access/{grant.id}",
        json={"role": "owner"},
        headers=viewer_headers,
    )
    assert response.status_code == 403
