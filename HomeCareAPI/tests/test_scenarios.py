from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import Role
from HomeCareAPI.models import PlannedTask
from HomeCareAPI.recurring_service import compute_next_due_date
from HomeCareAPI.utils import local_today
from .conftest import TestingSessionLocal, create_property, register_user, share_property, unique_email


def test_invite_before_signup_then_collaborate(test_client):
    a_id, a_headers = register_user(test_client, email=unique_email("a"), name="A")
    prop = create_property(test_client, a_headers)
    assert prop["role"] == "owner"

    b_email = "b@x.com"
    response = share_property(test_client, a_headers, prop["id"], b_email, "edit")
    assert response.status_code == 201
    assert response.json()["invite_accepted"] is False

    b_id, b_headers = register_user(test_client, email=b_email, name="B")

    session = TestingSessionLocal()
    try:
        evaluator = AccessEvaluator(session)
        assert evaluator.resolve_role(a_id, prop["id"]) == Role.OWNER
        assert evaluator.resolve_role(b_id, prop["id"]) == Role.EDIT
    finally:
        session.close()

    response = test_client.post(
        "/logs/",
        json={
            "property_id": prop["id"],
            "title": "Replaced faucet",
            "date": "2024-09-01",
            "cost": 95.5,
            "provider": "Putki Oy",
            "category": "Plumbing",
        },
        headers=b_headers,
    )
    assert response.status_code == 201
    assert response.json()["user_id"] == b_id

    response = share_property(test_client, b_headers, prop["id"], unique_email("c"), "view")
    assert response.status_code == 403


def test_recurring_definition_starts_with_one_instance(test_client):
    _, headers = register_user(test_client, email=unique_email("a"), name="A")
    prop = create_property(test_client, headers)

    response = test_client.post(
        "/recurring-tasks/",
        json={"property_id": prop["id"], "title": "Clean dryer vent", "frequency": "monthly"},
        headers=headers,
    )
    assert response.status_code == 201
    definition_id = response.json()["recurring_task"]["id"]

    session = TestingSessionLocal()
    try:
        instances = session.query(PlannedTask).filter(PlannedTask.recurring_task_id == definition_id).all()
        assert len(instances) == 1
        assert instances[0].due_date == compute_next_due_date("monthly", local_today())
    finally:
        session.close()

    tasks = test_client.get(f"/tasks/property/{prop['id']}", headers=headers).json()
    assert [t["title"] for t in tasks] == ["Clean dryer vent (Recurring)"]
