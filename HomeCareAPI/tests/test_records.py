from HomeCareAPI.models import Warranty
from .conftest import TestingSessionLocal, create_property, register_user


def test_planned_task_lifecycle(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]

    response = test_client.post(
        "/tasks/",
        json={"property_id": property_id, "title": "Service boiler", "due_date": "2030-10-01", "priority": "High"},
        headers=headers,
    )
    assert response.status_code == 201
    task = response.json()
    assert task["status"] == "pending"
    assert task["recurring_task_id"] is None

    response = test_client.put(f"/tasks/{task['id']}", json={"estimated_cost": "250 EUR"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["estimated_cost"] == "250 EUR"

    response = test_client.patch(f"/tasks/{task['id']}/complete", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    all_tasks = test_client.get("/tasks/", headers=headers).json()
    assert task["id"] in [t["id"] for t in all_tasks]

    assert test_client.delete(f"/tasks/{task['id']}", headers=headers).status_code == 200
    assert test_client.patch(f"/tasks/{task['id']}/complete", headers=headers).status_code == 404


def test_planned_task_rejects_unknown_priority(test_client, owner, owned_property):
    response = test_client.post(
        "/tasks/",
        json={"property_id": owned_property["id"], "title": "Paint", "due_date": "2030-05-01", "priority": "Urgent"},
        headers=owner[1],
    )
    assert response.status_code == 400


def test_maintenance_log_lifecycle(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]

    response = test_client.post(
        "/logs/",
        json={
            "property_id": property_id,
            "title": "Gutter cleaning",
            "date": "2024-10-12",
            "cost": 180.0,
            "category": "Roofing",
        },
        headers=headers,
    )
    assert response.status_code == 201
    log = response.json()
    assert log["provider"] == "Unknown"
    assert log["notes"] == ""

    response = test_client.put(f"/logs/{log['id']}", json={"provider": "Katto Oy", "cost": 200}, headers=headers)
    assert response.status_code == 200
    assert response.json()["provider"] == "Katto Oy"
    assert response.json()["cost"] == 200

    listed = test_client.get(f"/logs/property/{property_id}", headers=headers).json()
    assert [entry["id"] for entry in listed] == [log["id"]]

    response = test_client.post(
        "/logs/",
        json={"property_id": property_id, "title": "x", "date": "2024-10-12", "cost": -1, "category": "Roofing"},
        headers=headers,
    )
    assert response.status_code == 400

    assert test_client.delete(f"/logs/{log['id']}", headers=headers).status_code == 200
    assert test_client.get(f"/logs/property/{property_id}", headers=headers).json() == []


def test_documents_link_to_logs_of_same_property(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]
    log = test_client.post(
        "/logs/",
        json={"property_id": property_id, "title": "New boiler", "date": "2024-01-15", "cost": 4200, "category": "HVAC"},
        headers=headers,
    ).json()
    document = {
        "property_id": property_id,
        "name": "invoice.pdf",
        "type": "application/pdf",
        "data": "JVBERi0xLjQK",
        "date": "2024-01-15",
        "size": 9,
    }

    response = test_client.post("/documents/", json={**document, "log_id": log["id"]}, headers=headers)
    assert response.status_code == 201
    assert response.json()["log_id"] == log["id"]

    response = test_client.post("/documents/", json={**document, "log_id": 987654}, headers=headers)
    assert response.status_code == 400

    listed = test_client.get(f"/documents/property/{property_id}", headers=headers).json()
    assert len(listed) == 1
    assert test_client.delete(f"/documents/{listed[0]['id']}", headers=headers).status_code == 200


def test_appliance_warranty_lifecycle(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]

    response = test_client.post(
        "/appliances/",
        json={"property_id": property_id, "type": "Water Heater", "year_installed": 2019, "month_installed": 5},
        headers=headers,
    )
    assert response.status_code == 201
    appliance = response.json()

    response = test_client.post(
        "/appliances/",
        json={"property_id": property_id, "type": "Dryer", "year_installed": 2019, "month_installed": 13},
        headers=headers,
    )
    assert response.status_code == 400

    warranty = {"appliance_id": appliance["id"], "provider": "Acme", "expiration_date": "2029-05-01"}
    response = test_client.post("/warranties/", json=warranty, headers=headers)
    assert response.status_code == 201
    warranty_id = response.json()["id"]

    response = test_client.post("/warranties/", json=warranty, headers=headers)
    assert response.status_code == 409

    response = test_client.get(f"/warranties/appliance/{appliance['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["provider"] == "Acme"

    response = test_client.put(f"/warranties/{warranty_id}", json={"coverage_details": "Parts only"}, headers=headers)
    assert response.json()["coverage_details"] == "Parts only"

    listed = test_client.get(f"/warranties/property/{property_id}", headers=headers).json()
    assert [w["id"] for w in listed] == [warranty_id]

    response = test_client.put(f"/appliances/{appliance['id']}", json={"model_number": "WH-50"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["model_number"] == "WH-50"

    assert test_client.delete(f"/appliances/{appliance['id']}", headers=headers).status_code == 200
    session = TestingSessionLocal()
    try:
        assert session.get(Warranty, warranty_id) is None
    finally:
        session.close()


def test_seasonal_checklists(test_client, owner, owned_property, member_factory):
    _, headers = owner
    property_id = owned_property["id"]

    response = test_client.post(f"/checklists/initialize/{property_id}", headers=headers)
    assert response.status_code == 201
    checklists = response.json()
    assert [c["season"] for c in checklists] == ["Spring", "Summer", "Fall", "Winter"]
    assert all(len(c["items"]) == 8 for c in checklists)
    assert all(c["completion_percentage"] == 0 for c in checklists)

    # initializing again keeps the existing lists
    again = test_client.post(f"/checklists/initialize/{property_id}", headers=headers).json()
    assert [c["id"] for c in again] == [c["id"] for c in checklists]

    spring = checklists[0]
    items = spring["items"]
    for item in items[:2]:
        item["completed"] = True
    response = test_client.put(f"/checklists/{spring['id']}", json={"items": items}, headers=headers)
    assert response.status_code == 200
    assert response.json()["completion_percentage"] == 25

    _, viewer_headers = member_factory("view")
    assert test_client.get(f"/checklists/property/{property_id}", headers=viewer_headers).status_code == 200
    response = test_client.put(f"/checklists/{spring['id']}", json={"items": []}, headers=viewer_headers)
    assert response.status_code == 403

    assert test_client.delete(f"/checklists/{spring['id']}", headers=headers).status_code == 200
    remaining = test_client.get(f"/checklists/property/{property_id}", headers=headers).json()
    assert [c["season"] for c in remaining] == ["Summer", "Fall", "Winter"]


def _add_document(client, headers, property_id, name="manual.pdf"):
    response = client.post(
        "/documents/",
        json={
            "property_id": property_id,
            "name": name,
            "type": "application/pdf",
            "data": "JVBERi0xLjQK",
            "date": "2023-03-01",
            "size": 9,
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_documents_listed_across_accessible_properties(test_client, owner, owned_property):
    _, headers = owner
    second = create_property(test_client, headers, name="Second home")
    first_doc = _add_document(test_client, headers, owned_property["id"], name="a.pdf")
    second_doc = _add_document(test_client, headers, second["id"], name="b.pdf")

    _, other_headers = register_user(test_client, name="Neighbour")
    other_prop = create_property(test_client, other_headers)
    other_doc = _add_document(test_client, other_headers, other_prop["id"], name="c.pdf")

    listed = {d["id"] for d in test_client.get("/documents/", headers=headers).json()}
    assert listed == {first_doc["id"], second_doc["id"]}
    assert other_doc["id"] not in listed


def test_appliance_manual_must_belong_to_same_property(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]
    own_manual = _add_document(test_client, headers, property_id)

    _, other_headers = register_user(test_client, name="Neighbour")
    other_prop = create_property(test_client, other_headers)
    foreign_manual = _add_document(test_client, other_headers, other_prop["id"])

    appliance = {"property_id": property_id, "type": "Dishwasher", "year_installed": 2021, "month_installed": 3}
    response = test_client.post("/appliances/", json={**appliance, "manual_id": foreign_manual["id"]}, headers=headers)
    assert response.status_code == 400
    response = test_client.post("/appliances/", json={**appliance, "manual_id": 987654}, headers=headers)
    assert response.status_code == 400

    response = test_client.post("/appliances/", json={**appliance, "manual_id": own_manual["id"]}, headers=headers)
    assert response.status_code == 201
    appliance_id = response.json()["id"]

    response = test_client.put(
        f"/appliances/{appliance_id}", json={"manual_id": foreign_manual["id"]}, headers=headers
    )
    assert response.status_code == 400
    response = test_client.get(f"/appliances/property/{property_id}", headers=headers).json()
    assert [a["manual_id"] for a in response if a["id"] == appliance_id] == [own_manual["id"]]


def test_warranty_document_must_belong_to_same_property(test_client, owner, owned_property):
    _, headers = owner
    property_id = owned_property["id"]
    own_terms = _add_document(test_client, headers, property_id, name="terms.pdf")

    _, other_headers = register_user(test_client, name="Neighbour")
    other_prop = create_property(test_client, other_headers)
    foreign_terms = _add_document(test_client, other_headers, other_prop["id"], name="terms.pdf")

    appliance = test_client.post(
        "/appliances/",
        json={"property_id": property_id, "type": "Heat Pump", "year_installed": 2022, "month_installed": 9},
        headers=headers,
    ).json()
    warranty = {"appliance_id": appliance["id"], "provider": "Acme", "expiration_date": "2032-09-01"}

    response = test_client.post("/warranties/", json={**warranty, "document_id": foreign_terms["id"]}, headers=headers)
    assert response.status_code == 400

    response = test_client.post("/warranties/", json={**warranty, "document_id": own_terms["id"]}, headers=headers)
    assert response.status_code == 201
    warranty_id = response.json()["id"]

    response = test_client.put(
        f"/warranties/{warranty_id}", json={"document_id": foreign_terms["id"]}, headers=headers
    )
    assert response.status_code == 400
    response = test_client.get(f"/warranties/appliance/{appliance['id']}", headers=headers)
    assert response.json()["document_id"] == own_terms["id"]
