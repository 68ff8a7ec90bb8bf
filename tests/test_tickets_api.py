TICKET = {"name": "Printer down", "client": "Acme Ltd", "occupation_area": "Hardware"}


def test_create_ticket_round_trips_fields(client, make_user) -> None:
    _, headers = make_user("attendant")
    resp = client.post("/api/tickets", json=TICKET, headers=headers)
    assert resp.status_code == 201
    created = resp.json()
    for key, value in TICKET.items():
        assert created[key] == value
    assert created["deleted_at"] is None

    fetched = client.get(f"/api/tickets/{created['id']}", headers=headers)
    assert fetched.status_code == 200
    assert {k: fetched.json()[k] for k in TICKET} == TICKET


def test_create_ticket_requires_all_fields(client, make_user) -> None:
    _, headers = make_user("admin")
    resp = client.post("/api/tickets", json={"name": "x", "client": "  "}, headers=headers)
    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "Validation error"
    assert set(body["errors"]) == {"client", "occupation_area"}


def test_ticket_writes_are_role_gated(client, make_user) -> None:
    _, user_headers = make_user("user")
    _, support_headers = make_user("support", "Billing")
    for headers in (user_headers, support_headers):
        resp = client.post("/api/tickets", json=TICKET, headers=headers)
        assert resp.status_code == 401
        assert "Not authorized" in resp.json()["message"]


def test_list_tickets_empty_is_not_an_error(client, make_user) -> None:
    _, headers = make_user("user")
    resp = client.get("/api/tickets", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == []


def test_update_ticket(client, make_user) -> None:
    _, headers = make_user("attendant")
    ticket_id = client.post("/api/tickets", json=TICKET, headers=headers).json()["id"]

    changed = {"id": ticket_id, "name": "Printer fixed?", "client": "Acme", "occupation_area": "Network"}
    resp = client.put("/api/tickets", json=changed, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Printer fixed?"
    assert resp.json()["occupation_area"] == "Network"

    missing = client.put("/api/tickets", json={**changed, "id": 9999}, headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"message": "Ticket not found"}


def test_soft_delete_and_restore(client, make_user) -> None:
    _, admin = make_user("admin")
    created = client.post("/api/tickets", json=TICKET, headers=admin).json()
    ticket_id = created["id"]

    assert client.delete(f"/api/tickets/{ticket_id}", headers=admin).status_code == 200
    assert client.get(f"/api/tickets/{ticket_id}", headers=admin).status_code == 404
    assert client.get("/api/tickets", headers=admin).json() == []
    assert client.delete(f"/api/tickets/{ticket_id}", headers=admin).status_code == 404

    # Soft-deleted rows cannot be edited.
    edit = client.put("/api/tickets", json={"id": ticket_id, **TICKET}, headers=admin)
    assert edit.status_code == 404

    with_deleted = client.get("/api/tickets", params={"include_deleted": True}, headers=admin).json()
    assert [t["id"] for t in with_deleted] == [ticket_id]
    assert with_deleted[0]["deleted_at"] is not None

    assert client.post(f"/api/tickets/{ticket_id}/restore", headers=admin).status_code == 200
    restored = client.get(f"/api/tickets/{ticket_id}", headers=admin).json()
    assert restored["deleted_at"] is None
    assert {k: restored[k] for k in TICKET} == TICKET
    assert restored["created_at"] == created["created_at"]


def test_restore_unknown_ticket_is_404(client, make_user) -> None:
    _, admin = make_user("admin")
    assert client.post("/api/tickets/404/restore", headers=admin).status_code == 404


def test_restore_live_ticket_is_noop(client, make_user) -> None:
    _, admin = make_user("admin")
    ticket_id = client.post("/api/tickets", json=TICKET, headers=admin).json()["id"]
    assert client.post(f"/api/tickets/{ticket_id}/restore", headers=admin).status_code == 200


def test_delete_and_include_deleted_are_admin_only(client, make_user) -> None:
    _, attendant = make_user("attendant")
    ticket_id = client.post("/api/tickets", json=TICKET, headers=attendant).json()["id"]
    assert client.delete(f"/api/tickets/{ticket_id}", headers=attendant).status_code == 401
    assert client.get("/api/tickets", params={"include_deleted": True}, headers=attendant).status_code == 401
