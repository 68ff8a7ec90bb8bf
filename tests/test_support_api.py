def _ticket(client, headers) -> int:
    body = {"name": "Outage", "client": "Initech", "occupation_area": "Network"}
    return client.post("/api/tickets", json=body, headers=headers).json()["id"]


def test_support_list_is_admin_only_and_404_when_empty(client, make_user) -> None:
    _, admin = make_user("admin")
    _, attendant = make_user("attendant")
    assert client.get("/api/support", headers=attendant).status_code == 401

    resp = client.get("/api/support", headers=admin)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Support users not found"}


def test_support_list_includes_areas_and_services(client, make_user) -> None:
    _, admin = make_user("admin")
    analyst, _ = make_user("support", ["Network", "Hardware"])
    ticket_id = _ticket(client, admin)
    service = client.post(
        "/api/services",
        json={"requester_name": "Bob", "ticket_id": ticket_id, "service_area": "Network", "support_id": analyst["id"]},
        headers=admin,
    ).json()["data"]

    rows = client.get("/api/support", headers=admin).json()["data"]
    assert len(rows) == 1
    assert rows[0]["id"] == analyst["id"]
    assert rows[0]["service_areas"] == ["Network", "Hardware"]
    assert [s["id"] for s in rows[0]["services"]] == [service["id"]]


def test_available_support_excludes_analysts_with_open_work(client, make_user) -> None:
    _, attendant = make_user("attendant")
    busy, busy_headers = make_user("support", "Network")
    idle, _ = make_user("support", "Network")
    ticket_id = _ticket(client, attendant)
    service = client.post(
        "/api/services",
        json={"requester_name": "Bob", "ticket_id": ticket_id, "service_area": "Network", "support_id": busy["id"]},
        headers=attendant,
    ).json()["data"]

    available = client.get("/api/support/available", headers=attendant).json()["data"]
    assert [u["id"] for u in available] == [idle["id"]]

    client.put(
        f"/api/services/{service['id']}/complete",
        json={"status": True, "notes": "Rebooted the router"},
        headers=busy_headers,
    )
    available = client.get("/api/support/available", headers=attendant).json()["data"]
    assert [u["id"] for u in available] == [busy["id"], idle["id"]]


def test_available_support_404_without_analysts(client, make_user) -> None:
    _, attendant = make_user("attendant")
    resp = client.get("/api/support/available", headers=attendant)
    assert resp.status_code == 404
    assert resp.json() == {"message": "No available support analyst"}
