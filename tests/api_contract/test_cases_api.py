from uuid import uuid4


def _hdr(role: str = "agent", actor_id=None) -> dict[str, str]:
    return {"X-Role": role, "X-Actor-User-Id": str(actor_id or uuid4())}


def _create_org(client) -> str:
    r = client.post("/organizations", json={"name": "Fabrikam"}, headers=_hdr())
    assert r.status_code == 201, r.text
    return r.json()["id"]


def _create_person(client) -> str:
    r = client.post("/individuals", json={"first_name": "Grace", "last_name": "Hopper"}, headers=_hdr())
    assert r.status_code == 201, r.text
    return r.json()["id"]


def _case_body(kind: str, customer_id: str) -> dict:
    return {"title": "VPN down", "customer": {"kind": kind, "id": customer_id}}


def test_create_case_returns_201_active(client):
    org_id = _create_org(client)

    r = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr())
    assert r.status_code == 201, r.text

    body = r.json()
    assert body["status"] == "active"
    assert body["customer_kind"] == "organization"
    assert body["customer_id"] == org_id
    assert body["row_version"] == 1


def test_second_active_case_is_409_with_fixed_message(client):
    person_id = _create_person(client)

    r1 = client.post("/cases", json=_case_body("individual", person_id), headers=_hdr())
    assert r1.status_code == 201, r1.text

    r2 = client.post("/cases", json=_case_body("individual", person_id), headers=_hdr())
    assert r2.status_code == 409, r2.text
    assert r2.json()["detail"] == "Cannot create Case. This Customer is linked to another Active Case"

    r = client.get("/cases", params={"customer_id": person_id}, headers=_hdr())
    assert r.status_code == 200, r.text
    assert len(r.json()) == 1


def test_missing_customer_is_422_data_integrity(client):
    r = client.post("/cases", json={"title": "no customer"}, headers=_hdr())
    assert r.status_code == 422, r.text
    assert r.json()["detail"] == "Customer ID is missing or invalid"


def test_unknown_customer_is_422(client):
    r = client.post("/cases", json=_case_body("organization", str(uuid4())), headers=_hdr())
    assert r.status_code == 422, r.text
    assert r.json()["detail"] == "Customer ID is missing or invalid"


def test_wrong_kind_for_customer_with_active_case_is_422(client):
    org_id = _create_org(client)
    r = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr())
    assert r.status_code == 201, r.text

    r = client.post("/cases", json=_case_body("individual", org_id), headers=_hdr())
    assert r.status_code == 422, r.text
    assert r.json()["detail"] == "Customer ID is missing or invalid"


def test_malformed_customer_reference_is_422(client):
    r = client.post("/cases", json=_case_body("partner", str(uuid4())), headers=_hdr())
    assert r.status_code == 422, r.text

    r = client.post("/cases", json=_case_body("organization", "not-a-uuid"), headers=_hdr())
    assert r.status_code == 422, r.text


def test_create_case_rejects_extra_fields(client):
    org_id = _create_org(client)
    body = {**_case_body("organization", org_id), "status": "resolved"}

    r = client.post("/cases", json=body, headers=_hdr())
    assert r.status_code == 422, r.text


def test_missing_role_header_is_401(client):
    r = client.post("/cases", json=_case_body("organization", str(uuid4())), headers={"X-Actor-User-Id": str(uuid4())})
    assert r.status_code == 401, r.text


def test_missing_actor_header_is_401(client):
    r = client.post("/cases", json=_case_body("organization", str(uuid4())), headers={"X-Role": "agent"})
    assert r.status_code == 401, r.text


def test_viewer_cannot_create_case(client):
    org_id = _create_org(client)

    r = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr("viewer"))
    assert r.status_code == 403, r.text


def test_resolve_then_new_case_allowed(client):
    org_id = _create_org(client)
    case = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr()).json()

    r = client.post(f"/cases/{case['id']}/resolve", json={"expected_row_version": 1}, headers=_hdr())
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "resolved"

    r = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr())
    assert r.status_code == 201, r.text

    r = client.get("/cases", params={"customer_id": org_id, "status": "active"}, headers=_hdr())
    active = r.json()
    assert len(active) == 1
    assert active[0]["id"] != case["id"]


def test_resolve_with_wrong_row_version_is_409(client):
    org_id = _create_org(client)
    case = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr()).json()

    r = client.post(f"/cases/{case['id']}/resolve", json={"expected_row_version": 5}, headers=_hdr())
    assert r.status_code == 409, r.text


def test_cancel_resolved_case_is_422(client):
    org_id = _create_org(client)
    case = client.post("/cases", json=_case_body("organization", org_id), headers=_hdr()).json()
    client.post(f"/cases/{case['id']}/resolve", json={"expected_row_version": 1}, headers=_hdr())

    r = client.post(f"/cases/{case['id']}/cancel", json={"expected_row_version": 2}, headers=_hdr("supervisor"))
    assert r.status_code == 422, r.text


def test_get_unknown_case_is_404(client):
    r = client.get(f"/cases/{uuid4()}", headers=_hdr())
    assert r.status_code == 404, r.text


def test_organization_with_unknown_primary_contact_is_422(client):
    r = client.post("/organizations", json={"name": "Initech", "primary_contact_id": str(uuid4())}, headers=_hdr())
    assert r.status_code == 422, r.text


def test_health_is_open(client):
    r = client.get("/health")
    assert r.status_code == 200, r.text
    assert r.json() == {"status": "ok"}
