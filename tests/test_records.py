import asyncio
import uuid

import pytest
from httpx import AsyncClient

from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_create_record(api_client: AsyncClient, register, record_payload):
    user, token = await register("alice")

    response = await api_client.post("/records", json=record_payload(click=3), headers=auth_headers(token))

    assert response.status_code == 201
    body = response.json()
    assert body["company"] == "Acme Corp"
    assert body["employmentType"] == "fulltime"
    assert body["jobTitle"] == "Backend Engineer"
    assert body["appliedDate"] == "2026-10-01"
    assert body["clickCount"] == 3
    assert body["ownerUserId"] == user["id"]


@pytest.mark.asyncio
async def test_create_record_accepts_short_field_names(api_client: AsyncClient, register, record_payload):
    _, token = await register("alice")
    payload = record_payload()
    payload["type"] = payload.pop("employmentType")
    payload["date"] = payload.pop("appliedDate")

    response = await api_client.post("/records", json=payload, headers=auth_headers(token))

    assert response.status_code == 201
    assert response.json()["employmentType"] == "fulltime"
    assert response.json()["appliedDate"] == "2026-10-01"


@pytest.mark.asyncio
async def test_create_record_missing_fields(api_client: AsyncClient, register, record_payload):
    _, token = await register("alice")
    payload = record_payload()
    del payload["company"]

    response = await api_client.post("/records", json=payload, headers=auth_headers(token))

    assert response.status_code == 400
    assert "company" in response.json()["message"]


@pytest.mark.asyncio
async def test_create_record_requires_auth(api_client: AsyncClient, record_payload):
    response = await api_client.post("/records", json=record_payload())
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_records_flags_applied_for_caller(api_client: AsyncClient, register, create_record):
    _, alice_token = await register("alice")
    _, bob_token = await register("bob")
    first = await create_record(alice_token, company="First")
    second = await create_record(alice_token, company="Second")

    applied = await api_client.patch(
        f"/records/{first['id']}/status", json={"status": "Applied"}, headers=auth_headers(bob_token)
    )
    assert applied.status_code == 200

    as_bob = await api_client.get("/records", headers=auth_headers(bob_token))
    assert as_bob.status_code == 200
    flags = {item["id"]: item["isApplied"] for item in as_bob.json()}
    assert flags == {first["id"]: True, second["id"]: False}
    # Newest first
    assert [item["company"] for item in as_bob.json()] == ["Second", "First"]

    as_alice = await api_client.get("/records", headers=auth_headers(alice_token))
    assert all(item["isApplied"] is False for item in as_alice.json())


@pytest.mark.asyncio
async def test_list_records_requires_valid_token(api_client: AsyncClient):
    anonymous = await api_client.get("/records")
    garbage = await api_client.get("/records", headers=auth_headers("garbage"))

    assert anonymous.status_code == 401
    assert garbage.status_code == 401


@pytest.mark.asyncio
async def test_update_record_partial(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token)

    response = await api_client.put(
        f"/records/{record['id']}",
        json={"receivedInterview": True, "comment": "Phone screen booked"},
        headers=auth_headers(token),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["receivedInterview"] is True
    assert body["comment"] == "Phone screen booked"
    assert body["company"] == record["company"]
    assert body["jobTitle"] == record["jobTitle"]


@pytest.mark.asyncio
async def test_update_record_accepts_short_field_names(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token)

    response = await api_client.put(
        f"/records/{record['id']}", json={"type": "contract", "date": "2026-11-02"}, headers=auth_headers(token)
    )

    assert response.status_code == 200
    assert response.json()["employmentType"] == "contract"
    assert response.json()["appliedDate"] == "2026-11-02"


@pytest.mark.asyncio
async def test_update_record_cannot_clear_required_field(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token)

    response = await api_client.put(
        f"/records/{record['id']}", json={"company": None}, headers=auth_headers(token)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_other_users_cannot_modify_record(api_client: AsyncClient, register, create_record):
    _, alice_token = await register("alice")
    _, bob_token = await register("bob")
    record = await create_record(alice_token)

    update = await api_client.put(
        f"/records/{record['id']}", json={"company": "Hijacked"}, headers=auth_headers(bob_token)
    )
    delete = await api_client.delete(f"/records/{record['id']}", headers=auth_headers(bob_token))

    assert update.status_code == 404
    assert delete.status_code == 404

    listing = await api_client.get("/records", headers=auth_headers(alice_token))
    assert [item["company"] for item in listing.json()] == ["Acme Corp"]


@pytest.mark.asyncio
async def test_delete_record_removes_it_from_profiles(api_client: AsyncClient, register, create_record):
    alice, token = await register("alice")
    record = await create_record(token)
    await api_client.put(f"/profiles/{alice['id']}", json={"recordId": record["id"]}, headers=auth_headers(token))

    response = await api_client.delete(f"/records/{record['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"message": "Record deleted", "id": record["id"]}

    listing = await api_client.get("/records", headers=auth_headers(token))
    assert listing.json() == []

    profile = await api_client.get(f"/profiles/{alice['id']}", headers=auth_headers(token))
    assert profile.json()["appliedRecords"] == []

    again = await api_client.delete(f"/records/{record['id']}", headers=auth_headers(token))
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_click_is_public_and_increments(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token, click=5)

    response = await api_client.put(f"/records/{record['id']}/click")

    assert response.status_code == 200
    assert response.json()["clickCount"] == 6


@pytest.mark.asyncio
async def test_click_missing_record(api_client: AsyncClient):
    response = await api_client.put(f"/records/{uuid.uuid4()}/click")
    assert response.status_code == 404
    assert response.json() == {"message": "Record not found"}


@pytest.mark.asyncio
async def test_concurrent_clicks_are_not_lost(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token, click=0)

    responses = await asyncio.gather(
        *[api_client.put(f"/records/{record['id']}/click") for _ in range(10)]
    )
    assert all(r.status_code == 200 for r in responses)

    listing = await api_client.get("/records", headers=auth_headers(token))
    assert listing.json()[0]["clickCount"] == 10


@pytest.mark.asyncio
async def test_duplicate_record(api_client: AsyncClient, register, create_record):
    _, alice_token = await register("alice")
    bob, bob_token = await register("bob")
    source = await create_record(alice_token, click=7, receivedOffer=True)

    response = await api_client.post(f"/records/duplicate/{source['id']}", headers=auth_headers(bob_token))

    assert response.status_code == 201
    clone = response.json()
    assert clone["id"] != source["id"]
    assert clone["clickCount"] == 0
    assert clone["ownerUserId"] == bob["id"]
    for field in ("company", "employmentType", "jobTitle", "appliedDate", "websiteLink", "comment", "receivedOffer"):
        assert clone[field] == source[field]

    status = await api_client.get(f"/records/{clone['id']}/status", headers=auth_headers(bob_token))
    assert status.json() == {"recordId": clone["id"], "status": "Applied"}

    # The source is untouched
    source_status = await api_client.get(f"/records/{source['id']}/status", headers=auth_headers(bob_token))
    assert source_status.json()["status"] == "Not Applied"


@pytest.mark.asyncio
async def test_duplicate_missing_record(api_client: AsyncClient, register):
    _, token = await register("alice")
    response = await api_client.post(f"/records/duplicate/{uuid.uuid4()}", headers=auth_headers(token))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_application_status_round_trip(api_client: AsyncClient, register, create_record):
    _, token = await register("alice")
    record = await create_record(token)
    url = f"/records/{record['id']}/status"

    initial = await api_client.get(url, headers=auth_headers(token))
    assert initial.json()["status"] == "Not Applied"

    applied = await api_client.patch(url, json={"status": "Applied"}, headers=auth_headers(token))
    assert applied.json() == {"recordId": record["id"], "status": "Applied"}

    # Applying twice keeps a single membership
    await api_client.patch(url, json={"status": "Applied"}, headers=auth_headers(token))

    withdrawn = await api_client.patch(url, json={"status": "Rejected"}, headers=auth_headers(token))
    assert withdrawn.json()["status"] == "Not Applied"

    current = await api_client.get(url, headers=auth_headers(token))
    assert current.json()["status"] == "Not Applied"


@pytest.mark.asyncio
async def test_status_for_missing_record(api_client: AsyncClient, register):
    _, token = await register("alice")
    response = await api_client.get(f"/records/{uuid.uuid4()}/status", headers=auth_headers(token))
    assert response.status_code == 404
