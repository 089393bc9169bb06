import pytest


async def _status_id(client, headers, value):
    resp = await client.get("/api/v1/statuses", headers=headers)
    return next(s["id"] for s in resp.json() if s["value"] == value)


@pytest.mark.anyio
async def test_list_and_create(async_client, headers):
    resp = await async_client.get("/api/v1/statuses", headers=headers["lab_user"])
    assert resp.status_code == 200
    assert [s["value"] for s in resp.json()] == ["available", "damaged", "repair"]

    resp = await async_client.post(
        "/api/v1/statuses", json={"value": "retired", "label": "Retired"}, headers=headers["super"]
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["color"] == "#adb5bd"

    resp = await async_client.get(f"/api/v1/statuses/{resp.json()['id']}", headers=headers["lab_user"])
    assert resp.json()["label"] == "Retired"


@pytest.mark.anyio
async def test_catalog_writes_are_super_admin_only(async_client, headers):
    resp = await async_client.post(
        "/api/v1/statuses", json={"value": "lost", "label": "Lost"}, headers=headers["finance_admin"]
    )
    assert resp.status_code == 403


@pytest.mark.anyio
async def test_duplicate_value_conflicts(async_client, headers):
    resp = await async_client.post(
        "/api/v1/statuses", json={"value": "damaged", "label": "Broken"}, headers=headers["super"]
    )
    assert resp.status_code == 409

    repair_id = await _status_id(async_client, headers["super"], "repair")
    resp = await async_client.put(
        f"/api/v1/statuses/{repair_id}",
        json={"value": "damaged", "label": "Broken"},
        headers=headers["super"],
    )
    assert resp.status_code == 409


@pytest.mark.anyio
async def test_new_value_is_usable_immediately(async_client, headers, make_asset):
    await make_asset()  # warms the catalog snapshot
    await async_client.post("/api/v1/statuses", json={"value": "lent", "label": "On Loan"}, headers=headers["super"])

    asset = await make_asset(status="lent")
    assert asset["display_status"] == "On Loan"


@pytest.mark.anyio
async def test_label_change_shows_on_every_asset(async_client, headers, make_asset):
    asset = await make_asset()
    available_id = await _status_id(async_client, headers["super"], "available")

    resp = await async_client.put(
        f"/api/v1/statuses/{available_id}",
        json={"value": "available", "label": "Ready", "color": "#00ff00"},
        headers=headers["super"],
    )
    assert resp.status_code == 200

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    assert resp.json()["display_status"] == "Ready"
    assert resp.json()["display_color"] == "#00ff00"


@pytest.mark.anyio
async def test_value_in_use_cannot_be_renamed_or_deleted(async_client, headers, make_asset):
    await make_asset()
    available_id = await _status_id(async_client, headers["super"], "available")

    resp = await async_client.put(
        f"/api/v1/statuses/{available_id}",
        json={"value": "in_stock", "label": "Available"},
        headers=headers["super"],
    )
    assert resp.status_code == 400

    resp = await async_client.delete(f"/api/v1/statuses/{available_id}", headers=headers["super"])
    assert resp.status_code == 400
    assert "1 asset(s)" in resp.json()["detail"]


@pytest.mark.anyio
async def test_value_asserted_by_unconfirmed_audit_is_protected(async_client, headers, make_asset):
    asset = await make_asset()
    await async_client.post(
        "/api/v1/audits", json={"asset_id": asset["id"], "status": "repair"}, headers=headers["finance_user"]
    )
    repair_id = await _status_id(async_client, headers["super"], "repair")

    resp = await async_client.delete(f"/api/v1/statuses/{repair_id}", headers=headers["super"])
    assert resp.status_code == 400
    assert "unconfirmed audit" in resp.json()["detail"]


@pytest.mark.anyio
async def test_unused_value_can_be_deleted(async_client, headers):
    damaged_id = await _status_id(async_client, headers["super"], "damaged")

    resp = await async_client.delete(f"/api/v1/statuses/{damaged_id}", headers=headers["super"])
    assert resp.status_code == 200

    resp = await async_client.get(f"/api/v1/statuses/{damaged_id}", headers=headers["super"])
    assert resp.status_code == 404
