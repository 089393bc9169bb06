import pytest
from sqlalchemy import select

from db_models.asset import Asset
from db_models.asset_audit import AssetAudit
from db_models.asset_transfer import AssetTransfer


@pytest.mark.anyio
async def test_create_forces_owner_to_creator(async_client, headers, seed, make_asset):
    asset = await make_asset("finance_user", owner_id=seed.user_ids["super"], department_id=None)
    assert asset["owner_id"] == seed.user_ids["finance_user"]
    assert asset["owner_name"] == "Finance User"
    assert asset["department_id"] == seed.finance_id
    assert asset["department_name"] == "Finance"
    assert asset["status_label"] == "Available"
    assert asset["status_color"] == "#28a745"


@pytest.mark.anyio
async def test_create_validates_input(async_client, headers, seed):
    base = {"code": "X-1", "name": "Printer", "department_id": seed.finance_id}

    resp = await async_client.post("/api/v1/assets", json={**base, "status": "stolen"}, headers=headers["super"])
    assert resp.status_code == 400

    resp = await async_client.post("/api/v1/assets", json={"name": "No code"}, headers=headers["super"])
    assert resp.status_code == 422

    resp = await async_client.post("/api/v1/assets", json={**base, "location_id": 999}, headers=headers["super"])
    assert resp.status_code == 400

    resp = await async_client.post("/api/v1/assets", json=base, headers=headers["super"])
    assert resp.status_code == 201
    resp = await async_client.post("/api/v1/assets", json=base, headers=headers["super"])
    assert resp.status_code == 409


@pytest.mark.anyio
async def test_create_outside_own_department_is_forbidden(async_client, headers, seed):
    payload = {"code": "X-2", "name": "Scope", "department_id": seed.lab_id}
    resp = await async_client.post("/api/v1/assets", json=payload, headers=headers["finance_user"])
    assert resp.status_code == 403

    resp = await async_client.post("/api/v1/assets", json={"code": "X-3", "name": "Nobody"}, headers=headers["drifter"])
    assert resp.status_code == 403


@pytest.mark.anyio
async def test_get_unknown_asset(async_client, headers, seed):
    resp = await async_client.get("/api/v1/assets/31337", headers=headers["super"])
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_combined_department_and_status_edit_is_rejected(async_client, headers, seed, make_asset, db_session):
    asset = await make_asset(name="Original")

    resp = await async_client.put(
        f"/api/v1/assets/{asset['id']}",
        json={"department_id": seed.lab_id, "status": "damaged", "name": "Changed"},
        headers=headers["finance_user"],
    )
    assert resp.status_code == 400

    stored = (await db_session.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()
    assert stored.name == "Original"
    assert stored.department_id == seed.finance_id
    assert stored.status == "available"
    transfers = (await db_session.execute(select(AssetTransfer))).scalars().all()
    audits = (await db_session.execute(select(AssetAudit))).scalars().all()
    assert transfers == [] and audits == []


@pytest.mark.anyio
async def test_registry_update_rejects_combined_department_and_status(async_client, headers, seed, make_asset, db_session):
    asset = await make_asset(name="Original")

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}",
        json={"department_id": seed.lab_id, "status": "damaged", "name": "Changed"},
        headers=headers["super"],
    )
    assert resp.status_code == 400

    stored = (await db_session.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()
    assert stored.name == "Original"
    assert stored.department_id == seed.finance_id
    assert stored.status == "available"

    # Repeating the current value is not a change.
    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}",
        json={"department_id": seed.finance_id, "status": "damaged"},
        headers=headers["super"],
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "damaged"


@pytest.mark.anyio
async def test_registry_department_change_waits_for_pending_transfer(async_client, headers, seed, make_asset):
    asset = await make_asset()
    resp = await async_client.post(
        "/api/v1/transfers",
        json={"asset_id": asset["id"], "to_department_id": seed.lab_id},
        headers=headers["finance_user"],
    )
    transfer_id = resp.json()["id"]

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}", json={"department_id": seed.lab_id}, headers=headers["super"]
    )
    assert resp.status_code == 409

    resp = await async_client.get(f"/api/v1/transfers/{transfer_id}", headers=headers["super"])
    assert resp.json()["from_department_id"] == seed.finance_id

    await async_client.post(f"/api/v1/transfers/{transfer_id}/reject", headers=headers["lab_admin"])
    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}", json={"department_id": seed.lab_id}, headers=headers["super"]
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["department_id"] == seed.lab_id


@pytest.mark.anyio
async def test_edit_status_change_files_an_audit(async_client, headers, make_asset):
    asset = await make_asset()

    resp = await async_client.put(
        f"/api/v1/assets/{asset['id']}",
        json={"status": "damaged", "room": "B-12", "note": "dropped"},
        headers=headers["finance_user"],
    )
    assert resp.status_code == 200, resp.text
    outcome = resp.json()
    assert outcome["audit_id"] is not None
    assert outcome["transfer_id"] is None
    assert outcome["asset"]["status"] == "available"
    assert outcome["asset"]["room"] == "B-12"
    assert outcome["asset"]["display_status"] == "Pending"


@pytest.mark.anyio
async def test_edit_department_by_name_files_a_transfer(async_client, headers, seed, make_asset):
    asset = await make_asset()

    resp = await async_client.put(
        f"/api/v1/assets/{asset['id']}",
        json={"department_name": "Labor", "status": "available"},
        headers=headers["finance_admin"],
    )
    assert resp.status_code == 200, resp.text
    outcome = resp.json()
    assert outcome["transfer_id"] is not None
    assert outcome["audit_id"] is None
    assert outcome["asset"]["department_id"] == seed.finance_id
    assert outcome["asset"]["display_status"] == "Transferring"


@pytest.mark.anyio
async def test_edit_with_unknown_names(async_client, headers, make_asset):
    asset = await make_asset()
    for payload in ({"department_name": "Nowhere"}, {"location_name": "Atlantis"}):
        resp = await async_client.put(f"/api/v1/assets/{asset['id']}", json=payload, headers=headers["finance_user"])
        assert resp.status_code == 400


@pytest.mark.anyio
async def test_edit_by_other_department_or_unaffiliated_is_forbidden(async_client, headers, make_asset):
    asset = await make_asset()
    for who in ("lab_user", "lab_admin", "drifter"):
        resp = await async_client.put(f"/api/v1/assets/{asset['id']}", json={"room": "X"}, headers=headers[who])
        assert resp.status_code == 403, who


@pytest.mark.anyio
async def test_unaffiliated_principal_sees_empty_lists(async_client, headers, seed, make_asset):
    asset = await make_asset(name="Laptop")

    for url in ("/api/v1/assets", f"/api/v1/assets/department/{seed.finance_id}", "/api/v1/assets/search?q=lap"):
        resp = await async_client.get(url, headers=headers["drifter"])
        assert resp.status_code == 200, url
        assert resp.json() == [], url

    # Single records stay readable.
    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["drifter"])
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_lists_are_department_scoped(async_client, headers, seed, make_asset):
    finance = await make_asset()
    lab = await make_asset(department_id=seed.lab_id)

    resp = await async_client.get("/api/v1/assets", headers=headers["finance_user"])
    assert [a["id"] for a in resp.json()] == [finance["id"]]

    resp = await async_client.get("/api/v1/assets", headers=headers["super"])
    assert {a["id"] for a in resp.json()} == {finance["id"], lab["id"]}

    resp = await async_client.get(f"/api/v1/assets/department/{seed.lab_id}", headers=headers["super"])
    assert [a["id"] for a in resp.json()] == [lab["id"]]

    resp = await async_client.get(f"/api/v1/assets/department/{seed.lab_id}", headers=headers["finance_user"])
    assert resp.status_code == 403


@pytest.mark.anyio
async def test_search_ranks_prefix_matches_first(async_client, headers, seed, make_asset):
    by_description = await make_asset(code="ZZ-1", name="Cabinet", description="holds the lab laptop")
    by_name = await make_asset(code="ZZ-2", name="Laptop stand")
    by_code = await make_asset(code="LAP-01", name="Docking station")
    await make_asset(code="ZZ-3", name="Chair")

    resp = await async_client.get("/api/v1/assets/search", params={"q": "LAP"}, headers=headers["finance_user"])
    assert resp.status_code == 200
    assert [a["id"] for a in resp.json()] == [by_code["id"], by_name["id"], by_description["id"]]


@pytest.mark.anyio
async def test_search_matches_related_names_and_escapes_wildcards(async_client, headers, seed, make_asset):
    at_store = await make_asset(location_id=seed.location_id)
    await make_asset(name="100% cotton")

    resp = await async_client.get("/api/v1/assets/search", params={"q": "main store"}, headers=headers["super"])
    assert [a["id"] for a in resp.json()] == [at_store["id"]]

    resp = await async_client.get("/api/v1/assets/search", params={"q": "%"}, headers=headers["super"])
    assert [a["name"] for a in resp.json()] == ["100% cotton"]


@pytest.mark.anyio
async def test_barcode_lookup(async_client, headers, make_asset):
    asset = await make_asset(inventory_number="INV-777")

    resp = await async_client.get("/api/v1/assets/barcode/INV-777", headers=headers["lab_user"])
    assert resp.status_code == 200
    assert resp.json()["id"] == asset["id"]

    resp = await async_client.get(f"/api/v1/assets/barcode/{asset['code']}", headers=headers["lab_user"])
    assert resp.json()["id"] == asset["id"]

    resp = await async_client.get("/api/v1/assets/barcode/NOPE", headers=headers["lab_user"])
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_last_updated_watermark(async_client, headers, make_asset):
    resp = await async_client.get("/api/v1/assets/last-updated", headers=headers["finance_user"])
    assert resp.json()["last_updated"] is None

    await make_asset()
    resp = await async_client.get("/api/v1/assets/last-updated", headers=headers["finance_user"])
    assert resp.json()["last_updated"] is not None


@pytest.mark.anyio
async def test_set_status_is_super_admin_only(async_client, headers, make_asset):
    asset = await make_asset()

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}/status", json={"status": "repair"}, headers=headers["finance_admin"]
    )
    assert resp.status_code == 403

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}/status", json={"status": "stolen"}, headers=headers["super"]
    )
    assert resp.status_code == 400

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}/status", json={"status": "repair"}, headers=headers["super"]
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "repair"
    assert resp.json()["display_status"] == "In Repair"


@pytest.mark.anyio
async def test_registry_update_writes_fields_directly(async_client, headers, seed, make_asset):
    asset = await make_asset()

    resp = await async_client.patch(
        f"/api/v1/assets/{asset['id']}",
        json={"department_id": seed.lab_id, "serial_number": "SN-1"},
        headers=headers["super"],
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["department_id"] == seed.lab_id
    assert resp.json()["serial_number"] == "SN-1"
    assert resp.json()["has_pending_transfer"] is False


@pytest.mark.anyio
async def test_delete_is_super_admin_only_and_keeps_history(async_client, headers, seed, make_asset):
    asset = await make_asset()
    await async_client.post(
        "/api/v1/transfers",
        json={"asset_id": asset["id"], "to_department_id": seed.lab_id},
        headers=headers["finance_user"],
    )

    resp = await async_client.delete(f"/api/v1/assets/{asset['id']}", headers=headers["finance_admin"])
    assert resp.status_code == 403

    resp = await async_client.delete(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    assert resp.status_code == 200

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    assert resp.status_code == 404

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}/transfers", headers=headers["super"])
    assert len(resp.json()) == 1


@pytest.mark.anyio
async def test_barcode_status_submission_files_an_audit(async_client, headers, seed, make_asset, db_session):
    asset = await make_asset(inventory_number="INV-900")

    resp = await async_client.patch(
        "/api/v1/assets/barcode/INV-900/status",
        json={"status": "damaged", "note": "cracked casing"},
        headers=headers["finance_user"],
    )
    assert resp.status_code == 200, resp.text
    audit = resp.json()
    assert audit["asset_id"] == asset["id"]
    assert audit["status"] == "damaged"
    assert audit["confirmed"] == 0
    assert audit["note"] == "cracked casing"

    stored = (await db_session.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()
    assert stored.status == "available"

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["finance_user"])
    assert resp.json()["display_status"] == "Pending"
    assert resp.json()["pending_status"] == "damaged"


@pytest.mark.anyio
async def test_barcode_status_submission_errors(async_client, headers, make_asset):
    asset = await make_asset(inventory_number="INV-901")

    resp = await async_client.patch(
        "/api/v1/assets/barcode/NOPE/status", json={"status": "damaged"}, headers=headers["finance_user"]
    )
    assert resp.status_code == 404

    resp = await async_client.patch(
        "/api/v1/assets/barcode/INV-901/status", json={"status": "stolen"}, headers=headers["finance_user"]
    )
    assert resp.status_code == 400

    for who in ("lab_user", "drifter"):
        resp = await async_client.patch(
            "/api/v1/assets/barcode/INV-901/status", json={"status": "damaged"}, headers=headers[who]
        )
        assert resp.status_code == 403, who

    resp = await async_client.patch(
        f"/api/v1/assets/barcode/{asset['code']}/status", json={"status": "damaged"}, headers=headers["finance_user"]
    )
    assert resp.status_code == 200
    resp = await async_client.patch(
        "/api/v1/assets/barcode/INV-901/status", json={"status": "repair"}, headers=headers["finance_admin"]
    )
    assert resp.status_code == 409
