import pytest
from sqlalchemy import select

from api.transfers import db_manager as transfer_manager
from core.clock import utcnow
from core.errors import StoreError, http_error
from core.workflow import TRANSFER_TRANSITIONS, TransferStatus
from db import atomic
from db_models.asset import Asset
from db_models.asset_transfer import AssetTransfer


async def _request(client, headers, asset_id, to_department_id, note=None):
    return await client.post(
        "/api/v1/transfers",
        json={"asset_id": asset_id, "to_department_id": to_department_id, "note": note},
        headers=headers,
    )


@pytest.mark.anyio
async def test_transfer_approve_scenario(async_client, headers, seed, make_asset):
    asset = await make_asset()
    assert asset["display_status"] == "Available"

    resp = await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id, "moving to lab")
    assert resp.status_code == 201, resp.text
    transfer = resp.json()
    assert transfer["status"] == "pending"
    assert transfer["from_department_id"] == seed.finance_id
    assert transfer["to_department_name"] == "Laboratory"
    assert transfer["requested_by_name"] == "Finance User"

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["finance_user"])
    body = resp.json()
    assert body["display_status"] == "Transferring"
    assert body["has_pending_transfer"] is True
    assert body["department_id"] == seed.finance_id

    resp = await async_client.post(f"/api/v1/transfers/{transfer['id']}/approve", headers=headers["super"])
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "approved"
    assert resp.json()["approved_by_name"] == "Super Admin"
    assert resp.json()["approved_at"] is not None

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    body = resp.json()
    assert body["department_id"] == seed.lab_id
    assert body["display_status"] == "Available"
    assert body["has_pending_transfer"] is False

    resp = await async_client.post(f"/api/v1/transfers/{transfer['id']}/approve", headers=headers["super"])
    assert resp.status_code == 404

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    assert resp.json()["department_id"] == seed.lab_id


@pytest.mark.anyio
async def test_reject_leaves_department_unchanged(async_client, headers, seed, make_asset, db_session):
    asset = await make_asset()
    resp = await _request(async_client, headers["finance_admin"], asset["id"], seed.lab_id)
    transfer_id = resp.json()["id"]

    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/reject", headers=headers["lab_admin"])
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "rejected"

    stored = (await db_session.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()
    assert stored.department_id == seed.finance_id

    # Rejected is terminal.
    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["lab_admin"])
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_destination_admin_resolves_source_admin_cannot(async_client, headers, seed, make_asset):
    asset = await make_asset()
    transfer_id = (await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)).json()["id"]

    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["finance_admin"])
    assert resp.status_code == 403

    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["lab_user"])
    assert resp.status_code == 403

    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["lab_admin"])
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_self_transfer_is_rejected(async_client, headers, seed, make_asset):
    asset = await make_asset()
    resp = await _request(async_client, headers["finance_user"], asset["id"], seed.finance_id)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_unknown_destination_is_rejected(async_client, headers, make_asset):
    asset = await make_asset()
    resp = await _request(async_client, headers["finance_user"], asset["id"], 9999)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_one_pending_transfer_per_asset(async_client, headers, seed, make_asset, db_session):
    asset = await make_asset()
    first = await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)
    assert first.status_code == 201

    second = await _request(async_client, headers["finance_admin"], asset["id"], seed.lab_id)
    assert second.status_code == 409

    rows = (await db_session.execute(
        select(AssetTransfer).where(AssetTransfer.asset_id == asset["id"])
    )).scalars().all()
    assert len(rows) == 1


@pytest.mark.anyio
async def test_other_department_cannot_request(async_client, headers, seed, make_asset):
    asset = await make_asset()
    resp = await _request(async_client, headers["lab_user"], asset["id"], seed.lab_id)
    assert resp.status_code == 403

    resp = await _request(async_client, headers["drifter"], asset["id"], seed.lab_id)
    assert resp.status_code == 403


@pytest.mark.anyio
async def test_approve_unknown_transfer(async_client, headers, seed):
    resp = await async_client.post("/api/v1/transfers/424242/approve", headers=headers["super"])
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_resolution_that_loses_the_race_is_a_conflict(async_client, headers, seed, make_asset, monkeypatch):
    asset = await make_asset()
    resp = await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)
    transfer_id = resp.json()["id"]
    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["lab_admin"])
    assert resp.status_code == 200

    # Behave as if the row was still pending when read; the conditional update finds nothing.
    monkeypatch.setattr(
        transfer_manager,
        "transfer_transition",
        lambda current, event: TRANSFER_TRANSITIONS[(TransferStatus.PENDING, event)],
    )

    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/reject", headers=headers["lab_admin"])
    assert resp.status_code == 409
    resp = await async_client.post(f"/api/v1/transfers/{transfer_id}/approve", headers=headers["super"])
    assert resp.status_code == 409

    resp = await async_client.get(f"/api/v1/transfers/{transfer_id}", headers=headers["super"])
    assert resp.json()["status"] == "approved"
    resp = await async_client.get(f"/api/v1/assets/{asset['id']}", headers=headers["super"])
    assert resp.json()["department_id"] == seed.lab_id


@pytest.mark.anyio
async def test_store_failure_rolls_back_the_whole_transaction(seed, make_asset, db_session, session_factory):
    asset = await make_asset(name="Before")
    stored = (await db_session.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()

    with pytest.raises(StoreError) as exc_info:
        async with atomic(db_session):
            stored.name = "After"
            db_session.add(AssetTransfer(
                asset_id=stored.id,
                from_department_id=seed.finance_id,
                to_department_id=seed.lab_id,
                requested_by=None,
                status=TransferStatus.PENDING.value,
                requested_at=utcnow(),
            ))

    error = http_error(exc_info.value)
    assert error.status_code == 500
    assert error.detail == "Internal storage error"

    async with session_factory() as fresh:
        reloaded = (await fresh.execute(select(Asset).where(Asset.id == asset["id"]))).scalar_one()
        assert reloaded.name == "Before"
        transfers = (await fresh.execute(select(AssetTransfer))).scalars().all()
        assert transfers == []


@pytest.mark.anyio
async def test_list_by_direction_and_status(async_client, headers, seed, make_asset):
    outgoing = await make_asset()
    incoming = await make_asset(department_id=seed.lab_id)
    await _request(async_client, headers["finance_user"], outgoing["id"], seed.lab_id)
    resp = await _request(async_client, headers["lab_user"], incoming["id"], seed.finance_id)
    incoming_id = resp.json()["id"]

    resp = await async_client.get("/api/v1/transfers", params={"direction": "in"}, headers=headers["finance_admin"])
    assert [t["id"] for t in resp.json()] == [incoming_id]

    resp = await async_client.get("/api/v1/transfers", params={"direction": "out"}, headers=headers["finance_admin"])
    assert [t["asset_id"] for t in resp.json()] == [outgoing["id"]]

    resp = await async_client.get("/api/v1/transfers", headers=headers["finance_admin"])
    assert len(resp.json()) == 2

    await async_client.post(f"/api/v1/transfers/{incoming_id}/approve", headers=headers["finance_admin"])
    resp = await async_client.get(
        "/api/v1/transfers", params={"status": "pending"}, headers=headers["finance_admin"]
    )
    assert [t["asset_id"] for t in resp.json()] == [outgoing["id"]]

    resp = await async_client.get("/api/v1/transfers", params={"status": "all"}, headers=headers["super"])
    assert len(resp.json()) == 2

    resp = await async_client.get("/api/v1/transfers", params={"direction": "sideways"}, headers=headers["super"])
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_list_is_empty_without_department(async_client, headers, seed, make_asset):
    asset = await make_asset()
    await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)

    resp = await async_client.get("/api/v1/transfers", headers=headers["drifter"])
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.anyio
async def test_history_is_not_department_scoped(async_client, headers, seed, make_asset):
    asset = await make_asset()
    first = (await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)).json()
    await async_client.post(f"/api/v1/transfers/{first['id']}/reject", headers=headers["lab_admin"])
    second = (await _request(async_client, headers["finance_user"], asset["id"], seed.lab_id)).json()

    resp = await async_client.get(f"/api/v1/assets/{asset['id']}/transfers", headers=headers["drifter"])
    assert resp.status_code == 200
    assert {t["id"] for t in resp.json()} == {first["id"], second["id"]}
