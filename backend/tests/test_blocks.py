"""
Tests for owner slot blocking and its interaction with bookings.
"""

import pytest
from httpx import AsyncClient

from conftest import TEST_DATE, headers_for


def block_payload(turf_id: int, start_hour=18, end_hour=20) -> dict:
    return {"turf_id": turf_id, "date": TEST_DATE, "start_hour": start_hour, "end_hour": end_hour}


@pytest.mark.asyncio
async def test_owner_blocks_slot(client: AsyncClient, owner_headers, turf, owner):
    response = await client.post("/api/v1/blocks/", json=block_payload(turf.id), headers=owner_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["kind"] == "block"
    assert data["holder_id"] == owner.id


@pytest.mark.asyncio
async def test_block_other_owners_turf_forbidden(client: AsyncClient, other_owner, turf):
    response = await client.post(
        "/api/v1/blocks/", json=block_payload(turf.id), headers=headers_for(other_owner)
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


@pytest.mark.asyncio
async def test_block_by_user_forbidden(client: AsyncClient, player_headers, turf):
    response = await client.post("/api/v1/blocks/", json=block_payload(turf.id), headers=player_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_blocked_slot_cannot_be_booked(client: AsyncClient, owner_headers, player_headers, turf):
    await client.post("/api/v1/blocks/", json=block_payload(turf.id, 18, 20), headers=owner_headers)

    response = await client.post(
        "/api/v1/bookings/",
        json={"turf_id": turf.id, "date": TEST_DATE, "start_hour": 19, "end_hour": 21},
        headers=player_headers,
    )
    assert response.status_code == 409
    assert response.json()["conflicts"][0]["kind"] == "block"


@pytest.mark.asyncio
async def test_owner_cannot_block_booked_slot(client: AsyncClient, owner_headers, player_headers, turf):
    await client.post(
        "/api/v1/bookings/",
        json={"turf_id": turf.id, "date": TEST_DATE, "start_hour": 18, "end_hour": 19},
        headers=player_headers,
    )

    response = await client.post("/api/v1/blocks/", json=block_payload(turf.id, 18, 20), headers=owner_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_occupied_view_lists_bookings_and_blocks(client: AsyncClient, owner_headers, player_headers, turf):
    """Public view returns both kinds in start-hour order."""
    await client.post("/api/v1/blocks/", json=block_payload(turf.id, 18, 20), headers=owner_headers)
    await client.post(
        "/api/v1/bookings/",
        json={"turf_id": turf.id, "date": TEST_DATE, "start_hour": 16, "end_hour": 18},
        headers=player_headers,
    )

    response = await client.get(f"/api/v1/turfs/{turf.id}/occupied", params={"date": TEST_DATE})
    assert response.status_code == 200
    assert response.json() == [
        {"start_hour": 16, "end_hour": 18, "kind": "booking"},
        {"start_hour": 18, "end_hour": 20, "kind": "block"},
    ]

    other_day = await client.get(f"/api/v1/turfs/{turf.id}/occupied", params={"date": "2024-06-02"})
    assert other_day.json() == []


@pytest.mark.asyncio
async def test_occupied_view_requires_valid_date(client: AsyncClient, turf):
    response = await client.get(f"/api/v1/turfs/{turf.id}/occupied", params={"date": "June 1st"})
    assert response.status_code == 422
    assert response.json()["error"] == "invalid_request"
