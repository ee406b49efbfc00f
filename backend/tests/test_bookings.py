"""
Tests for booking endpoints including the concurrent same-slot race.
"""

import asyncio

import pytest
from httpx import AsyncClient

from conftest import TEST_DATE


def booking_payload(turf_id: int, start_hour=10, end_hour=12, date=TEST_DATE) -> dict:
    return {"turf_id": turf_id, "date": date, "start_hour": start_hour, "end_hour": end_hour}


@pytest.mark.asyncio
async def test_book_slot(client: AsyncClient, player_headers, turf, player):
    """Successful booking returns the committed interval with turf details."""
    response = await client.post("/api/v1/bookings/", json=booking_payload(turf.id), headers=player_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["turf_id"] == turf.id
    assert data["date"] == TEST_DATE
    assert (data["start_hour"], data["end_hour"]) == (10, 12)
    assert data["kind"] == "booking"
    assert data["holder_id"] == player.id
    assert data["turf"]["name"] == "Downtown Arena"


@pytest.mark.asyncio
async def test_book_slot_unauthenticated(client: AsyncClient, turf):
    """Unauthenticated booking returns 401."""
    response = await client.post("/api/v1/bookings/", json=booking_payload(turf.id))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_book_slot_invalid_token(client: AsyncClient, turf):
    response = await client.post(
        "/api/v1/bookings/",
        json=booking_payload(turf.id),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_book_occupied_slot(client: AsyncClient, player_headers, other_player_headers, turf):
    """Overlapping booking returns 409 with the conflicting windows."""
    await client.post("/api/v1/bookings/", json=booking_payload(turf.id, 14, 16), headers=player_headers)

    response = await client.post(
        "/api/v1/bookings/", json=booking_payload(turf.id, 15, 17), headers=other_player_headers
    )
    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "slot_occupied"
    assert data["conflicts"] == [{"start_hour": 14, "end_hour": 16, "kind": "booking"}]


@pytest.mark.asyncio
async def test_book_adjacent_slot(client: AsyncClient, player_headers, other_player_headers, turf):
    first = await client.post("/api/v1/bookings/", json=booking_payload(turf.id, 14, 16), headers=player_headers)
    second = await client.post(
        "/api/v1/bookings/", json=booking_payload(turf.id, 16, 18), headers=other_player_headers
    )
    assert first.status_code == 201
    assert second.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start_hour, end_hour",
    [(12, 12), (16, 14), (-1, 3), (22, 25), ("noon", 14), (None, 14)],
)
async def test_book_invalid_window(client: AsyncClient, player_headers, turf, start_hour, end_hour):
    """Malformed windows return 422 invalid_request and commit nothing."""
    response = await client.post(
        "/api/v1/bookings/",
        json=booking_payload(turf.id, start_hour, end_hour),
        headers=player_headers,
    )
    assert response.status_code == 422
    assert response.json()["error"] == "invalid_request"

    occupied = await client.get(f"/api/v1/turfs/{turf.id}/occupied", params={"date": TEST_DATE})
    assert occupied.json() == []


@pytest.mark.asyncio
async def test_book_invalid_date(client: AsyncClient, player_headers, turf):
    response = await client.post(
        "/api/v1/bookings/",
        json=booking_payload(turf.id, date="01-06-2024"),
        headers=player_headers,
    )
    assert response.status_code == 422
    assert response.json()["error"] == "invalid_request"


@pytest.mark.asyncio
async def test_book_nonexistent_turf(client: AsyncClient, player_headers):
    """Booking a non-existent turf returns 404."""
    response = await client.post("/api/v1/bookings/", json=booking_payload(99999), headers=player_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_concurrent_same_slot_bookings(client: AsyncClient, player_headers, other_player_headers, turf):
    """Two simultaneous requests for 10-11: exactly one wins."""
    responses = await asyncio.gather(
        client.post("/api/v1/bookings/", json=booking_payload(turf.id, 10, 11), headers=player_headers),
        client.post("/api/v1/bookings/", json=booking_payload(turf.id, 10, 11), headers=other_player_headers),
    )

    assert sorted(r.status_code for r in responses) == [201, 409]

    occupied = await client.get(f"/api/v1/turfs/{turf.id}/occupied", params={"date": TEST_DATE})
    assert occupied.json() == [{"start_hour": 10, "end_hour": 11, "kind": "booking"}]


@pytest.mark.asyncio
async def test_commit_time_conflict_returns_409(
    client: AsyncClient, store, player_headers, other_player_headers, turf, monkeypatch
):
    """A winner committed after the pre-check is reported with its window."""
    first = await client.post("/api/v1/bookings/", json=booking_payload(turf.id, 10, 11), headers=player_headers)
    assert first.status_code == 201

    async def stale_precheck(*args, **kwargs):
        return []

    monkeypatch.setattr(store, "find_conflicts", stale_precheck)

    response = await client.post(
        "/api/v1/bookings/", json=booking_payload(turf.id, 10, 11), headers=other_player_headers
    )
    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "slot_occupied"
    assert data["conflicts"] == [{"start_hour": 10, "end_hour": 11, "kind": "booking"}]


@pytest.mark.asyncio
async def test_list_user_bookings(client: AsyncClient, player_headers, other_player_headers, turf):
    """User sees only their own bookings, with turf name and location."""
    await client.post("/api/v1/bookings/", json=booking_payload(turf.id, 8, 9), headers=player_headers)
    await client.post("/api/v1/bookings/", json=booking_payload(turf.id, 9, 10), headers=other_player_headers)

    response = await client.get("/api/v1/bookings/", headers=player_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["start_hour"] == 8
    assert data[0]["turf"] == {"id": turf.id, "name": "Downtown Arena", "location": "Test Location"}


@pytest.mark.asyncio
async def test_list_other_users_bookings_forbidden(client: AsyncClient, player_headers, other_player):
    response = await client.get(
        "/api/v1/bookings/", params={"user_id": other_player.id}, headers=player_headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


@pytest.mark.asyncio
async def test_list_bookings_unauthenticated(client: AsyncClient):
    response = await client.get("/api/v1/bookings/")
    assert response.status_code == 401
