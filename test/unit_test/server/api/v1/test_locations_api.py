"""Tests for location endpoints."""

from datetime import datetime

import pytest

from cgplayer.core.database.entities.events import Event
from cgplayer.core.models.domain.enums import UserRole, VoiceType

NEW_LOCATION = {"name": "Sede Norte", "type": "ANTOFAGASTA", "city": "Antofagasta", "color": "#dc2626"}


@pytest.fixture
async def admin(make_user):
    return await make_user("admin", roles=(UserRole.ADMIN,))


async def _add_event(database, location_id, title="Ensayo general", date=datetime(2030, 1, 1, 19, 0)):
    async with database.session() as session:
        event = Event(title=title, date=date, location_id=location_id)
        session.add(event)
        await session.commit()
    return event


async def test_list_is_public_and_counts_references(client, database, make_location, make_user):
    north = await make_location("Sede Norte", city="Antofagasta")
    await make_location("Cerrada", city="Arica", is_active=False)
    await make_user("a", location_id=north.id)
    await make_user("b", location_id=north.id)
    await _add_event(database, north.id)

    response = await client.get("/api/locations/")

    locations = response.json()["locations"]
    assert [location["name"] for location in locations] == ["Sede Norte"]
    assert locations[0]["user_count"] == 2
    assert locations[0]["event_count"] == 1


async def test_create_requires_admin(client, make_user):
    _, headers = await make_user("director", roles=(UserRole.DIRECTOR,))

    response = await client.post("/api/locations/", json=NEW_LOCATION, headers=headers)

    assert response.status_code == 403


async def test_create(client, admin):
    _, headers = admin

    response = await client.post("/api/locations/", json=NEW_LOCATION, headers=headers)

    assert response.status_code == 201
    location = response.json()["location"]
    assert location["type"] == "ANTOFAGASTA"
    assert location["country"] == "Chile"
    assert location["is_active"] is True


async def test_create_with_unknown_type(client, admin):
    _, headers = admin

    response = await client.post("/api/locations/", json={**NEW_LOCATION, "type": "LIMA"}, headers=headers)

    assert response.status_code == 400


async def test_update(client, admin, make_location):
    _, headers = admin
    location = await make_location()

    response = await client.put(
        f"/api/locations/{location.id}", json={"type": "VALDIVIA", "phone": "+56 9 1234"}, headers=headers
    )

    body = response.json()["location"]
    assert body["type"] == "VALDIVIA"
    assert body["phone"] == "+56 9 1234"
    assert body["name"] == "Sede Centro"


async def test_update_with_null_name_is_rejected(client, admin, make_location):
    _, headers = admin
    location = await make_location()

    response = await client.put(f"/api/locations/{location.id}", json={"name": None, "city": None}, headers=headers)

    assert response.status_code == 400
    assert "Fields cannot be null: name, city" in response.text


async def test_update_unknown(client, admin):
    _, headers = admin

    response = await client.put("/api/locations/missing", json={"name": "x"}, headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Location not found"


async def test_delete_unreferenced_location(client, admin, make_location):
    _, headers = admin
    location = await make_location("Vacia", city="Arica")

    response = await client.delete(f"/api/locations/{location.id}", headers=headers)
    again = await client.delete(f"/api/locations/{location.id}", headers=headers)

    assert response.json() == {"message": "Location deleted successfully", "soft_deleted": False}
    assert again.status_code == 404


async def test_delete_referenced_location_is_soft(client, admin, make_location, make_user):
    _, headers = admin
    location = await make_location()
    await make_user("member", location_id=location.id)

    response = await client.delete(f"/api/locations/{location.id}", headers=headers)
    listing = await client.get("/api/locations/")

    assert response.json()["soft_deleted"] is True
    assert listing.json()["locations"] == []


async def test_stats(client, database, make_location, make_user):
    location = await make_location()
    await make_user("tenor", voice_types=(VoiceType.TENOR,), location_id=location.id)
    await make_user("director", roles=(UserRole.DIRECTOR,), location_id=location.id)
    _, headers = await make_user("visitor")
    for month in range(1, 8):
        await _add_event(database, location.id, title=f"Evento {month}", date=datetime(2030, month, 1))

    response = await client.get(f"/api/locations/{location.id}/stats", headers=headers)

    body = response.json()
    assert body["total_users"] == 2
    assert body["users_by_role"] == {"CANTANTE": 1, "DIRECTOR": 1}
    assert body["users_by_voice"] == {"TENOR": 1}
    assert [event["title"] for event in body["recent_events"]] == [f"Evento {m}" for m in (7, 6, 5, 4, 3)]
