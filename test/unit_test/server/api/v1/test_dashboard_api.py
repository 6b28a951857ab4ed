"""Tests for the dashboard statistics endpoint."""

from datetime import datetime

import pytest

from cgplayer.core.database.entities.events import Event
from cgplayer.core.models.domain.enums import UserRole, VoiceType


@pytest.fixture
async def sites(make_location):
    north = await make_location("Sede Norte", city="Antofagasta", color="#dc2626", phone="+56 55 123")
    south = await make_location("Sede Sur", city="Valdivia")
    return north, south


@pytest.fixture
async def members(sites, make_user):
    north, south = sites
    director, director_headers = await make_user(
        "director", roles=(UserRole.DIRECTOR,), location_id=north.id, first_name="Daniela"
    )
    await make_user("tenor", voice_types=(VoiceType.TENOR,), location_id=north.id)
    await make_user("bajo", voice_types=(VoiceType.BAJO,), location_id=north.id, is_active=False)
    await make_user("soprano", voice_types=(VoiceType.SOPRANO, VoiceType.CORO), location_id=south.id)
    return director, director_headers


async def _add_event(database, title, location_id, date):
    async with database.session() as session:
        session.add(Event(title=title, date=date, location_id=location_id))
        await session.commit()


async def test_requires_manager(client, make_user):
    _, headers = await make_user("singer")

    response = await client.get("/api/dashboard/stats", headers=headers)

    assert response.status_code == 403


async def test_admin_sees_everything(client, database, sites, members, make_user, make_song):
    north, south = sites
    admin, headers = await make_user("admin", roles=(UserRole.ADMIN,))
    container = await make_song(admin.id, title="Aleluya", container=True)
    await make_song(admin.id, title="Aleluya", voice_type="TENOR", parent=container)
    await make_song(admin.id, title="Gloria")
    await _add_event(database, "Norte", north.id, datetime(2030, 5, 1))
    await _add_event(database, "Sur", south.id, datetime(2030, 6, 1))

    response = await client.get("/api/dashboard/stats", headers=headers)

    data = response.json()["data"]
    assert data["total_users"] == 5
    assert data["active_users"] == 4
    assert data["inactive_users"] == 1
    assert data["total_songs"] == 2
    assert data["total_events"] == 2
    assert [location["location_name"] for location in data["locations"]] == ["Sede Norte", "Sede Sur"]
    assert [event["title"] for event in data["recent_events"]] == ["Sur", "Norte"]
    assert data["recent_events"][0]["location_name"] == "Sede Sur"

    voices = {entry["voice_type"]: (entry["count"], entry["active_count"]) for entry in data["global_voice_distribution"]}
    assert voices == {"SOPRANO": (1, 1), "TENOR": (1, 1), "BAJO": (1, 0), "CORO": (1, 1)}


async def test_location_breakdown(client, sites, members, make_user):
    north, _ = sites
    _, headers = await make_user("admin", roles=(UserRole.ADMIN,))

    response = await client.get("/api/dashboard/stats", headers=headers)

    north_card = next(loc for loc in response.json()["data"]["locations"] if loc["location_id"] == north.id)
    assert north_card["total_users"] == 3
    assert north_card["active_users"] == 2
    assert north_card["color"] == "#dc2626"
    assert north_card["phone"] == "+56 55 123"
    assert north_card["director"]["first_name"] == "Daniela"
    groups = {group["voice_type"]: group for group in north_card["voice_distribution"]}
    assert set(groups) == {"TENOR", "BAJO"}
    assert groups["BAJO"]["users"][0]["is_active"] is False


async def test_director_is_scoped_to_own_location(client, database, sites, members):
    north, south = sites
    _, headers = members
    await _add_event(database, "Norte", north.id, datetime(2030, 5, 1))
    await _add_event(database, "Sur", south.id, datetime(2030, 6, 1))

    response = await client.get("/api/dashboard/stats", headers=headers)

    data = response.json()["data"]
    assert data["total_users"] == 3
    assert data["active_users"] == 2
    assert data["total_events"] == 1
    assert [location["location_id"] for location in data["locations"]] == [north.id]
    assert [event["title"] for event in data["recent_events"]] == ["Norte"]
    assert {entry["voice_type"] for entry in data["global_voice_distribution"]} == {"TENOR", "BAJO"}


async def test_director_without_location_sees_nothing(client, make_user):
    _, headers = await make_user("director", roles=(UserRole.DIRECTOR,))

    response = await client.get("/api/dashboard/stats", headers=headers)

    data = response.json()["data"]
    assert data["total_users"] == 0
    assert data["locations"] == []
    assert data["recent_events"] == []
