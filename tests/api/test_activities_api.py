"""Activities API — status codes, bodies and the full create/lap/delete walkthrough.

Tests cover:
    - Every /api/activities route on the happy path
    - 400 / 404 / 409 / 500 mapping with {"error": ...} bodies
    - Non-integer path ids rejected before touching the store
"""

import pytest
from httpx import ASGITransport, AsyncClient

from roundcounter.api.dependencies import get_store
from roundcounter.core.errors import DatabaseError
from roundcounter.main import app

BASE = "/api/activities"


async def _create(client, name="Running"):
    response = await client.post(BASE, json={"name": name})
    assert response.status_code == 201
    return response.json()


# -- Walkthrough ----------------------------------------------------------------

async def test_create_lap_delete_walkthrough(client):
    created = await client.post(BASE, json={"name": "Running"})
    assert created.status_code == 201
    activity = created.json()
    assert activity["name"] == "Running"
    assert set(activity) == {"id", "name", "created_at"}

    duplicate = await client.post(BASE, json={"name": "Running"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "Activity already exists"

    lap1 = (await client.post(f"{BASE}/{activity['id']}/laps")).json()
    lap2 = (await client.post(f"{BASE}/{activity['id']}/laps")).json()
    assert lap2["id"] > lap1["id"]

    history = (await client.get(f"{BASE}/{activity['id']}/laps")).json()
    assert history["activity"]["id"] == activity["id"]
    assert [lap["id"] for lap in history["laps"]] == [lap2["id"], lap1["id"]]

    deleted = await client.delete(f"{BASE}/{activity['id']}/laps/{lap1['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}
    history = (await client.get(f"{BASE}/{activity['id']}/laps")).json()
    assert [lap["id"] for lap in history["laps"]] == [lap2["id"]]

    gone = await client.delete(f"{BASE}/{activity['id']}")
    assert gone.status_code == 200
    assert gone.json() == {"success": True}

    missing = await client.get(f"{BASE}/{activity['id']}/laps")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Activity not found"


# -- List -----------------------------------------------------------------------

async def test_list_empty(client):
    response = await client.get(BASE)
    assert response.status_code == 200
    assert response.json() == []


async def test_list_newest_first_with_lap_counts(client):
    first = await _create(client, "First")
    second = await _create(client, "Second")
    await client.post(f"{BASE}/{first['id']}/laps")
    await client.post(f"{BASE}/{first['id']}/laps")

    items = (await client.get(BASE)).json()
    assert [item["id"] for item in items] == [second["id"], first["id"]]
    assert [item["lap_count"] for item in items] == [0, 2]


async def test_timestamps_use_plain_utc_format(client):
    activity = await _create(client)
    lap = (await client.post(f"{BASE}/{activity['id']}/laps")).json()
    for value in (activity["created_at"], lap["recorded_at"]):
        assert len(value) == 19
        assert value[10] == " "
        assert not value.endswith("Z")


# -- Create ---------------------------------------------------------------------

async def test_create_trims_name(client):
    activity = await _create(client, "  Swimming  ")
    assert activity["name"] == "Swimming"


@pytest.mark.parametrize("payload", [{"name": ""}, {"name": "   "}, {"name": None}, {}])
async def test_create_requires_name(client, payload):
    response = await client.post(BASE, json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Activity name is required"
    assert (await client.get(BASE)).json() == []


async def test_create_rejects_non_string_name(client):
    response = await client.post(BASE, json={"name": 42})
    assert response.status_code == 400
    assert isinstance(response.json()["error"], str)


async def test_create_rejects_malformed_body(client):
    response = await client.post(
        BASE, content=b"not json", headers={"content-type": "application/json"},
    )
    assert response.status_code == 400


# -- Laps -----------------------------------------------------------------------

async def test_record_lap_returns_201(client):
    activity = await _create(client)
    response = await client.post(f"{BASE}/{activity['id']}/laps")
    assert response.status_code == 201
    body = response.json()
    assert body["activity_id"] == activity["id"]
    assert set(body) == {"id", "activity_id", "recorded_at"}


async def test_record_lap_unknown_activity_is_404(client):
    response = await client.post(f"{BASE}/999/laps")
    assert response.status_code == 404
    assert response.json()["error"] == "Activity not found"


async def test_delete_lap_through_other_activity_is_404(client):
    a = await _create(client, "A")
    b = await _create(client, "B")
    lap = (await client.post(f"{BASE}/{a['id']}/laps")).json()

    response = await client.delete(f"{BASE}/{b['id']}/laps/{lap['id']}")
    assert response.status_code == 404
    assert response.json()["error"] == "Lap not found"

    history = (await client.get(f"{BASE}/{a['id']}/laps")).json()
    assert [entry["id"] for entry in history["laps"]] == [lap["id"]]


async def test_delete_missing_activity_is_404_twice(client):
    for _ in range(2):
        response = await client.delete(f"{BASE}/12345")
        assert response.status_code == 404


async def test_delete_activity_drops_it_from_list(client):
    keep = await _create(client, "Keep")
    doomed = await _create(client, "Doomed")
    await client.post(f"{BASE}/{doomed['id']}/laps")
    await client.delete(f"{BASE}/{doomed['id']}")

    items = (await client.get(BASE)).json()
    assert [item["id"] for item in items] == [keep["id"]]


# -- Invalid ids ----------------------------------------------------------------

@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("DELETE", f"{BASE}/abc"),
        ("POST", f"{BASE}/abc/laps"),
        ("GET", f"{BASE}/abc/laps"),
        ("DELETE", f"{BASE}/abc/laps/1"),
    ],
)
async def test_non_integer_activity_id_is_400(client, method, path):
    response = await client.request(method, path)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid id"


async def test_non_integer_lap_id_is_400(client):
    activity = await _create(client)
    response = await client.delete(f"{BASE}/{activity['id']}/laps/xyz")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid lapId"


# -- Server errors --------------------------------------------------------------

class _BrokenStore:
    def __init__(self, error: Exception):
        self.error = error

    async def list_activities(self):
        raise self.error


@pytest.fixture
async def broken_client():
    clients = []

    async def make(error: Exception) -> AsyncClient:
        app.dependency_overrides[get_store] = lambda: _BrokenStore(error)
        c = AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        )
        clients.append(c)
        return c

    yield make
    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()


async def test_database_error_is_500_without_details(broken_client):
    c = await broken_client(DatabaseError("query"))
    response = await c.get(BASE)
    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error", "code": "DATABASE_ERROR",
    }


async def test_unexpected_error_is_500(broken_client):
    c = await broken_client(RuntimeError("disk on fire"))
    response = await c.get(BASE)
    assert response.status_code == 500
    assert response.json()["error"] == "An unexpected error occurred"
    assert "disk" not in response.text


# -- Id range -------------------------------------------------------------------

HUGE = "99999999999999999999"


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("DELETE", f"{BASE}/{HUGE}"),
        ("POST", f"{BASE}/{HUGE}/laps"),
        ("GET", f"{BASE}/{HUGE}/laps"),
        ("DELETE", f"{BASE}/{2**31}/laps/1"),
    ],
)
async def test_activity_id_beyond_integer_column_is_400(client, method, path):
    response = await client.request(method, path)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid id"


async def test_lap_id_beyond_integer_column_is_400(client):
    activity = await _create(client)
    response = await client.delete(f"{BASE}/{activity['id']}/laps/{HUGE}")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid lapId"


@pytest.mark.parametrize("activity_id", [0, -1, 2**31 - 1])
async def test_in_range_unknown_id_is_404(client, activity_id):
    response = await client.get(f"{BASE}/{activity_id}/laps")
    assert response.status_code == 404


async def test_long_name_is_accepted(client):
    name = "x" * 500
    activity = await _create(client, name)
    assert activity["name"] == name
