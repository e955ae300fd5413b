from __future__ import annotations

from datetime import datetime
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.app import create_app
from hentrack.core.config import Settings
from hentrack.repositories.memory_storage import MemoryStore
from hentrack.services.flock_store import FlockStore

NOW = datetime(2024, 6, 12, 10, 0)


@pytest.fixture()
def client(tmp_path):
    settings = Settings(
        app_env="test",
        debug_mode=False,
        log_level="WARNING",
        storage_backend="memory",
        data_file=tmp_path / "data.json",
        database_url="",
        save_debounce_seconds=0.0,
    )
    store = FlockStore(MemoryStore(), debounce_seconds=0, clock=lambda: NOW)
    with TestClient(create_app(store=store, settings=settings)) as c:
        yield c


def _add_hen(client, **payload):
    body = {"name": "Daisy", "breed": "Orpington", "birth_date": "2022-01-01"}
    body.update(payload)
    resp = client.post("/hens", json=body)
    assert resp.status_code == 201
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "storage": "memory"}


def test_create_and_fetch_hen(client):
    hen = _add_hen(client, weight="2,4")
    assert hen["age"] == 2
    assert hen["can_breed"] is True
    assert hen["weight"] == 2.4
    assert hen["gender"] == "Hen"

    resp = client.get(f"/hens/{hen['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Daisy"


def test_invalid_hen_form_is_rejected(client):
    resp = client.post("/hens", json={"breed": "Orpington"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "name is required"


def test_unknown_ids_return_404(client):
    assert client.get("/hens/missing").status_code == 404
    assert client.get("/hens/missing").json()["detail"] == "Hen not found"
    assert client.delete("/notes/missing").status_code == 404
    assert client.post("/incubations/missing/candling", json={"egg_number": 1}).status_code == 404


def test_filter_hens_by_gender(client):
    _add_hen(client)
    _add_hen(client, name="Rex", gender="Rooster")
    resp = client.get("/hens", params={"gender": "rooster"})
    assert [h["name"] for h in resp.json()["hens"]] == ["Rex"]
    assert client.get("/hens", params={"gender": "dragon"}).status_code == 400


def test_update_hen(client):
    hen = _add_hen(client)
    resp = client.put(f"/hens/{hen['id']}", json={"breeding_status": "Retired"})
    assert resp.status_code == 200
    assert resp.json()["breeding_status"] == "Retired"
    assert resp.json()["can_breed"] is False
    assert resp.json()["name"] == "Daisy"


def test_notes_filters(client):
    hen = _add_hen(client)
    client.post("/notes", json={"title": "Today", "content": "eggs", "hen_id": hen["id"], "tags": ["eggs"]})
    client.post("/notes", json={"title": "Old", "content": "molt", "hen_id": hen["id"], "date": "2024-01-02"})

    today = client.get("/notes", params={"date_filter": "today"}).json()["notes"]
    assert [n["title"] for n in today] == ["Today"]
    assert today[0]["hashtags"] == ["#eggs"]

    found = client.get("/notes", params={"search": "MOLT"}).json()["notes"]
    assert [n["title"] for n in found] == ["Old"]


def test_delete_hen_cascades(client):
    hen = _add_hen(client)
    rooster = _add_hen(client, name="Rex", gender="Rooster")
    client.post("/notes", json={"title": "n", "content": "c", "hen_id": hen["id"]})
    client.post("/photos", json={"hen_id": hen["id"], "caption": "portrait"})
    client.post("/breeding", json={"hen_id": hen["id"], "rooster_id": rooster["id"]})

    assert client.delete(f"/hens/{hen['id']}").json() == {"ok": True}

    assert client.get("/notes").json()["notes"] == []
    assert client.get("/photos").json()["photos"] == []
    assert client.get("/breeding").json()["records"] == []
    assert [h["name"] for h in client.get("/hens").json()["hens"]] == ["Rex"]


def test_incubation_flow(client):
    hen = _add_hen(client)
    rooster = _add_hen(client, name="Rex", gender="Rooster")
    breeding = client.post(
        "/breeding",
        json={"hen_id": hen["id"], "rooster_id": rooster["id"], "success_rate": 0.8, "eggs_collected": 10},
    ).json()
    assert breeding["success_rate_percentage"] == "80%"

    resp = client.post(
        "/incubations",
        json={"breeding_record_id": breeding["id"], "start_date": "2024-06-01", "eggs_count": 10},
    )
    assert resp.status_code == 201
    incubation = resp.json()
    assert incubation["expected_hatch_date"] == "2024-06-22T00:00:00"
    assert incubation["days_until_hatch"] == 9
    assert incubation["is_overdue"] is False

    resp = client.post(
        f"/incubations/{incubation['id']}/candling",
        json={"egg_number": 1, "is_fertile": True, "development_stage": "Day 8-14"},
    )
    assert resp.status_code == 201
    assert resp.json()["fertile_eggs"] == 1

    client.post("/hatchings", json={"incubation_record_id": incubation["id"], "chicks_count": 8, "healthy_chicks": 7})

    detail = client.get(f"/incubations/{incubation['id']}").json()
    assert len(detail["candling_results"]) == 1
    assert [h["chicks_count"] for h in detail["hatchings"]] == [8]

    active = client.get("/incubations", params={"active": True}).json()["incubations"]
    assert [i["id"] for i in active] == [incubation["id"]]

    record = client.get(f"/breeding/{breeding['id']}").json()
    assert [i["id"] for i in record["incubations"]] == [incubation["id"]]

    stats = client.get("/breeding/statistics").json()
    assert stats["total_breedings"] == 1
    assert stats["successful_breedings"] == 1
    assert stats["total_chicks_hatched"] == 8


def test_pedigree_and_inbreeding(client):
    granny = _add_hen(client, name="Granny")
    mother = _add_hen(client, name="Mum", parent_hen_id=granny["id"])
    father = _add_hen(client, name="Dad", gender="Rooster")
    chick = _add_hen(client, name="Chick", parent_hen_id=mother["id"], parent_rooster_id=father["id"])

    ancestors = client.get(f"/hens/{chick['id']}/pedigree").json()["ancestors"]
    assert [a["name"] for a in ancestors] == ["Mum", "Granny"]

    # neither parent has a recorded father, which counts as a shared one
    coefficient = client.get(f"/hens/{chick['id']}/inbreeding").json()["coefficient"]
    assert coefficient == 0.25


def test_dashboard_and_tip_feedback(client):
    _add_hen(client)
    _add_hen(client, name="Rex", gender="Rooster")

    board = client.get("/dashboard").json()
    assert board["summary"]["total_hens"] == 1
    assert board["summary"]["total_roosters"] == 1
    assert board["summary"]["hatching_success_percentage"] == "0%"
    assert board["tip"]["text"]
    assert board["tip"]["is_useful"] is None

    tip = client.post("/dashboard/tip/feedback", json={"useful": True}).json()
    assert tip["is_useful"] is True
    assert tip["id"] == board["tip"]["id"]


def test_export_counter(client):
    hen = _add_hen(client)
    client.post(f"/hens/{hen['id']}/export")
    info = client.post("/breeding/export").json()
    assert info["total_exports"] == 2
    assert info["last_export_date"] == "2024-06-12T10:00:00"
    assert client.get("/dashboard").json()["export_info"]["total_exports"] == 2


def test_display_tables(client):
    tables = client.get("/display").json()
    assert {"label": "Rooster", "icon": "🐓", "color": None} in tables["gender"]
    assert len(tables["note_type"]) == 9


def _post_raw(client, url: str, body: str):
    # non-finite literals are valid for Python's json module but not for strict encoders
    return client.post(url, content=body.encode("utf-8"), headers={"Content-Type": "application/json"})


def test_non_finite_numbers_are_dropped(client):
    resp = _post_raw(client, "/hens", '{"name": "Daisy", "breed": "Orpington", "weight": NaN}')
    assert resp.status_code == 201
    assert resp.json()["weight"] is None

    rooster = _add_hen(client, name="Rex", gender="Rooster")
    hen_id = resp.json()["id"]
    resp = _post_raw(
        client,
        "/breeding",
        '{"hen_id": "%s", "rooster_id": "%s", "success_rate": NaN}' % (hen_id, rooster["id"]),
    )
    assert resp.status_code == 201
    assert resp.json()["success_rate"] is None

    resp = _post_raw(
        client,
        "/incubations",
        '{"breeding_record_id": "%s", "eggs_count": 6, "temperature": Infinity, "humidity": -Infinity}'
        % resp.json()["id"],
    )
    assert resp.status_code == 201
    assert resp.json()["temperature"] is None
    assert resp.json()["humidity"] is None

    assert client.get("/hens").status_code == 200
    assert client.get("/dashboard").status_code == 200
    assert client.get("/incubations").status_code == 200


def test_non_list_tags_are_rejected(client):
    resp = client.post("/notes", json={"title": "t", "content": "c", "hen_id": "h", "tags": 5})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "tags must be a list or a comma-separated string"
    assert client.get("/notes").json()["notes"] == []

    resp = client.post(
        "/hatchings", json={"incubation_record_id": "i", "chicks_count": 1, "healthy_chicks": 1, "chick_ids": 7}
    )
    assert resp.status_code == 400
