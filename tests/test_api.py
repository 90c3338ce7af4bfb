"""Integration tests for the FastAPI app, driven through TestClient."""
import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import TODAY, feed_payload, raw_neo
from neowatch.main import create_app
from neowatch.session import DashboardSession

FEED = {
    "2026-10-19": [
        raw_neo("1", name="(2026 AA)", miss_km=9e7, velocity_km_s=10.0),
        raw_neo("2", name="433 Eros", miss_km=1e6, velocity_km_s=20.0),
    ],
    "2026-10-20": [
        raw_neo("3", name="(2026 CC)", hazardous=True, miss_km=4e7, velocity_km_s=30.0, approach_date="2026-10-20"),
    ],
}


@pytest.fixture
def feed_handler():
    state = {"fail": False}

    def handler(request):
        if request.method == "HEAD":
            return httpx.Response(200)
        if state["fail"]:
            return httpx.Response(503, text="Service Unavailable")
        return httpx.Response(200, json=feed_payload(FEED))

    handler.state = state
    return handler


@pytest.fixture
def session(settings, make_client, feed_handler):
    return DashboardSession(settings, client=make_client(feed_handler), today=lambda: TODAY)


@pytest.fixture
def client(settings, session):
    app = create_app(settings, session=session, autostart=False)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def loaded(client):
    resp = client.post("/api/neos/refresh")
    assert resp.status_code == 200
    return client


class TestHealth:

    def test_initial(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["api"] == {"status": "checking", "latency_ms": None, "grade": "unknown"}

    def test_after_fetch(self, loaded):
        api = loaded.get("/api/health").json()["api"]
        assert api["status"] == "online"
        assert isinstance(api["latency_ms"], int)
        assert api["grade"] in ("good", "fair", "poor")


class TestNeos:

    def test_empty_before_fetch(self, client):
        body = client.get("/api/neos").json()
        assert body["status"] == "idle"
        assert body["items"] == []
        assert body["sort_key"] == "distance"
        assert body["sort_direction"] == "asc"

    def test_refresh_and_default_order(self, loaded):
        body = loaded.get("/api/neos").json()
        assert body["status"] == "ready"
        assert body["total"] == 3
        assert [i["id"] for i in body["items"]] == ["2", "3", "1"]
        assert body["start_date"] == "2026-10-19"
        assert body["end_date"] == "2026-10-26"

    def test_row_fields(self, loaded):
        rows = {i["id"]: i for i in loaded.get("/api/neos").json()["items"]}
        assert rows["1"]["risk"] == "Low"
        assert rows["2"]["risk"] == "Medium"
        assert rows["3"]["risk"] == "High"
        assert rows["1"]["display_name"] == "2026 AA"
        assert rows["2"]["velocity_km_h"] == pytest.approx(72_000.0)

    def test_query(self, loaded):
        body = loaded.get("/api/neos", params={"q": "EROS"}).json()
        assert body["count"] == 1
        assert body["total"] == 3
        assert body["items"][0]["id"] == "2"

    def test_sort_toggle(self, loaded):
        body = loaded.post("/api/neos/sort/distance").json()
        assert body["sort_direction"] == "desc"
        assert [i["id"] for i in body["items"]] == ["1", "3", "2"]
        body = loaded.post("/api/neos/sort/velocity").json()
        assert body["sort_key"] == "velocity"
        assert body["sort_direction"] == "asc"
        assert [i["id"] for i in body["items"]] == ["1", "2", "3"]

    def test_sort_by_risk(self, loaded):
        body = loaded.post("/api/neos/sort/risk").json()
        assert [i["risk"] for i in body["items"]] == ["High", "Medium", "Low"]

    def test_unknown_sort_key(self, client):
        assert client.post("/api/neos/sort/colour").status_code == 422

    def test_refresh_failure_keeps_records(self, loaded, feed_handler):
        feed_handler.state["fail"] = True
        resp = loaded.post("/api/neos/refresh")
        assert resp.status_code == 502
        body = loaded.get("/api/neos").json()
        assert body["status"] == "error"
        assert body["total"] == 3
        assert loaded.get("/api/health").json()["api"]["status"] == "offline"

    def test_refresh_with_null_date_entry(self, settings, make_client):
        def handler(request):
            return httpx.Response(200, json={"near_earth_objects": {"2026-10-19": None}})

        session = DashboardSession(settings, client=make_client(handler), today=lambda: TODAY)
        with TestClient(create_app(settings, session=session, autostart=False)) as c:
            assert c.post("/api/neos/refresh").status_code == 502
            assert c.get("/api/neos").json()["status"] == "error"

    def test_refresh_while_busy(self, client, session):
        session._busy = True
        assert client.post("/api/neos/refresh").status_code == 409


class TestReport:

    def test_csv_download(self, loaded):
        resp = loaded.get("/api/neos/report.csv")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/csv; charset=utf-8"
        assert resp.headers["content-disposition"] == 'attachment; filename="neo_report_2026-10-19.csv"'
        lines = resp.text.splitlines()
        assert lines[0].startswith("Object Designation,")
        assert [line.split(",")[0] for line in lines[1:]] == ["433 Eros", "(2026 CC)", "(2026 AA)"]

    def test_csv_follows_filter(self, loaded):
        lines = loaded.get("/api/neos/report.csv", params={"q": "2026"}).text.splitlines()
        assert len(lines) == 3

    def test_csv_empty_view(self, client):
        assert client.get("/api/neos/report.csv").text.count("\n") == 1


class TestStats:

    def test_stats(self, loaded):
        body = loaded.get("/api/stats").json()
        assert body["total"] == 3
        assert body["hazardous"] == 1
        assert body["nearest_approach_mkm"] == 1.0
        assert body["avg_velocity_km_h"] == 72_000.0
        assert body["tiers"] == {"High": 1, "Medium": 1, "Low": 1}
        assert "1 hazardous objects" in body["alert"]


class TestSimulationRest:

    def test_frame(self, client):
        body = client.get("/api/simulation/frame").json()
        names = [b["name"] for b in body["bodies"]]
        assert names[:8] == ["Mercury", "Venus", "Earth", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune"]
        assert len(names) == 8 + 15
        assert body["animating"] is True

    def test_pause(self, client):
        body = client.post("/api/simulation/animating", json={"animating": False}).json()
        assert body["animating"] is False

    def test_reset_camera(self, client):
        assert client.post("/api/simulation/reset-camera").json()["camera_resets"] == 1

    def test_regenerate_is_seeded(self, client):
        a = client.post("/api/simulation/regenerate", json={"seed": 4}).json()["bodies"]
        b = client.post("/api/simulation/regenerate", json={"seed": 4}).json()["bodies"]
        assert [x["color"] for x in a] == [x["color"] for x in b]

    def test_select_body(self, client):
        body = client.get("/api/simulation/bodies/Sun").json()
        assert body == {"name": "Sun", "details": {"type": "Star", "temperature": "5,500°C"}}

    def test_select_unknown_body(self, client):
        assert client.get("/api/simulation/bodies/Pluto").status_code == 404

    def test_orbits(self, client):
        orbits = client.get("/api/simulation/orbits").json()
        assert len(orbits) == 8
        assert len(orbits[0]["points"]) == 129

    def test_particles(self, client):
        a = client.get("/api/simulation/particles", params={"seed": 8}).json()
        b = client.get("/api/simulation/particles", params={"seed": 8}).json()
        assert len(a) == 50
        assert a == b
        assert {p["kind"] for p in a} == {"particle"}
        assert len(client.get("/api/simulation/particles", params={"count": 5}).json()) == 5

    def test_particle_count_limit(self, client):
        assert client.get("/api/simulation/particles", params={"count": 5000}).status_code == 422


class TestSimulationWebSocket:

    def _receive_until(self, ws, msg_type):
        for _ in range(50):
            msg = ws.receive_json()
            if msg["type"] == msg_type:
                return msg
        raise AssertionError(f"no {msg_type} message received")

    def test_frames_and_selection(self, client):
        with client.websocket_connect("/ws/simulation") as ws:
            frame = self._receive_until(ws, "frame")
            assert len(frame["bodies"]) == 23
            ws.send_json({"select": "Earth"})
            selection = self._receive_until(ws, "selection")
            assert selection["name"] == "Earth"
            assert selection["details"]["type"] == "Planet"

    def test_unknown_selection(self, client):
        with client.websocket_connect("/ws/simulation") as ws:
            ws.send_json({"select": "Pluto"})
            error = self._receive_until(ws, "error")
            assert "Pluto" in error["message"]

    def test_malformed_messages_are_skipped(self, client):
        with client.websocket_connect("/ws/simulation") as ws:
            ws.send_text("not json")
            ws.send_json([1])
            ws.send_json(5)
            ws.send_json(None)
            ws.send_json({"select": "Sun"})
            selection = self._receive_until(ws, "selection")
            assert selection["name"] == "Sun"

    def test_pause_over_websocket(self, client, session):
        with client.websocket_connect("/ws/simulation") as ws:
            ws.send_json({"animating": False, "reset_camera": True})
            ws.send_json({"select": "Sun"})
            self._receive_until(ws, "selection")
        assert session.simulator.animating is False
        assert session.simulator.camera_resets == 1
