"""
End-to-end API tests against the FastAPI app with a faked Bencher API.
"""
import json

TESTBEDS = "/screens/console/projects/p1/testbeds"
ADD_TESTBED = "/console/projects/p1/testbeds/add"


def _mount(client, pathname=ADD_TESTBED):
    r = client.post("/forms", json={"pathname": pathname})
    assert r.status_code == 201, r.text
    return r.json()


# ---------------------------------------------------------------------------
# Health / navigation
# ---------------------------------------------------------------------------

class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_navigation(self, client):
        r = client.get("/navigation")
        assert r.status_code == 200
        entries = {e["resource"]: e for e in r.json()}
        assert set(entries) == {"projects", "testbeds", "branches", "reports"}
        assert "add" not in entries["reports"]["operations"]


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------

class TestScreens:
    def test_list_screen(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds", json=[
            {"name": "Linux Box", "slug": "linux-box"},
            {"name": "Mac Mini", "slug": "mac-mini"},
        ])
        r = client.get(TESTBEDS)
        assert r.status_code == 200
        data = r.json()
        assert data["resource"] == "testbeds"
        assert data["operation"] == "list"
        assert data["status"] == "ready"
        assert data["path_params"] == {"project_slug": "p1"}
        assert data["deck"] is None
        table = data["table"]
        assert table["title"] == "Testbeds"
        assert [b["kind"] for b in table["buttons"]] == ["add", "refresh"]
        assert [row["key"] for row in table["rows"]] == ["Linux Box", "Mac Mini"]
        assert table["rows"][0]["path"] == "/console/projects/p1/testbeds/linux-box"
        assert table["rows"][0]["cells"][0] == {"kind": "text", "value": "linux-box"}
        assert table["rows"][0]["cells"][1] == {"kind": None, "value": None}

    def test_view_screen(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds/linux-box", json={"name": "Linux Box", "slug": "linux-box"})
        r = client.get(TESTBEDS + "/linux-box")
        assert r.status_code == 200
        deck = r.json()["deck"]
        assert deck["title"] == "Linux Box"
        assert deck["back"] == "/console/projects/p1/testbeds"
        assert [c["value"] for c in deck["cards"]] == ["Linux Box", "linux-box"]

    def test_projects_list(self, client, fake_api):
        fake_api.add("GET", "/v0/projects", json=[{"name": "Bencher", "slug": "bencher"}])
        r = client.get("/screens/console/projects")
        assert r.status_code == 200
        assert r.json()["table"]["rows"][0]["path"] == "/console/projects/bencher"

    def test_fetch_failure_is_error_state(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds", status=500)
        r = client.get(TESTBEDS)
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "error"
        assert data["error"]["code"] == "FETCH_FAILED"
        assert data["table"]["rows"] == []

    def test_reload_keeps_identity(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds", json=[])
        first = client.get(TESTBEDS).json()
        second = client.get(TESTBEDS, params={"screen": first["id"]}).json()
        assert second["id"] == first["id"]
        assert second["stale"] is False

    def test_unknown_screen(self, client):
        r = client.get("/screens/console/projects/p1/alerts")
        assert r.status_code == 404
        assert r.json()["code"] == "SCREEN_NOT_FOUND"

    def test_unconfigured_operation(self, client):
        r = client.get("/screens/console/projects/p1/reports/add")
        assert r.status_code == 404
        assert r.json()["code"] == "CONFIGURATION_ABSENT"

    def test_plain_loads_keep_no_session(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds", json=[])
        for _ in range(10):
            assert client.get(TESTBEDS).status_code == 200
        assert len(client.app.state.screens) == 0

    def test_unmount(self, client, fake_api):
        fake_api.add("GET", "/v0/projects/p1/testbeds", json=[])
        screen_id = client.get(TESTBEDS, params={"screen": "tab-1"}).json()["id"]
        assert screen_id == "tab-1"
        assert len(client.app.state.screens) == 1
        assert client.delete(f"/screens/{screen_id}").status_code == 204
        r = client.delete(f"/screens/{screen_id}")
        assert r.status_code == 404
        assert r.json()["code"] == "SCREEN_SESSION_NOT_FOUND"


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

class TestForms:
    def test_mount(self, client):
        form = _mount(client)
        assert form["title"] == "Add Testbed"
        assert form["back"] == "/console/projects/p1/testbeds"
        fields = {f["key"]: f for f in form["fields"]}
        assert fields["project"]["kind"] == "fixed"
        assert fields["project"]["value"] == "p1"
        assert fields["name"]["validate"] is True
        assert fields["cpu"]["validate"] is False
        assert fields["cpu"]["nullify"] is True
        assert all(f["valid"] is None for f in form["fields"])

    def test_mount_non_add_pathname(self, client):
        r = client.post("/forms", json={"pathname": "/console/projects/p1/testbeds"})
        assert r.status_code == 404
        assert r.json()["code"] == "SCREEN_NOT_FOUND"

    def test_mount_unconfigured_add(self, client):
        r = client.post("/forms", json={"pathname": "/console/projects/p1/reports/add"})
        assert r.status_code == 404
        assert r.json()["code"] == "CONFIGURATION_ABSENT"

    def test_mount_requires_pathname(self, client):
        r = client.post("/forms", json={"pathname": "   "})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_change_field(self, client):
        form = _mount(client)
        r = client.patch(f"/forms/{form['id']}/fields/name", json={"value": "Linux Box"})
        assert r.status_code == 200
        assert r.json()["value"] == "Linux Box"
        assert r.json()["valid"] is True

        r = client.patch(f"/forms/{form['id']}/fields/name", json={"value": ""})
        assert r.json()["valid"] is False

    def test_fixed_field_ignores_input(self, client):
        form = _mount(client)
        r = client.patch(f"/forms/{form['id']}/fields/project", json={"value": "other"})
        assert r.status_code == 200
        assert r.json()["value"] == "p1"

    def test_unknown_field(self, client):
        form = _mount(client)
        r = client.patch(f"/forms/{form['id']}/fields/nope", json={"value": "x"})
        assert r.status_code == 404
        assert r.json()["code"] == "FIELD_NOT_FOUND"

    def test_submit_success(self, client, fake_api):
        fake_api.add("POST", "/v0/testbeds", status=201, json={"uuid": "u1", "name": "Linux Box"})
        form = _mount(client)
        client.patch(f"/forms/{form['id']}/fields/name", json={"value": "Linux Box"})

        r = client.post(f"/forms/{form['id']}/submit")

        assert r.status_code == 201
        data = r.json()
        assert data["status"] == "submitted"
        assert data["payload"] == {"project": "p1", "name": "Linux Box"}
        assert data["navigate_to"] == "/console/projects/p1/testbeds"
        assert data["created"]["uuid"] == "u1"
        [request] = fake_api.posts()
        assert json.loads(request.content) == {"project": "p1", "name": "Linux Box"}

    def test_submit_invalid(self, client, fake_api):
        form = _mount(client)
        r = client.post(f"/forms/{form['id']}/submit")
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert body["details"]["field"] == "name"
        assert fake_api.posts() == []

    def test_submit_failure_keeps_form(self, client, fake_api):
        fake_api.add("POST", "/v0/testbeds", status=409, json={"error": "exists"})
        form = _mount(client)
        client.patch(f"/forms/{form['id']}/fields/name", json={"value": "Linux Box"})

        r = client.post(f"/forms/{form['id']}/submit")

        assert r.status_code == 502
        assert r.json()["code"] == "SUBMIT_FAILED"
        assert r.json()["details"]["status_code"] == 409
        fields = {f["key"]: f for f in client.get(f"/forms/{form['id']}").json()["fields"]}
        assert fields["name"]["value"] == "Linux Box"

    def test_project_checkbox(self, client, fake_api):
        fake_api.add("POST", "/v0/projects", status=201, json={"slug": "bencher"})
        form = _mount(client, "/console/projects/add")
        client.patch(f"/forms/{form['id']}/fields/name", json={"value": "Bencher"})
        client.patch(f"/forms/{form['id']}/fields/public", json={"value": True})

        r = client.post(f"/forms/{form['id']}/submit")

        assert r.status_code == 201
        assert r.json()["payload"] == {"name": "Bencher", "public": True}
        assert r.json()["navigate_to"] == "/console/projects"
        fields = {f["key"]: f for f in r.json()["form"]["fields"]}
        assert fields["name"]["value"] == ""

    def test_unmount(self, client):
        form = _mount(client)
        assert client.delete(f"/forms/{form['id']}").status_code == 204
        r = client.get(f"/forms/{form['id']}")
        assert r.status_code == 404
        assert r.json()["code"] == "FORM_NOT_FOUND"


# ---------------------------------------------------------------------------
# Perf
# ---------------------------------------------------------------------------

class TestPerf:
    def test_latency(self, client, fake_api):
        fake_api.add("GET", "/v0/metrics", json=[
            {
                "date_time": "2026-01-01T00:00:00Z",
                "metrics": {"bench_a": {"latency": {"duration": {"secs": 1, "nanos": 5}}}},
            },
        ])
        r = client.get("/perf/latency", params={"benchmark": "bench_a"})
        assert r.status_code == 200
        assert r.json()["points"] == [["2026-01-01T00:00:00Z", 1_000_000_005]]
        assert r.json()["label"] == "↑ Nanoseconds"
        assert r.json()["status"] == "ready"
        assert r.json()["error"] is None

    def test_latency_fetch_failure_is_error_state(self, client, fake_api):
        fake_api.add("GET", "/v0/metrics", status=500)
        r = client.get("/perf/latency", params={"benchmark": "bench_a"})
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "error"
        assert data["points"] == []
        assert data["error"]["code"] == "FETCH_FAILED"
        assert data["error"]["details"]["status_code"] == 500

    def test_latency_malformed_body_is_error_state(self, client, fake_api):
        fake_api.add("GET", "/v0/metrics", content=b"<html>gateway</html>")
        r = client.get("/perf/latency", params={"benchmark": "bench_a"})
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "error"
        assert data["points"] == []
        assert data["error"]["code"] == "MALFORMED_RESPONSE"

    def test_latency_requires_benchmark(self, client):
        r = client.get("/perf/latency")
        assert r.status_code == 422

    def test_plot(self, client):
        perf = {
            "kind": "throughput",
            "results": [
                {"metrics": [{"start_time": "2026-01-01T00:00:00+00:00", "iteration": 3, "metric": {"value": 2.5}}]},
                {"metrics": []},
            ],
        }
        r = client.post("/perf/plot", json={"perf": perf, "active": [True, False]})
        assert r.status_code == 200
        data = r.json()
        assert data["label"] == "↑ Events per Nanoseconds"
        assert data["lines"] == [
            {"index": 0, "color": "#4e79a7", "points": [["2026-01-01T00:00:03+00:00", 2.5]]},
        ]
