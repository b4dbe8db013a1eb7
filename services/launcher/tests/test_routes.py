"""
Where: services/launcher/tests/test_routes.py
What: HTTP behavior of the launcher endpoints.
Why: Status codes and JSON shapes are what the page relies on.
"""

import asyncio

import httpx
import pytest

from services.launcher.config import DEFAULT_REQUIRED_ENV_VARS
from services.launcher.core.run_state import RunGuard, RunState
from services.launcher.services.script_runner import ScriptLauncher


def test_health_reports_idle(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "run_state": "idle"}
    assert "X-Request-Id" in response.headers


def test_index_serves_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "api/launch-stream" in response.text


def test_index_missing_file_returns_500(client, monkeypatch, tmp_path):
    from services.launcher.config import config

    monkeypatch.setattr(config, "STATIC_DIR", str(tmp_path))
    response = client.get("/")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to load page"}


def test_env_status_lists_every_required_variable(client, monkeypatch):
    monkeypatch.delenv("TF_VAR_source_owner")
    response = client.get("/api/env-status")

    assert response.status_code == 200
    body = response.json()
    assert [item["variable"] for item in body] == DEFAULT_REQUIRED_ENV_VARS
    by_name = {item["variable"]: item["is_set"] for item in body}
    assert by_name["TF_VAR_source_owner"] is False
    assert by_name["TF_VAR_github_pat"] is True


def test_launch_success_returns_output(client, make_launcher, echo_script):
    launcher = make_launcher(echo_script)
    client.app.state.script_launcher = launcher

    response = client.post("/api/launch", json={"game_prefix": "fluffy-dog"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Game launch completed successfully"
    assert "args=fluffy-dog" in body["output"]
    assert launcher.spawn_count == 1
    assert client.get("/health").json()["run_state"] == "idle"


def test_launch_accepts_name_prefix_alias(client, make_launcher, echo_script):
    client.app.state.script_launcher = make_launcher(echo_script)

    response = client.post("/api/launch", json={"namePrefix": "fluffy-dog"})

    assert response.status_code == 200
    assert "args=fluffy-dog" in response.json()["output"]


def test_launch_without_body_passes_no_prefix(client, make_launcher, echo_script):
    client.app.state.script_launcher = make_launcher(echo_script)

    response = client.post("/api/launch")

    assert response.status_code == 200
    assert "args=\n" in response.json()["output"]


def test_launch_failure_returns_500_with_output(client, make_launcher, failing_script):
    client.app.state.script_launcher = make_launcher(failing_script)

    response = client.post("/api/launch")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Script execution failed: exit status 3"
    assert "boom" in body["output"]
    assert client.get("/health").json()["run_state"] == "idle"


def test_launch_missing_variables_returns_400_without_spawn(
    client, monkeypatch, make_launcher, echo_script
):
    launcher = make_launcher(echo_script)
    client.app.state.script_launcher = launcher
    monkeypatch.delenv("TF_VAR_github_pat")

    response = client.post("/api/launch")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["missing"] == ["TF_VAR_github_pat"]
    assert "TF_VAR_github_pat" in body["message"]
    assert launcher.spawn_count == 0
    assert client.app.state.run_guard.state is RunState.IDLE


def test_launch_while_running_returns_409(client, make_launcher, echo_script):
    launcher = make_launcher(echo_script)
    client.app.state.script_launcher = launcher
    client.app.state.run_guard.acquire()

    try:
        response = client.post("/api/launch")
        stream_response = client.post("/api/launch-stream")
    finally:
        client.app.state.run_guard.release()

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "A game launch is already in progress. Please wait for it to complete.",
    }
    assert stream_response.status_code == 409
    assert launcher.spawn_count == 0


def test_launch_spawn_failure_returns_500(client, tmp_path):
    client.app.state.script_launcher = ScriptLauncher([str(tmp_path / "missing-binary")])

    response = client.post("/api/launch")

    assert response.status_code == 500
    assert response.json()["message"].startswith("Failed to start script:")
    assert "output" not in response.json()
    assert client.get("/health").json()["run_state"] == "idle"


@pytest.mark.asyncio
async def test_concurrent_launches_admit_exactly_one(make_launcher, slow_script):
    from services.launcher.main import app

    launcher = make_launcher(slow_script)
    app.state.run_guard = RunGuard()
    app.state.script_launcher = launcher

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        responses = await asyncio.gather(
            client.post("/api/launch"),
            client.post("/api/launch"),
        )

    assert sorted(r.status_code for r in responses) == [200, 409]
    assert launcher.spawn_count == 1
    assert app.state.run_guard.state is RunState.IDLE



@pytest.mark.parametrize("endpoint", ["/api/launch", "/api/launch-stream"])
@pytest.mark.parametrize(
    "body",
    [{"game_prefix": "--work-dir=/x"}, {"game_prefix": "-h"}, {"namePrefix": "--seed=1"}],
)
def test_launch_rejects_option_like_prefix(client, make_launcher, echo_script, endpoint, body):
    launcher = make_launcher(echo_script)
    client.app.state.script_launcher = launcher

    response = client.post(endpoint, json=body)

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert launcher.spawn_count == 0
    assert client.app.state.run_guard.state is RunState.IDLE
