import os
import sys
import textwrap

import pytest

# Config is initialized on import, so required variables are set at module level.
os.environ["TF_VAR_github_org"] = "test-org"
os.environ["TF_VAR_github_pat"] = "test-pat"
os.environ["TF_VAR_source_owner"] = "test-owner"
os.environ["ARM_SUBSCRIPTION_ID"] = "00000000-0000-0000-0000-000000000000"
os.environ["TF_VAR_subscription_id"] = "00000000-0000-0000-0000-000000000000"
os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def make_launcher(tmp_path):
    """Factory for a ScriptLauncher that runs a small Python script."""
    from services.launcher.services.script_runner import ScriptLauncher

    def _make(body: str) -> ScriptLauncher:
        script = tmp_path / "launch_stub.py"
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        return ScriptLauncher([sys.executable, str(script)], workdir=str(tmp_path))

    return _make


@pytest.fixture
def echo_script():
    return """
        import os
        import sys

        print("creating game", flush=True)
        print("args=" + ",".join(sys.argv[1:]), flush=True)
        print("AUTO_START_NEW_GAME=" + os.environ.get("AUTO_START_NEW_GAME", ""), flush=True)
        print("warming up", file=sys.stderr, flush=True)
    """


@pytest.fixture
def failing_script():
    return """
        import sys

        print("step one", flush=True)
        print("boom", file=sys.stderr, flush=True)
        sys.exit(3)
    """


@pytest.fixture
def slow_script():
    return """
        import time

        print("working", flush=True)
        time.sleep(1.0)
        print("done", flush=True)
    """


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from services.launcher.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def parse_events():
    """Split a text/event-stream body into (event, data) pairs."""
    return _parse_events


def _parse_events(body: str) -> list[tuple[str, str]]:
    events = []
    for block in body.split("\n\n"):
        if not block.strip():
            continue
        name = "message"
        data = []
        for line in block.split("\n"):
            if line.startswith("event: "):
                name = line[len("event: ") :]
            elif line.startswith("data: "):
                data.append(line[len("data: ") :])
        events.append((name, "\n".join(data)))
    return events


@pytest.fixture
def long_line_script():
    return """
        import sys

        sys.stdout.write("x" * (2 * 1024 * 1024) + "\\n")
        for i in range(2000):
            sys.stdout.write(f"line {i}\\n")
        sys.stdout.flush()
    """
