from __future__ import annotations

import httpx
import pytest

from tools.newgame.core.credentials import CredentialChecker
from tools.newgame.core.errors import CredentialError
from tools.newgame.core.runner import RunnerError


def _github(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


def test_check_azure_returns_subscription_name(fake_runner) -> None:
    fake_runner.stdout["az account show"] = "Sandbox Subscription\n"
    checker = CredentialChecker(fake_runner)

    name = checker.check_azure("sub-123")

    assert name == "Sandbox Subscription"
    assert fake_runner.commands[0] == (["az", "account", "set", "--subscription", "sub-123"], True)
    assert fake_runner.commands[1][0][:3] == ["az", "account", "show"]


def test_check_azure_fails_when_subscription_cannot_be_set(fake_runner) -> None:
    fake_runner.returncodes["az account set"] = 1
    checker = CredentialChecker(fake_runner)

    with pytest.raises(CredentialError, match="Failed to set Azure subscription to sub-123") as exc:
        checker.check_azure("sub-123")
    assert exc.value.check == "azure"
    assert len(fake_runner.commands) == 1


def test_check_azure_fails_when_az_is_missing(fake_runner, monkeypatch) -> None:
    def _raise(*args, **kwargs):
        raise RunnerError("failed to execute az: not found")

    monkeypatch.setattr(fake_runner, "run", _raise)

    with pytest.raises(CredentialError):
        CredentialChecker(fake_runner).check_azure("sub-123")


def test_check_github_returns_login(fake_runner) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"login": "octocat"})

    checker = CredentialChecker(fake_runner, transport=_github(handler))

    assert checker.check_github("ghp_test") == "octocat"
    assert seen == {"url": "https://api.github.com/user", "auth": "token ghp_test"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"message": "Bad credentials"}),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, text="not json"),
    ],
)
def test_check_github_rejects_invalid_token(fake_runner, response) -> None:
    checker = CredentialChecker(fake_runner, transport=_github(lambda request: response))

    with pytest.raises(CredentialError, match="The GitHub PAT is not valid") as exc:
        checker.check_github("bad")
    assert exc.value.check == "github"


def test_check_github_network_failure(fake_runner) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    checker = CredentialChecker(fake_runner, transport=_github(handler))

    with pytest.raises(CredentialError):
        checker.check_github("ghp_test")
