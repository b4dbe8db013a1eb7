"""Live checks of the Azure subscription and GitHub token."""

from __future__ import annotations

import httpx

from tools.newgame.core.errors import CredentialError
from tools.newgame.core.runner import CommandRunner, RunnerError

GITHUB_API_URL = "https://api.github.com"


class CredentialChecker:
    """Read-only verification calls made before any side effect."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        github_api_url: str = GITHUB_API_URL,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.runner = runner
        self.github_api_url = github_api_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    def check_azure(self, subscription_id: str) -> str:
        """Select the subscription and return its display name."""
        try:
            selected = self.runner.run(
                ["az", "account", "set", "--subscription", subscription_id],
                capture_output=True,
                run_in_dry_run=True,
            )
        except RunnerError as exc:
            raise CredentialError("azure", f"Failed to set Azure subscription: {exc}") from exc
        if not selected.ok:
            raise CredentialError(
                "azure", f"Failed to set Azure subscription to {subscription_id}"
            )

        shown = self.runner.run(
            ["az", "account", "show", "--query", "name", "--output", "tsv"],
            capture_output=True,
            run_in_dry_run=True,
        )
        return shown.stdout.strip() if shown.ok else ""

    def check_github(self, token: str) -> str:
        """Authenticate the token and return the GitHub login."""
        try:
            with httpx.Client(transport=self._transport, timeout=self._timeout) as client:
                response = client.get(
                    f"{self.github_api_url}/user",
                    headers={
                        "Authorization": f"token {token}",
                        "Accept": "application/vnd.github+json",
                    },
                )
        except httpx.HTTPError as exc:
            raise CredentialError("github", f"The GitHub PAT is not valid: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        login = body.get("login") if isinstance(body, dict) else None
        if not login:
            raise CredentialError("github", "The GitHub PAT is not valid")
        return str(login)
