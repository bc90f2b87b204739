"""Comment on the originating pull request through the GitHub REST API."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from skyreport import __version__, logger
from skyreport.errors import NetworkError

if TYPE_CHECKING:
    from skyreport.core.config import Settings


class GitHubReview:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.timeout = timeout

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.settings.require_token()}",
                "User-Agent": f"skyreport/{__version__}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    def comment(self, pull_request: int, body: str) -> str | None:
        """Post *body* on *pull_request*; return the comment URL if GitHub sent one."""
        s = self.settings
        path = f"/repos/{s.org}/{s.repo}/issues/{pull_request}/comments"
        logger.info("Adding comment to %s/%s#%d", s.org, s.repo, pull_request)
        try:
            with self._client() as client:
                response = client.post(path, json={"body": body})
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"GitHub rejected the comment on #{pull_request}: HTTP {exc.response.status_code}"
            raise NetworkError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"could not reach GitHub to comment on #{pull_request}: {exc}"
            raise NetworkError(msg) from exc
        logger.info("Added comment")
        try:
            url = response.json().get("html_url")
        except ValueError:
            return None
        return url if isinstance(url, str) else None


__all__ = ["GitHubReview"]
