"""GitHub releases adapter - HTTP client for update checks."""

import requests

API_BASE = "https://api.github.com"
USER_AGENT = "SoftDo-App"


class GitHubReleaseFeed:
    """
    GitHub releases adapter.

    Implements ReleaseFeed protocol. No version logic - just I/O.
    """

    def __init__(self, repo: str, session: requests.Session | None = None, timeout: float = 10.0):
        self.repo = repo
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def releases_page(self) -> str:
        return f"https://github.com/{self.repo}/releases/latest"

    def latest_release(self) -> dict | None:
        """Fetch the latest release. Raises requests.RequestException on failure."""
        resp = self._session.get(
            f"{API_BASE}/repos/{self.repo}/releases/latest",
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/vnd.github+json",
            },
            timeout=self.timeout,
        )
        if resp.status_code == 404:
            # Repository has no published releases yet.
            return None
        resp.raise_for_status()
        data = resp.json()
        return data if isinstance(data, dict) else None
