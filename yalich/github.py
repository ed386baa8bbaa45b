"""GitHub client used as the license fallback for registry packages."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import requests

from yalich._registries.utils import DEFAULT_TIMEOUT, get_json, optional_str
from yalich.exceptions import SourceHostError
from yalich.http_client import get_auth_headers
from yalich.logging_config import logger

GITHUB_API_BASE = "https://api.github.com/repos"
GITHUB_HOST_MARKER = "github.com"


@dataclass
class RepoRecord:
    full_name: str
    html_url: str
    license: Optional[str] = None


class GitHubClient:
    """
    Client for the GitHub repository API.

    Endpoint: https://api.github.com/repos/<owner>/<repo>

    An optional token is sent only on GitHub requests; the registries
    never see it.
    """

    def __init__(
        self, session: requests.Session, token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self._session = session
        self._token = token
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "github.com"

    def repo(self, owner: str, repo: str) -> RepoRecord:
        """
        Fetch repository metadata.

        Args:
            owner: Repository owner (user or organisation)
            repo: Repository name

        Returns:
            RepoRecord with the license name GitHub detected, if any

        Raises:
            SourceHostError: If the request fails or the response is malformed
        """
        url = f"{GITHUB_API_BASE}/{owner}/{repo}"
        subject = f"GitHub repository '{owner}/{repo}'"
        headers = get_auth_headers(self._token)

        logger.debug(f"Fetching {self.name} repository: {owner}/{repo}")
        data = get_json(self._session, url, subject, SourceHostError, self._timeout, headers=headers)
        return self._parse_response(subject, data)

    @staticmethod
    def _parse_response(subject: str, data: Any) -> RepoRecord:
        if not isinstance(data, dict):
            raise SourceHostError(f"JSON deserialization for {subject} failed: not an object")

        full_name = data.get("full_name")
        html_url = data.get("html_url")
        if not isinstance(full_name, str) or not isinstance(html_url, str):
            raise SourceHostError(f"JSON deserialization for {subject} failed: missing 'full_name' or 'html_url'")

        license_data = data.get("license")
        license_name = None
        if isinstance(license_data, dict):
            license_name = optional_str(license_data.get("name"))
        elif license_data is not None:
            raise SourceHostError(f"JSON deserialization for {subject} failed: invalid 'license'")

        logger.debug(f"GitHub reports license {license_name!r} for {full_name}")
        return RepoRecord(full_name=full_name, html_url=html_url, license=license_name)


def homepage_to_repo(homepage: str) -> Optional[Tuple[str, str]]:
    """
    Extract an (owner, repo) pair from a GitHub homepage URL.

    The fragment and a single trailing slash are removed, then the last
    two path segments after the host are taken as owner and repo.

    Examples:
        "https://github.com/acme/widget"        -> ("acme", "widget")
        "https://github.com/acme/widget/"       -> ("acme", "widget")
        "https://github.com/acme/widget#readme" -> ("acme", "widget")
        "https://example.com"                   -> None
        "https://github.com/acme"               -> None

    Returns:
        (owner, repo) or None when the homepage is not a GitHub repository URL
    """
    homepage = homepage.split("#", 1)[0]

    if homepage.endswith("/"):
        homepage = homepage[:-1]

    marker_index = homepage.find(GITHUB_HOST_MARKER)
    if marker_index == -1:
        return None

    path = homepage[marker_index + len(GITHUB_HOST_MARKER) :]
    segments = path.split("/")[1:] if path.startswith("/") else []
    if len(segments) < 2 or not segments[-2] or not segments[-1]:
        return None

    return segments[-2], segments[-1]
