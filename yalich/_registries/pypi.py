"""PyPI client for Python package metadata."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from yalich.exceptions import RegistryError
from yalich.logging_config import logger
from yalich.models import none_if_empty

from .utils import DEFAULT_TIMEOUT, get_json, optional_str

PYPI_API_BASE = "https://pypi.org/pypi"


@dataclass
class PyPIPackage:
    """The subset of the PyPI JSON API `info` object that yalich uses."""

    name: str
    project_url: str
    license: Optional[str] = None
    home_page: Optional[str] = None


class PyPIClient:
    """
    Client for the PyPI (Python Package Index) JSON API.

    Endpoint: https://pypi.org/pypi/<name>/json
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "pypi.org"

    def fetch(self, package_name: str) -> PyPIPackage:
        """
        Fetch metadata from the PyPI JSON API.

        Args:
            package_name: Name of the Python package

        Returns:
            PyPIPackage parsed from the response

        Raises:
            RegistryError: If the request fails or the response lacks required fields
        """
        url = f"{PYPI_API_BASE}/{package_name}/json"
        logger.debug(f"Fetching {self.name} metadata for: {package_name}")
        data = get_json(self._session, url, f"PyPI package '{package_name}'", RegistryError, self._timeout)
        return self._parse_response(package_name, data)

    def _parse_response(self, package_name: str, data: Any) -> PyPIPackage:
        """
        Parse a PyPI API response into a PyPIPackage.

        `info.name` and `info.project_url` are required. An empty `license`
        falls back to the PEP 639 `license_expression`; an empty `home_page`
        falls back to a "Homepage" entry of `project_urls`.
        """
        info = data.get("info") if isinstance(data, dict) else None
        if not isinstance(info, dict):
            raise RegistryError(f"JSON deserialization for PyPI package '{package_name}' failed: missing 'info'")

        name = info.get("name")
        project_url = info.get("project_url")
        if not isinstance(name, str) or not isinstance(project_url, str):
            raise RegistryError(
                f"JSON deserialization for PyPI package '{package_name}' failed: missing 'name' or 'project_url'"
            )

        license = none_if_empty(optional_str(info.get("license")))
        if license is None:
            license = none_if_empty(optional_str(info.get("license_expression")))

        home_page = none_if_empty(optional_str(info.get("home_page")))
        if home_page is None:
            home_page = _homepage_from_project_urls(info.get("project_urls") or {})

        return PyPIPackage(name=name, project_url=project_url, license=license, home_page=home_page)


def _homepage_from_project_urls(project_urls: Dict[str, Any]) -> Optional[str]:
    if not isinstance(project_urls, dict):
        return None
    for key, url_value in project_urls.items():
        if key.lower() == "homepage" and isinstance(url_value, str):
            return none_if_empty(url_value)
    return None
