"""crates.io client for Rust crate metadata."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from yalich.exceptions import DataIntegrityError, RegistryError
from yalich.logging_config import logger
from yalich.models import none_if_empty

from .utils import DEFAULT_TIMEOUT, get_json, optional_str

CRATESIO_API_BASE = "https://crates.io/api/v1/crates"
CRATESIO_WEB_BASE = "https://crates.io/crates"


@dataclass
class CrateVersion:
    num: str
    license: Optional[str] = None


@dataclass
class Crate:
    name: str
    homepage: Optional[str] = None
    max_stable_version: Optional[str] = None
    max_version: Optional[str] = None

    @property
    def url(self) -> str:
        return f"{CRATESIO_WEB_BASE}/{self.name}"


@dataclass
class CrateResource:
    """
    A crate and its published versions, as returned by the crate endpoint.

    Response shape: {"crate": {...}, "versions": [...]}
    """

    crate: Crate
    versions: List[CrateVersion] = field(default_factory=list)

    def latest_version(self) -> CrateVersion:
        """
        Return the version whose license is authoritative.

        The version named by the crate's `max_stable_version` (or
        `max_version`) wins when it is in the list; otherwise the first
        version in registry order is used.

        Raises:
            DataIntegrityError: If the crate has no versions
        """
        if not self.versions:
            raise DataIntegrityError(f"Rust crate '{self.crate.name}' must have at least one version")

        for marker in (self.crate.max_stable_version, self.crate.max_version):
            if not marker:
                continue
            for version in self.versions:
                if version.num == marker:
                    return version

        return self.versions[0]


class CratesIOClient:
    """
    Client for the crates.io (Rust package registry) API.

    Endpoint: https://crates.io/api/v1/crates/<name>
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "crates.io"

    def fetch(self, package_name: str) -> CrateResource:
        """
        Fetch metadata from the crates.io crate endpoint.

        Args:
            package_name: Name of the crate

        Returns:
            CrateResource parsed from the response

        Raises:
            RegistryError: If the request fails or the response is malformed
        """
        url = f"{CRATESIO_API_BASE}/{package_name}"
        logger.debug(f"Fetching {self.name} metadata for: {package_name}")
        data = get_json(self._session, url, f"Rust crate '{package_name}'", RegistryError, self._timeout)
        return self._parse_response(package_name, data)

    def _parse_response(self, package_name: str, data: Any) -> CrateResource:
        if not isinstance(data, dict):
            raise RegistryError(f"JSON deserialization for Rust crate '{package_name}' failed: not an object")

        crate_data = data.get("crate")
        versions_data = data.get("versions")
        if not isinstance(crate_data, dict) or not isinstance(crate_data.get("name"), str):
            raise RegistryError(f"JSON deserialization for Rust crate '{package_name}' failed: missing 'crate.name'")
        if not isinstance(versions_data, list):
            raise RegistryError(f"JSON deserialization for Rust crate '{package_name}' failed: missing 'versions'")

        crate = Crate(
            name=crate_data["name"],
            homepage=none_if_empty(optional_str(crate_data.get("homepage"))),
            max_stable_version=optional_str(crate_data.get("max_stable_version")),
            max_version=optional_str(crate_data.get("max_version")),
        )
        versions = [self._parse_version(package_name, version) for version in versions_data]
        return CrateResource(crate=crate, versions=versions)

    @staticmethod
    def _parse_version(package_name: str, version: Dict[str, Any]) -> CrateVersion:
        if not isinstance(version, dict):
            raise RegistryError(f"JSON deserialization for Rust crate '{package_name}' failed: invalid version entry")
        return CrateVersion(
            num=optional_str(version.get("num")) or "",
            license=none_if_empty(optional_str(version.get("license"))),
        )
