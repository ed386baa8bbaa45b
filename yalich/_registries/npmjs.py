"""npm registry client for Node package metadata.

npm's `license` / `licenses` fields have accumulated several shapes over
the years:

    "license": "MIT"
    "license": {"type": "MIT", "url": "..."}
    "licenses": [{"type": "MIT", "url": "..."}, {"type": "Apache-2.0", ...}]
    "licenses": ["ISC", "MIT"]

They are parsed into a `LicenseField` of `PlainLicense` / `DetailedLicense`
values so resolvers only ever ask for the first license name.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import requests

from yalich.exceptions import DataIntegrityError, RegistryError
from yalich.logging_config import logger
from yalich.models import none_if_empty

from .utils import DEFAULT_TIMEOUT, get_json, optional_str

NPM_REGISTRY_BASE = "https://registry.npmjs.org"
NPM_WEB_BASE = "https://www.npmjs.com/package"


@dataclass(frozen=True)
class PlainLicense:
    """License given as a bare string."""

    value: str

    @property
    def name(self) -> str:
        return self.value


@dataclass(frozen=True)
class DetailedLicense:
    """License given as an object with a `type` field."""

    type: str
    url: Optional[str] = None

    @property
    def name(self) -> str:
        return self.type


License = Union[PlainLicense, DetailedLicense]


@dataclass(frozen=True)
class LicenseField:
    """A `license` or `licenses` value: one license or a list of them."""

    licenses: Tuple[License, ...]

    def first(self) -> Optional[License]:
        return self.licenses[0] if self.licenses else None


def parse_license(value: Any) -> License:
    """
    Parse a single npm license entry.

    Raises:
        ValueError: If the entry is neither a string nor an object with a string `type`
    """
    if isinstance(value, str):
        return PlainLicense(value)
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return DetailedLicense(type=value["type"], url=optional_str(value.get("url")))
    raise ValueError(f"unsupported license entry {value!r}")


def parse_license_field(value: Any) -> Optional[LicenseField]:
    """
    Parse a `license` / `licenses` value, which may be a single entry or a list.

    Returns:
        LicenseField, or None when the field is absent (null)

    Raises:
        ValueError: If any entry has an unsupported shape
    """
    if value is None:
        return None
    if isinstance(value, list):
        return LicenseField(tuple(parse_license(entry) for entry in value))
    return LicenseField((parse_license(value),))


@dataclass
class NpmVersion:
    """Metadata of one published version."""

    license: Optional[LicenseField] = None
    licenses: Optional[LicenseField] = None
    homepage: Optional[str] = None

    def get_license(self) -> Optional[License]:
        """
        Return the first license, preferring `license` over `licenses`.

        `licenses` is only consulted when `license` is absent.
        """
        for license_field in (self.license, self.licenses):
            if license_field is not None:
                return license_field.first()
        return None


@dataclass
class NpmPackage:
    """A package document reduced to its name and latest version."""

    name: str
    latest: str
    latest_version: NpmVersion

    @property
    def url(self) -> str:
        return f"{NPM_WEB_BASE}/{self.name}"


class NpmClient:
    """
    Client for the npm registry.

    Endpoint: https://registry.npmjs.org/<name> (scoped names keep their
    `@scope/` prefix)
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "npmjs.com"

    def fetch(self, package_name: str) -> NpmPackage:
        """
        Fetch the package document from the npm registry.

        Args:
            package_name: Name of the npm package

        Returns:
            NpmPackage with the `dist-tags.latest` version parsed

        Raises:
            RegistryError: If the request fails or the document is malformed
            DataIntegrityError: If the latest tag points at an unknown version
        """
        url = f"{NPM_REGISTRY_BASE}/{package_name}"
        logger.debug(f"Fetching {self.name} metadata for: {package_name}")
        data = get_json(self._session, url, f"npm package '{package_name}'", RegistryError, self._timeout)
        return self._parse_response(package_name, data)

    def _parse_response(self, package_name: str, data: Any) -> NpmPackage:
        if not isinstance(data, dict):
            raise RegistryError(f"JSON deserialization for npm package '{package_name}' failed: not an object")

        dist_tags = data.get("dist-tags")
        versions = data.get("versions")
        if not isinstance(dist_tags, dict) or not isinstance(dist_tags.get("latest"), str):
            raise RegistryError(
                f"JSON deserialization for npm package '{package_name}' failed: missing 'dist-tags.latest'"
            )
        if not isinstance(versions, dict):
            raise RegistryError(f"JSON deserialization for npm package '{package_name}' failed: missing 'versions'")

        latest = dist_tags["latest"]
        if latest not in versions:
            raise DataIntegrityError(f"Latest version {latest} of npm package '{package_name}' has no metadata")

        # npm allows a package document without a name
        name = optional_str(data.get("name")) or package_name

        return NpmPackage(
            name=name,
            latest=latest,
            latest_version=self._parse_version(package_name, versions[latest]),
        )

    @staticmethod
    def _parse_version(package_name: str, version: Dict[str, Any]) -> NpmVersion:
        if not isinstance(version, dict):
            raise RegistryError(f"JSON deserialization for npm package '{package_name}' failed: invalid version entry")
        try:
            license_field = parse_license_field(version.get("license"))
            licenses_field = parse_license_field(version.get("licenses"))
        except ValueError as e:
            raise RegistryError(f"JSON deserialization for npm package '{package_name}' failed: {e}") from e
        return NpmVersion(
            license=license_field,
            licenses=licenses_field,
            homepage=none_if_empty(optional_str(version.get("homepage"))),
        )
