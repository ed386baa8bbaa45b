"""Core data records shared by resolvers, the enricher and the output sinks."""

from dataclasses import dataclass
from typing import List, Optional

from packageurl import PackageURL

PYTHON = "python"
RUST = "rust"
NODE = "node"

# Ecosystems are always processed and emitted in this order.
CATEGORIES = (PYTHON, RUST, NODE)

# PURL type for each category
PURL_TYPES = {
    PYTHON: "pypi",
    RUST: "cargo",
    NODE: "npm",
}

COLUMNS = ("category", "name", "url", "license")


@dataclass
class Dependency:
    """
    A resolved dependency and its license.

    `license` is None until some source supplies it. `homepage` only
    drives the GitHub fallback and is never emitted.
    """

    category: str
    name: str
    url: str
    license: Optional[str] = None
    homepage: Optional[str] = None

    @property
    def purl(self) -> str:
        """Package URL identifying this dependency in its registry."""
        namespace = None
        name = self.name
        if self.category == NODE and name.startswith("@") and "/" in name:
            namespace, name = name.split("/", 1)
        return PackageURL(type=PURL_TYPES[self.category], namespace=namespace, name=name).to_string()

    def to_row(self) -> List[str]:
        """Return the emitted columns in order: category, name, url, license."""
        return [self.category, self.name, self.url, self.license or ""]


@dataclass(frozen=True)
class DependencyOverride:
    """Manually configured values that replace fetched ones."""

    name: Optional[str] = None
    url: Optional[str] = None
    license: Optional[str] = None


def none_if_empty(value: Optional[str]) -> Optional[str]:
    """Map empty or whitespace-only strings to None."""
    if value is None or not value.strip():
        return None
    return value
