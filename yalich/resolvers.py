"""Per-ecosystem resolvers: registry record -> Dependency, with overrides applied."""

from abc import ABC, abstractmethod
from typing import Dict, Generic, Mapping, Optional, TypeVar

import requests

from yalich._registries import CrateResource, CratesIOClient, NpmClient, NpmPackage, PyPIClient, PyPIPackage
from yalich._registries.protocol import RegistryClient
from yalich.logging_config import logger
from yalich.models import NODE, PYTHON, RUST, Dependency, DependencyOverride, none_if_empty

T = TypeVar("T")


class Resolver(ABC, Generic[T]):
    """
    Base class for resolvers.

    A resolver fetches a package from its registry, converts the record
    into a Dependency, then applies the configured override for the
    canonical name. A configured override license always replaces the
    fetched one.
    """

    category: str

    def __init__(
        self, client: RegistryClient[T], overrides: Optional[Mapping[str, DependencyOverride]] = None
    ) -> None:
        self._client = client
        self._overrides: Mapping[str, DependencyOverride] = overrides or {}
        self.overridden_licenses = 0

    def resolve(self, name: str) -> Dependency:
        """
        Resolve a declared dependency name.

        Raises:
            RegistryError: If the registry request fails
            DataIntegrityError: If the registry data is unusable
        """
        record = self._client.fetch(name)
        dependency = self.build_dependency(record)
        dependency.license = none_if_empty(dependency.license)
        return self.apply_override(dependency)

    @abstractmethod
    def build_dependency(self, record: T) -> Dependency:
        """Convert a registry record into a Dependency."""

    def apply_override(self, dependency: Dependency) -> Dependency:
        """Apply the override configured for the dependency's canonical name, if any."""
        dependency_override = self._overrides.get(dependency.name)
        if dependency_override is None:
            return dependency

        if dependency_override.license is not None:
            logger.debug(
                f"Overriding license of {dependency.category} dependency {dependency.name}: "
                f"{dependency.license!r} -> {dependency_override.license!r}"
            )
            dependency.license = dependency_override.license
            self.overridden_licenses += 1
        if dependency_override.url is not None:
            dependency.url = dependency_override.url
        if dependency_override.name is not None:
            dependency.name = dependency_override.name

        return dependency


class PythonResolver(Resolver[PyPIPackage]):
    category = PYTHON

    def build_dependency(self, record: PyPIPackage) -> Dependency:
        return Dependency(
            category=self.category,
            name=record.name,
            url=record.project_url,
            license=record.license,
            homepage=record.home_page,
        )


class RustResolver(Resolver[CrateResource]):
    category = RUST

    def build_dependency(self, record: CrateResource) -> Dependency:
        version = record.latest_version()
        return Dependency(
            category=self.category,
            name=record.crate.name,
            url=record.crate.url,
            license=version.license,
            homepage=record.crate.homepage,
        )


class NodeResolver(Resolver[NpmPackage]):
    category = NODE

    def build_dependency(self, record: NpmPackage) -> Dependency:
        license = record.latest_version.get_license()
        return Dependency(
            category=self.category,
            name=record.name,
            url=record.url,
            license=license.name if license is not None else None,
            homepage=record.latest_version.homepage,
        )


_RESOLVERS = {
    PYTHON: (PythonResolver, PyPIClient),
    RUST: (RustResolver, CratesIOClient),
    NODE: (NodeResolver, NpmClient),
}


def create_resolvers(
    session: requests.Session, overrides: Mapping[str, Mapping[str, DependencyOverride]]
) -> Dict[str, Resolver]:
    """
    Build one resolver per ecosystem around a shared session.

    Args:
        session: requests.Session used by every registry client
        overrides: category -> dependency name -> override

    Returns:
        category -> Resolver
    """
    resolvers: Dict[str, Resolver] = {}
    for category, (resolver_cls, client_cls) in _RESOLVERS.items():
        resolvers[category] = resolver_cls(client_cls(session), overrides.get(category, {}))
    return resolvers
