"""Tests for the per-ecosystem resolvers and override precedence."""

from unittest.mock import Mock

import pytest

from yalich._registries.cratesio import Crate, CrateResource, CrateVersion
from yalich._registries.npmjs import NpmPackage, NpmVersion, parse_license_field
from yalich._registries.pypi import PyPIPackage
from yalich.exceptions import DataIntegrityError, RegistryError
from yalich.models import DependencyOverride
from yalich.resolvers import NodeResolver, PythonResolver, RustResolver, create_resolvers


def _client(record):
    client = Mock()
    client.fetch.return_value = record
    return client


@pytest.fixture
def pypi_record():
    return PyPIPackage(
        name="requests",
        project_url="https://pypi.org/project/requests/",
        license="Apache 2.0",
        home_page="https://requests.readthedocs.io",
    )


class TestPythonResolver:
    def test_resolve(self, pypi_record):
        client = _client(pypi_record)

        dependency = PythonResolver(client).resolve("Requests")

        client.fetch.assert_called_once_with("Requests")
        assert dependency.category == "python"
        assert dependency.name == "requests"
        assert dependency.url == "https://pypi.org/project/requests/"
        assert dependency.license == "Apache 2.0"
        assert dependency.homepage == "https://requests.readthedocs.io"

    def test_override_replaces_fetched_license(self, pypi_record):
        pypi_record.license = "MIT"
        resolver = PythonResolver(_client(pypi_record), {"requests": DependencyOverride(license="Apache-2.0")})

        dependency = resolver.resolve("requests")

        assert dependency.license == "Apache-2.0"
        assert resolver.overridden_licenses == 1

    def test_override_fills_missing_license(self, pypi_record):
        pypi_record.license = None
        resolver = PythonResolver(_client(pypi_record), {"requests": DependencyOverride(license="Apache-2.0")})
        assert resolver.resolve("requests").license == "Apache-2.0"

    def test_override_without_license_keeps_fetched(self, pypi_record):
        resolver = PythonResolver(_client(pypi_record), {"requests": DependencyOverride(url="https://example.com")})

        dependency = resolver.resolve("requests")

        assert dependency.license == "Apache 2.0"
        assert dependency.url == "https://example.com"
        assert resolver.overridden_licenses == 0

    def test_override_is_keyed_by_canonical_name(self, pypi_record):
        pypi_record.name = "PyYAML"
        overrides = {"pyyaml": DependencyOverride(license="X"), "PyYAML": DependencyOverride(license="MIT")}
        assert PythonResolver(_client(pypi_record), overrides).resolve("pyyaml").license == "MIT"

    def test_name_override(self, pypi_record):
        resolver = PythonResolver(_client(pypi_record), {"requests": DependencyOverride(name="psf-requests")})
        assert resolver.resolve("requests").name == "psf-requests"

    def test_registry_errors_propagate(self):
        client = Mock()
        client.fetch.side_effect = RegistryError("Request for PyPI package 'x' failed: HTTP 500")
        with pytest.raises(RegistryError):
            PythonResolver(client).resolve("x")


class TestRustResolver:
    def test_resolve(self):
        record = CrateResource(
            crate=Crate(name="serde", homepage="https://serde.rs"),
            versions=[CrateVersion("1.0.228", "MIT OR Apache-2.0")],
        )

        dependency = RustResolver(_client(record)).resolve("serde")

        assert dependency.category == "rust"
        assert dependency.name == "serde"
        assert dependency.url == "https://crates.io/crates/serde"
        assert dependency.license == "MIT OR Apache-2.0"
        assert dependency.homepage == "https://serde.rs"

    def test_crate_without_versions(self):
        record = CrateResource(crate=Crate(name="ghost"), versions=[])
        with pytest.raises(DataIntegrityError):
            RustResolver(_client(record)).resolve("ghost")

    def test_override(self):
        record = CrateResource(crate=Crate(name="ring"), versions=[CrateVersion("0.17.0", None)])
        resolver = RustResolver(_client(record), {"ring": DependencyOverride(license="ISC AND MIT AND OpenSSL")})
        assert resolver.resolve("ring").license == "ISC AND MIT AND OpenSSL"


class TestNodeResolver:
    def test_resolve_detailed_license(self):
        record = NpmPackage(
            name="left-pad",
            latest="1.3.0",
            latest_version=NpmVersion(license=parse_license_field({"type": "MIT"}), homepage="https://x.dev"),
        )

        dependency = NodeResolver(_client(record)).resolve("left-pad")

        assert dependency.category == "node"
        assert dependency.name == "left-pad"
        assert dependency.url == "https://www.npmjs.com/package/left-pad"
        assert dependency.license == "MIT"
        assert dependency.homepage == "https://x.dev"

    def test_resolve_without_license(self):
        record = NpmPackage(name="nolicense", latest="1.0.0", latest_version=NpmVersion())
        assert NodeResolver(_client(record)).resolve("nolicense").license is None

    def test_empty_license_string_is_none(self):
        record = NpmPackage(name="blank", latest="1.0.0", latest_version=NpmVersion(license=parse_license_field("")))
        assert NodeResolver(_client(record)).resolve("blank").license is None


def test_create_resolvers(mock_session):
    overrides = {"python": {"requests": DependencyOverride(license="MIT")}}

    resolvers = create_resolvers(mock_session, overrides)

    assert list(resolvers) == ["python", "rust", "node"]
    assert isinstance(resolvers["python"], PythonResolver)
    assert isinstance(resolvers["rust"], RustResolver)
    assert isinstance(resolvers["node"], NodeResolver)
