"""RegistryClient protocol for package registry clients."""

from typing import Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class RegistryClient(Protocol[T_co]):
    """
    Protocol defining the interface for registry clients.

    Each client fetches the metadata document of one package from its
    ecosystem's registry and returns a typed record. Clients are built
    around a shared requests.Session and never cache or retry.

    Example:
        class PyPIClient:
            name = "pypi.org"

            def fetch(self, package_name: str) -> PyPIPackage:
                # GET https://pypi.org/pypi/<name>/json and parse it
                ...
    """

    @property
    def name(self) -> str:
        """
        Human-readable name of the registry.

        Used in log messages.
        Examples: "pypi.org", "crates.io", "npmjs.com"
        """
        ...

    def fetch(self, package_name: str) -> T_co:
        """
        Fetch and parse the metadata of one package.

        Args:
            package_name: Name as declared in the manifest

        Returns:
            Registry-specific record

        Raises:
            RegistryError: If the request fails or the response is malformed
            DataIntegrityError: If the response is well-formed but unusable
        """
        ...
