"""Package registry clients (PyPI, crates.io, npm)."""

from .cratesio import CratesIOClient, CrateResource
from .npmjs import NpmClient, NpmPackage
from .protocol import RegistryClient
from .pypi import PyPIClient, PyPIPackage

__all__ = [
    "CratesIOClient",
    "CrateResource",
    "NpmClient",
    "NpmPackage",
    "PyPIClient",
    "PyPIPackage",
    "RegistryClient",
]
