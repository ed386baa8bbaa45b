"""Custom exceptions for yalich."""


class YalichError(Exception):
    """Base exception for all yalich operations."""


class ConfigurationError(YalichError):
    """Raised when configuration validation fails."""


class ManifestError(YalichError):
    """Raised when a manifest file cannot be loaded or has an unexpected structure."""


class RegistryError(YalichError):
    """Raised when a package registry request or its response fails."""


class SourceHostError(YalichError):
    """Raised when a source-host (GitHub) request or its response fails."""


class DataIntegrityError(YalichError):
    """Raised when registry data is well-formed but unusable (e.g. a crate without versions)."""
