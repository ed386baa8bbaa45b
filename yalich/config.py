"""Configuration file loading and validation.

The configuration is a TOML document:

    user_agent = "acme-license-audit (legal@acme.example)"

    [languages.python]
    manifests = ["pyproject.toml"]

    [languages.python.overrides.somepackage]
    license = "MIT"

    [languages.rust]
    manifests = ["Cargo.toml"]

    [languages.node]
    manifests = ["web/package.json"]
    exclude = ["@acme/*"]
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomllib

from yalich.exceptions import ConfigurationError
from yalich.logging_config import logger
from yalich.manifests import DEFAULT_EXCLUDE_PATTERNS
from yalich.models import CATEGORIES, NODE, DependencyOverride

OVERRIDE_FIELDS = ("name", "url", "license")


@dataclass
class LanguageConfig:
    """Manifests, exclude patterns and overrides of one ecosystem."""

    manifests: List[Path] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    overrides: Dict[str, DependencyOverride] = field(default_factory=dict)


@dataclass
class Config:
    """Configuration settings for a yalich run."""

    user_agent: str
    languages: Dict[str, LanguageConfig] = field(default_factory=dict)
    github_token: Optional[str] = None

    def language(self, category: str) -> LanguageConfig:
        """Return the settings of one ecosystem (empty when not configured)."""
        return self.languages.get(category) or LanguageConfig()

    @property
    def overrides(self) -> Dict[str, Dict[str, DependencyOverride]]:
        return {category: self.language(category).overrides for category in CATEGORIES}

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.user_agent or not self.user_agent.strip():
            raise ConfigurationError("user_agent must be a non-empty string")

        unknown = set(self.languages) - set(CATEGORIES)
        if unknown:
            raise ConfigurationError(
                f"Unknown language(s) in configuration: {', '.join(sorted(unknown))}. "
                f"Supported: {', '.join(CATEGORIES)}"
            )


def _parse_override(category: str, name: str, data: Any) -> DependencyOverride:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Override for {category} dependency '{name}' must be a table")

    unknown = set(data) - set(OVERRIDE_FIELDS)
    if unknown:
        raise ConfigurationError(
            f"Unknown field(s) in override for {category} dependency '{name}': {', '.join(sorted(unknown))}"
        )

    values = {}
    for key in OVERRIDE_FIELDS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"Override field '{key}' for {category} dependency '{name}' must be a string")
        if value is not None and not value.strip():
            raise ConfigurationError(f"Override field '{key}' for {category} dependency '{name}' must not be empty")
        values[key] = value
    return DependencyOverride(**values)


def _parse_string_list(category: str, key: str, value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"languages.{category}.{key} must be a list of strings")
    return list(value)


def _parse_language(category: str, data: Any) -> LanguageConfig:
    if not isinstance(data, dict):
        raise ConfigurationError(f"languages.{category} must be a table")

    manifests = _parse_string_list(category, "manifests", data.get("manifests", []))

    default_exclude = DEFAULT_EXCLUDE_PATTERNS if category == NODE else []
    exclude = _parse_string_list(category, "exclude", data.get("exclude", default_exclude))

    overrides_data = data.get("overrides", {})
    if not isinstance(overrides_data, dict):
        raise ConfigurationError(f"languages.{category}.overrides must be a table")

    return LanguageConfig(
        manifests=[Path(manifest) for manifest in manifests],
        exclude=exclude,
        overrides={name: _parse_override(category, name, value) for name, value in overrides_data.items()},
    )


def build_config(data: Dict[str, Any]) -> Config:
    """
    Build a Config from a parsed configuration document.

    The GitHub token falls back to the GITHUB_TOKEN environment variable.

    Raises:
        ConfigurationError: If required keys are missing or have the wrong type
    """
    user_agent = data.get("user_agent")
    if not isinstance(user_agent, str):
        raise ConfigurationError("user_agent is required and must be a string")

    languages_data = data.get("languages")
    if not isinstance(languages_data, dict):
        raise ConfigurationError("[languages] table is required")

    github_token = data.get("github_token")
    if github_token is not None and not isinstance(github_token, str):
        raise ConfigurationError("github_token must be a string")

    config = Config(
        user_agent=user_agent,
        languages={category: _parse_language(category, value) for category, value in languages_data.items()},
        github_token=github_token or os.getenv("GITHUB_TOKEN") or None,
    )
    config.validate()
    return config


def load_config(path: Path) -> Config:
    """
    Load and validate configuration from a TOML file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated Config

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"Loading config file {path} failed: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in config file {path}: {e}") from e

    config = build_config(data)
    for category in CATEGORIES:
        language = config.language(category)
        logger.debug(
            f"{category}: {len(language.manifests)} manifest(s), {len(language.overrides)} override(s)"
        )
    return config
