"""Manifest loading and dependency name extraction.

Each ecosystem declares its dependencies in a different file format:

- python: pyproject.toml, `[tool.poetry.dependencies]` and/or PEP 621
  `[project].dependencies`
- rust: Cargo.toml, `[dependencies]`
- node: package.json, `"dependencies"`

Extractors return the set of names that must be looked up in a public
registry; local and private entries are filtered out here.
"""

import fnmatch
import json
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set

import tomllib

from yalich.exceptions import ManifestError
from yalich.logging_config import logger
from yalich.models import NODE, PYTHON, RUST

# The interpreter constraint in poetry's table, not a package
PYTHON_RUNTIME_DEPENDENCY = "python"

LOCAL_PATH_PREFIX = "../"

# Vendor-private packages that are not publicly registered
DEFAULT_EXCLUDE_PATTERNS = ["@fortawesome/pro*"]

# PEP 508: the name is everything before extras, specifiers, markers or URL
_REQUIREMENT_NAME_PATTERN = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def load_toml_file(path: Path) -> Dict[str, Any]:
    """
    Load a TOML document.

    Raises:
        ManifestError: If the file is missing or not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ManifestError(f"Loading file {path} failed: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e


def load_json_file(path: Path) -> Any:
    """
    Load a JSON document.

    Raises:
        ManifestError: If the file is missing or not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ManifestError(f"Loading file {path} failed: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in {path}: {e}") from e


def _requirement_name(requirement: str) -> Optional[str]:
    match = _REQUIREMENT_NAME_PATTERN.match(requirement)
    return match.group(1) if match else None


def _table(parent: Dict[str, Any], key: str, label: str) -> Dict[str, Any]:
    value = parent.get(key, {})
    if not isinstance(value, dict):
        raise ManifestError(f"{label} must be a table")
    return value


def python_dependency_names(manifest: Dict[str, Any]) -> Set[str]:
    """
    Extract dependency names from a parsed pyproject.toml.

    Reads poetry's `[tool.poetry.dependencies]` table (minus the `python`
    entry) and the PEP 621 `[project].dependencies` list.

    Raises:
        ManifestError: If neither table is present or one is malformed
    """
    tool = _table(manifest, "tool", "[tool]")
    poetry = _table(tool, "poetry", "[tool.poetry]")
    poetry_dependencies = poetry.get("dependencies")
    project_dependencies = _table(manifest, "project", "[project]").get("dependencies")

    if poetry_dependencies is None and project_dependencies is None:
        raise ManifestError("No [tool.poetry.dependencies] or [project].dependencies found")

    names: Set[str] = set()

    if poetry_dependencies is not None:
        if not isinstance(poetry_dependencies, dict):
            raise ManifestError("[tool.poetry.dependencies] must be a table")
        names.update(name for name in poetry_dependencies if name != PYTHON_RUNTIME_DEPENDENCY)

    if project_dependencies is not None:
        if not isinstance(project_dependencies, list):
            raise ManifestError("[project].dependencies must be a list of requirement strings")
        for requirement in project_dependencies:
            name = _requirement_name(requirement) if isinstance(requirement, str) else None
            if name is None:
                raise ManifestError(f"Invalid requirement in [project].dependencies: {requirement!r}")
            names.add(name)

    return names


def rust_dependency_names(manifest: Dict[str, Any]) -> Set[str]:
    """
    Extract crate names from a parsed Cargo.toml.

    Entries that are a version string or a table without `path` are kept.
    Path dependencies are workspace members and never come from crates.io.

    Raises:
        ManifestError: If `[dependencies]` is missing or not a table
    """
    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        raise ManifestError("No [dependencies] table found")

    names = set()
    for crate_name, crate_spec in dependencies.items():
        if isinstance(crate_spec, str):
            names.add(crate_name)
        elif isinstance(crate_spec, dict):
            if "path" not in crate_spec:
                names.add(crate_name)
        else:
            logger.debug(f"Skipping crate {crate_name} with unsupported specification: {crate_spec!r}")
    return names


def node_dependency_names(
    manifest: Dict[str, Any], exclude: Sequence[str] = tuple(DEFAULT_EXCLUDE_PATTERNS)
) -> Set[str]:
    """
    Extract package names from a parsed package.json.

    Local package links (`../...`) and names matching an exclude pattern
    are dropped.

    Raises:
        ManifestError: If `dependencies` is missing or not a string map
    """
    dependencies = manifest.get("dependencies") if isinstance(manifest, dict) else None
    if not isinstance(dependencies, dict):
        raise ManifestError('No "dependencies" object found')

    names = set()
    for name, spec in dependencies.items():
        if not isinstance(spec, str):
            raise ManifestError(f"Dependency {name} must map to a version string, got {spec!r}")
        if spec.startswith(LOCAL_PATH_PREFIX):
            continue
        if is_excluded(name, exclude):
            continue
        names.add(name)
    return names


def is_excluded(name: str, patterns: Iterable[str]) -> bool:
    """Check whether a dependency name matches any fnmatch pattern."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


_LOADERS: Dict[str, Callable[[Path], Any]] = {
    PYTHON: load_toml_file,
    RUST: load_toml_file,
    NODE: load_json_file,
}


def dependency_names(category: str, manifest: Dict[str, Any], exclude: Sequence[str] = ()) -> Set[str]:
    """
    Extract dependency names from a parsed manifest of the given ecosystem.

    Args:
        category: One of python, rust, node
        manifest: Parsed manifest document
        exclude: fnmatch patterns of names to drop

    Returns:
        Set of dependency names
    """
    if category == PYTHON:
        names = python_dependency_names(manifest)
    elif category == RUST:
        names = rust_dependency_names(manifest)
    elif category == NODE:
        return node_dependency_names(manifest, exclude)
    else:
        raise ValueError(f"Unknown dependency category: {category}")
    return {name for name in names if not is_excluded(name, exclude)}


def load_dependency_names(category: str, paths: Iterable[Path], exclude: Sequence[str] = ()) -> List[str]:
    """
    Load all manifests of one ecosystem and return their union, sorted.

    Args:
        category: One of python, rust, node
        paths: Manifest file paths
        exclude: fnmatch patterns of names to drop

    Returns:
        Lexicographically sorted, de-duplicated dependency names

    Raises:
        ManifestError: If any manifest cannot be loaded; the message names the file
    """
    loader = _LOADERS[category]
    names: Set[str] = set()

    for path in paths:
        path = Path(path)
        manifest = loader(path)
        try:
            manifest_names = dependency_names(category, manifest, exclude)
        except ManifestError as e:
            raise ManifestError(f"Invalid {category} manifest {path}: {e}") from e
        logger.debug(f"Found {len(manifest_names)} {category} dependencies in {path}")
        names.update(manifest_names)

    return sorted(names)
