"""Shared request helper for registry and source-host clients."""

from typing import Any, Dict, Optional, Type

import requests

from yalich.exceptions import YalichError
from yalich.logging_config import logger

DEFAULT_TIMEOUT = 30  # seconds


def get_json(
    session: requests.Session,
    url: str,
    subject: str,
    error_cls: Type[YalichError],
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Issue a single GET and decode its JSON body.

    There is no retry: any failure is raised with `subject` in the message
    so the caller can tell which dependency broke the run.

    Args:
        session: Shared session carrying the User-Agent
        url: Endpoint to fetch
        subject: Human-readable description, e.g. "PyPI package 'requests'"
        error_cls: Exception type to raise on failure
        headers: Extra headers for this request only

    Returns:
        Decoded JSON document

    Raises:
        error_cls: On network error, non-success status or invalid JSON
    """
    logger.debug(f"GET {url}")
    try:
        response = session.get(url, timeout=timeout, headers=headers)
    except requests.exceptions.Timeout as e:
        raise error_cls(f"Request for {subject} timed out: {e}") from e
    except requests.exceptions.RequestException as e:
        raise error_cls(f"Request for {subject} failed: {e}") from e

    if not 200 <= response.status_code < 300:
        raise error_cls(f"Request for {subject} failed: HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise error_cls(f"JSON deserialization for {subject} failed: {e}") from e


def optional_str(value: Any) -> Optional[str]:
    """Return value if it is a string, else None."""
    return value if isinstance(value, str) else None
