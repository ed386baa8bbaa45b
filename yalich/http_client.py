"""HTTP client utilities with a configured user agent."""

from typing import Optional

import requests


def get_default_headers(user_agent: str, accept: Optional[str] = None) -> dict:
    """
    Get default HTTP headers with user agent.

    Args:
        user_agent: User-Agent value; registries reject blank agents
        accept: Optional Accept header value (e.g., "application/json")

    Returns:
        Dictionary of HTTP headers
    """
    headers = {"User-Agent": user_agent}
    if accept:
        headers["Accept"] = accept
    return headers


def get_auth_headers(token: Optional[str]) -> Optional[dict]:
    """Bearer Authorization header for token, or None when no token is set."""
    if not token:
        return None
    return {"Authorization": f"Bearer {token}"}


def create_session(user_agent: str) -> requests.Session:
    """
    Create the requests session shared by every registry and GitHub call.

    Args:
        user_agent: User-Agent sent on every request

    Returns:
        requests.Session with default headers applied
    """
    session = requests.Session()
    session.headers.update(get_default_headers(user_agent, accept="application/json"))
    return session
