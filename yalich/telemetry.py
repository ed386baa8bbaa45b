"""Opt-in Sentry error reporting."""

import os

import sentry_sdk

from .exceptions import ConfigurationError, ManifestError
from .logging_config import logger


def telemetry_enabled() -> bool:
    """Telemetry needs a SENTRY_DSN and is disabled by TELEMETRY=false."""
    if os.getenv("TELEMETRY", "true").lower() in ("false", "0", "no", "off"):
        return False
    return bool(os.getenv("SENTRY_DSN"))


def before_send(event, hint):
    """
    Filter events before sending to Sentry.

    Configuration and manifest errors are user input problems, not bugs.
    """
    if "exc_info" in hint:
        exc_type, exc_value, tb = hint["exc_info"]
        if isinstance(exc_value, (ConfigurationError, ManifestError)):
            return None
    return event


def initialize_sentry() -> bool:
    """
    Initialize Sentry for error tracking when enabled.

    Returns:
        True if Sentry was initialized
    """
    if not telemetry_enabled():
        return False

    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        send_default_pii=False,
        traces_sample_rate=0.0,
        before_send=before_send,
    )
    logger.debug("Sentry error reporting enabled")
    return True
