"""Sentry error tracking for the parse service.

Only unexpected faults are reported. Blank input is a client error and is
dropped before sending, and utterance text never leaves the process: events are
scrubbed of credentials and utterance text, Maps query parameters included.

Usage:
    from voicetask.sentry import capture_parse_failure, init_sentry

    init_sentry()  # once at startup; a no-op without SENTRY_DSN

    try:
        result = await pipeline.parse(request)
    except Exception as e:
        capture_parse_failure(e, request)
        raise
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, cast

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from voicetask.config import settings

if TYPE_CHECKING:
    from sentry_sdk._types import Event, Hint

    from voicetask.models import ParseRequest

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Exception class names that are never reported
IGNORED_EXCEPTIONS = {"InvalidInputError"}

# Maps requests carry the API key as a ?key= query parameter
CREDENTIAL_KEYS = {
    "key",
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "authorization",
    "google_maps_api_key",
    "google_places_api_key",
    "sentry_dsn",
}

# Fields that may hold the user's utterance or a derived title
PERSONAL_KEYS = {"text", "raw_text", "title", "input", "query", "phrase"}

# Maps query parameters that carry the key, the place phrase or coordinates
QUERY_PARAM_RE = re.compile(r"""(^|[?&\s])(key|input|origins|destinations)=[^&\s'"]*""", re.IGNORECASE)

_initialized = False


def init_sentry(
    dsn: str | None = None,
    environment: str | None = None,
    release: str | None = None,
    traces_sample_rate: float = 0.0,
) -> bool:
    """Start error tracking.

    Args:
        dsn: Sentry DSN. Defaults to settings.sentry_dsn; empty disables tracking.
        environment: Defaults to settings.sentry_environment.
        release: Defaults to the installed voicetask version.
        traces_sample_rate: Performance tracing sample rate.

    Returns:
        True if Sentry is running after the call.
    """
    global _initialized

    if _initialized:
        return True

    dsn = settings.sentry_dsn if dsn is None else dsn
    if not dsn:
        logger.info("Error tracking disabled (no SENTRY_DSN)")
        return False

    environment = environment or settings.sentry_environment
    if release is None:
        from voicetask import __version__

        release = f"voicetask@{__version__}"

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        send_default_pii=False,
        include_local_variables=False,
        before_send=_before_send,
    )

    _initialized = True
    logger.info(f"Error tracking enabled: environment={environment}, release={release}")
    return True


def _before_send(event: Event, hint: Hint) -> Event | None:
    if "exc_info" in hint:
        exc_type = hint["exc_info"][0]
        if exc_type.__name__ in IGNORED_EXCEPTIONS:
            return None

    data = cast(dict[str, Any], event)
    for field in ("request", "logentry", "extra", "contexts"):
        if isinstance(data.get(field), dict):
            _scrub_dict(data[field])
    if isinstance(data.get("message"), str):
        data["message"] = _scrub_text(data["message"])

    for exception in (data.get("exception") or {}).get("values", []):
        if isinstance(exception.get("value"), str):
            exception["value"] = _scrub_text(exception["value"])

    for breadcrumb in (data.get("breadcrumbs") or {}).get("values", []):
        if breadcrumb.get("category") == "voicetask.services.pipeline":
            breadcrumb["message"] = REDACTED
        elif isinstance(breadcrumb.get("message"), str):
            breadcrumb["message"] = _scrub_text(breadcrumb["message"])
        if isinstance(breadcrumb.get("data"), dict):
            _scrub_dict(breadcrumb["data"])

    return event


def _scrub_text(text: str) -> str:
    return QUERY_PARAM_RE.sub(rf"\1\2={REDACTED}", text)


def _scrub_value(value: Any) -> Any:
    if isinstance(value, str):
        return _scrub_text(value)
    if isinstance(value, dict):
        _scrub_dict(value)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            value[index] = _scrub_value(item)
    return value


def _scrub_dict(data: dict[str, Any]) -> None:
    """Redact credentials and utterance text in place, recursively.

    Values under a sensitive key are replaced outright; other strings keep
    their shape with Maps query parameters blanked.
    """
    for key, value in data.items():
        lowered = key.lower()
        if lowered in CREDENTIAL_KEYS or lowered in PERSONAL_KEYS:
            data[key] = REDACTED
        else:
            data[key] = _scrub_value(value)


def set_context(name: str, data: dict[str, Any]) -> None:
    if _initialized:
        sentry_sdk.set_context(name, data)


def capture_exception(exception: BaseException | None = None) -> str | None:
    """Report an exception; returns the event id, or None when disabled."""
    if not _initialized:
        return None
    return sentry_sdk.capture_exception(exception)


def capture_parse_failure(exception: BaseException, request: ParseRequest | None = None) -> str | None:
    """Report a pipeline fault with the request's shape but not its text."""
    if request is not None:
        set_context(
            "parse_request",
            {
                "timezone": request.user_timezone,
                "text_length": len(request.text or ""),
                "has_user_location": request.user_location is not None,
                "saved_locations": len(request.saved_locations),
            },
        )
    return capture_exception(exception)


def flush(timeout: float = 2.0) -> None:
    if _initialized:
        sentry_sdk.flush(timeout=timeout)
