######## errors.py
########


class WaybackError(Exception):
    """Base class for request-level failures surfaced by the API."""


class InvalidInput(WaybackError, ValueError):
    """Malformed or missing URL, or a malformed year-group payload (HTTP 400)."""


class UpstreamUnavailable(WaybackError, RuntimeError):
    """The archive index answered with a non-success status (HTTP 502)."""


class UnexpectedFailure(WaybackError, RuntimeError):
    """Anything else: transport errors, undecodable index data (HTTP 500)."""
