"""Bridge-specific exceptions.

Interactive actions surface these to the user. Background sync only logs
them.
"""


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(BridgeError):
    """Raised when the endpoint URL or auth token is missing."""


class DeliveryError(BridgeError):
    """Raised when a write to the time-series endpoint fails."""


class UpstreamError(DeliveryError):
    """The endpoint answered with a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
        reason: HTTP reason phrase.
        body: Response body, truncated to a bounded length.
    """

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Upstream error {status_code} ({reason}): {body}")


class TransportError(DeliveryError):
    """The request never produced a response (refused, DNS, timeout)."""


class CacheRefreshError(BridgeError):
    """Project or tag metadata could not be fetched from the host."""
