# ABOUTME: Exception types for configuration, event retrieval and message delivery
# ABOUTME: Per-chapter errors are caught by the driver; configuration errors halt the run

from typing import Optional


class DigestError(RuntimeError):
    """Base class for errors raised while posting chapter events."""


class ConfigurationError(DigestError):
    """Raised when required settings are missing or malformed."""


class UpstreamFetchError(DigestError):
    """Raised when the events API returns a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"solidarity.tech API error {status_code}: {body}")


class DeliveryError(DigestError):
    """Raised when Slack rejects or fails to receive a message."""

    def __init__(self, error: str, status_code: Optional[int] = None) -> None:
        self.error = error
        self.status_code = status_code
        if status_code is None:
            super().__init__(f"Slack delivery failed: {error}")
        else:
            super().__init__(f"Slack delivery failed ({status_code}): {error}")
