"""Custom exception hierarchy for upatelemetry."""

from __future__ import annotations


class UpaError(Exception):
    """Base exception for all upatelemetry errors."""


class UpaConfigError(UpaError):
    """Invalid or missing configuration."""


class UpaTransportError(UpaError):
    """HTTP-level failure (network, timeout, non-200, invalid body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class UpaSourceError(UpaError):
    """Upstream payload could not be turned into a normalized reading."""

    def __init__(self, message: str, *, source: str = "") -> None:
        self.source = source
        super().__init__(message)


class UpaFeedError(UpaError):
    """Push-feed lifecycle misuse (e.g. starting a running manager)."""
