from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for failures of the discovery pipeline."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidQueryError(DiscoveryError):
    """Malformed or missing geo, category or pagination parameters."""

    status_code = 400


class UpstreamQueryError(DiscoveryError):
    """The storage layer failed to answer a query."""

    status_code = 500
