"""Errors raised at the upstream boundary."""

from typing import Any


class UpstreamError(Exception):
    """An upstream HTTP call failed (network, timeout or non-2xx).

    Carries the upstream status code and decoded payload when available
    so they can be passed through to the client for diagnostics.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "status": self.status, "data": self.data}


class AnalysisUnavailableError(UpstreamError):
    """The text analysis API did not produce an answer."""
