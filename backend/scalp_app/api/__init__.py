"""API endpoints."""

from scalp_app.api.routes import router, BarRequest, KlinesRequest
from scalp_app.api.dependencies import close_clients

__all__ = [
    "router",
    "BarRequest",
    "KlinesRequest",
    "close_clients",
]
