"""Web adapter: health check app."""

from relay.adapters.web.server import HEALTH_TEXT, app

__all__ = ["HEALTH_TEXT", "app"]
