# ABOUTME: Routes module initialization.
# ABOUTME: Exports all route modules for FastAPI app.

from nix_channel_feeds.web.routes import feeds, health

__all__ = ["feeds", "health"]
