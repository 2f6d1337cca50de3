# ABOUTME: Web module serving channel feeds on demand over HTTP.
# ABOUTME: Exports the FastAPI application factory.

from nix_channel_feeds.web.app import create_app

__all__ = ["create_app"]
