"""HTTP API."""

from gridforge.api.app import app

__all__ = ["app"]
