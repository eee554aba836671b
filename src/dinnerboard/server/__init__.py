"""ASGI application factory and dependencies for the Dinnerboard server."""

from dinnerboard.server.app import create_app

__all__ = ["create_app"]
