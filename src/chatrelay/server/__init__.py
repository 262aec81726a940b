"""
chatrelay.server - FastAPI server application.

Note: app and create_app are imported lazily so that importing the settings
does not build the application.
Use `from chatrelay.server.app import app, create_app` directly when needed.
"""

from chatrelay.server.config import Settings, get_settings


def __getattr__(name: str):
    """Lazy import for app."""
    if name in ("app", "create_app"):
        from chatrelay.server.app import app, create_app

        if name == "app":
            return app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app", "create_app", "Settings", "get_settings"]
