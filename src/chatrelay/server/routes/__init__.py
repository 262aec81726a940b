"""
chatrelay.server.routes - HTTP route handlers.
"""

from chatrelay.server.routes import chat, homepage

__all__ = ["chat", "homepage"]
