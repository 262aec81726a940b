"""
Static homepage.

Every path other than /api/chat serves the same HTML document.
"""

from importlib import resources
from pathlib import Path

from fastapi import Request, Response

CATCH_ALL_PATH = "/{path:path}"

HTML_MEDIA_TYPE = "text/html; charset=UTF-8"


def load_homepage(path: Path | None = None) -> bytes:
    """
    Read the homepage document.

    Args:
        path: HTML file to serve (bundled index.html when None)

    Returns:
        Raw document bytes
    """
    if path is not None:
        return path.read_bytes()
    return resources.files("chatrelay.server").joinpath("static/index.html").read_bytes()


async def homepage(request: Request) -> Response:
    """Serve the homepage bytes unchanged, whatever the method."""
    return Response(content=request.app.state.homepage, media_type=HTML_MEDIA_TYPE)
