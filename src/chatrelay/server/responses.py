"""
Response helpers shared by the route handlers.
"""

import json
from typing import Any

from fastapi import Response


def json_response(
    status_code: int, body: Any, headers: dict[str, str] | None = None
) -> Response:
    """Build a JSON response without CORS headers."""
    return Response(
        content=json.dumps(body),
        status_code=status_code,
        media_type="application/json",
        headers=headers,
    )
