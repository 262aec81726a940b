"""
Chat API endpoint.

Handles /api/chat requests and hands them to the chat router.
"""

import logging
import uuid
from typing import Any

from fastapi import Request, Response

from chatrelay.router import ChatRequest, ChatRouter
from chatrelay.server.responses import json_response

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


def get_chat_router(request: Request) -> ChatRouter:
    """Chat router built at application startup."""
    return request.app.state.chat_router


def read_chat_request(body: Any) -> ChatRequest:
    """
    Parse a decoded JSON body into a chat request.

    Non-object JSON values carry no fields, so they get every default.

    Raises:
        TypeError: If the body is JSON null
        pydantic.ValidationError: If a field has an unusable value
    """
    if body is None:
        raise TypeError("Cannot read request fields from null")
    if not isinstance(body, dict):
        body = {}
    return ChatRequest.model_validate(body)


async def chat(request: Request) -> Response:
    """
    Forward a chat request to an upstream provider.

    Registered without a method list; anything but POST gets 405 here.

    Request Body:
        chatbot: grok | gpt5 | gemini | auto (default grok)
        model: Upstream model override
        messages: Chat messages, each with a ``content`` string
        clientChosen: First provider to try in auto mode
    """
    request_id = f"req_{uuid.uuid4().hex[:24]}"
    headers = {"X-Request-Id": request_id}

    if request.method != "POST":
        return json_response(405, {"error": "Method not allowed"}, headers=headers)

    try:
        chat_request = read_chat_request(await request.json())
        result = await get_chat_router(request).route(chat_request, request_id=request_id)
    except Exception as e:
        logger.exception(f"[{request_id}] [CATCH ERROR] {e}")
        return json_response(500, {"error": str(e)}, headers=headers)

    return Response(
        content=result.render(),
        status_code=result.status_code,
        media_type="application/json",
        headers={**result.headers, **headers},
    )
