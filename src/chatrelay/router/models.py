"""
Inbound chat request model.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

AUTO = "auto"
DEFAULT_CHATBOT = "grok"


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    chatbot: str = DEFAULT_CHATBOT
    model: str | None = None
    messages: list[Any] = Field(default_factory=list)
    client_chosen: str | None = Field(default=None, alias="clientChosen")

    @field_validator("chatbot", mode="before")
    @classmethod
    def default_chatbot(cls, v: Any) -> Any:
        """Empty or null chatbot means the default one; other values become names."""
        if not v:
            return DEFAULT_CHATBOT
        return v if isinstance(v, str) else str(v)

    @field_validator("model", mode="before")
    @classmethod
    def empty_model_is_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("messages", mode="before")
    @classmethod
    def null_messages_is_empty(cls, v: Any) -> Any:
        return v if v is not None else []

    @field_validator("client_chosen", mode="before")
    @classmethod
    def ignore_non_string_hint(cls, v: Any) -> Any:
        # The hint is advisory; anything unusable is treated as absent
        return v if isinstance(v, str) else None

    @property
    def is_auto(self) -> bool:
        """True when the caller left provider selection to the router."""
        return self.chatbot == AUTO
