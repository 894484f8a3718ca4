"""Prompt message model and conversion from common message shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, cast

Role = Literal["user", "assistant", "system"]

_LANGCHAIN_ROLES: dict[str, Role] = {
    "human": "user",
    "ai": "assistant",
    "system": "system",
}


@dataclass(slots=True)
class TextContent:
    text: str


@dataclass(slots=True)
class ImageContent:
    url: str


@dataclass(slots=True)
class ToolResultContent:
    tool_call_id: str
    content: str


ContentPart = TextContent | ImageContent | ToolResultContent


@dataclass(slots=True)
class Message:
    """A single chat message made of one or more content parts."""

    role: Role
    content: list[ContentPart] = field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", content=[TextContent(text=text)])

    def rag_text(self) -> str | None:
        """Return the text used to drive similarity search, if any.

        Only user messages qualify, and only their first text part is used.
        """
        if self.role != "user":
            return None
        for part in self.content:
            if isinstance(part, TextContent):
                return part.text
        return None


def to_message(value: Any) -> Message:
    """Coerce a prompt into a `Message`.

    Accepts plain strings, `Message` instances, role/content dicts and
    LangChain `BaseMessage` objects.
    """
    if isinstance(value, Message):
        return value
    if isinstance(value, str):
        return Message.user(value)
    if isinstance(value, dict):
        role = str(value.get("role", "user"))
        if role not in ("user", "assistant", "system"):
            raise ValueError(f"Unsupported message role: {role}")
        return Message(role=cast(Role, role), content=_parse_content(value.get("content", "")))

    from langchain_core.messages import BaseMessage, ToolMessage

    if isinstance(value, ToolMessage):
        return Message(
            role="user",
            content=[ToolResultContent(tool_call_id=value.tool_call_id, content=str(value.content))],
        )
    if isinstance(value, BaseMessage):
        role = _LANGCHAIN_ROLES.get(value.type)
        if role is None:
            raise ValueError(f"Unsupported message type: {value.type}")
        return Message(role=role, content=_parse_content(value.content))

    raise TypeError(f"Cannot convert {type(value).__name__} to Message")


def _parse_content(content: Any) -> list[ContentPart]:
    if isinstance(content, str):
        return [TextContent(text=content)]
    if not isinstance(content, (list, tuple)):
        raise ValueError(f"Unsupported message content: {content!r}")

    parts: list[ContentPart] = []
    for item in content:
        if isinstance(item, str):
            parts.append(TextContent(text=item))
            continue
        if not isinstance(item, dict):
            raise ValueError(f"Unsupported content part: {item!r}")

        kind = item.get("type")
        if kind == "text":
            parts.append(TextContent(text=str(item.get("text", ""))))
        elif kind == "image_url":
            image = item.get("image_url", {})
            url = image.get("url", "") if isinstance(image, dict) else str(image)
            parts.append(ImageContent(url=url))
        elif kind == "image":
            parts.append(ImageContent(url=str(item.get("url", ""))))
        elif kind == "tool_result":
            parts.append(
                ToolResultContent(
                    tool_call_id=str(item.get("tool_call_id", "")),
                    content=str(item.get("content", "")),
                )
            )
        else:
            raise ValueError(f"Unsupported content part type: {kind}")
    return parts
