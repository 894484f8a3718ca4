"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

RetrievedItem = tuple[float, str, Any]
RetrievedId = tuple[float, str]


@dataclass(slots=True)
class ContextDocument:
    """A context passage attached to a prompt before it reaches the model."""

    id: str
    text: str
    additional_props: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        header = f"<file id: {self.id}>"
        if self.additional_props:
            metadata = " ".join(
                f"{key}: {value!r}" for key, value in sorted(self.additional_props.items())
            )
            header = f"{header}\n<metadata {metadata} />"
        return f"{header}\n{self.text}\n</file>\n"

    def to_langchain(self) -> Any:
        from langchain_core.documents import Document

        return Document(
            id=self.id,
            page_content=self.text,
            metadata=dict(self.additional_props),
        )


class ToolDefinition(BaseModel):
    """Interface description of a callable tool as exposed to the model."""

    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)


@dataclass(slots=True)
class DynamicInfo:
    """Context documents and tool definitions resolved for one prompt."""

    documents: list[ContextDocument]
    tools: list[ToolDefinition]
    preamble: str | None = None
