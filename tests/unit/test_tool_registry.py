import asyncio

import pytest
from pydantic import BaseModel, Field

from dynamic_agent.agent.registry import ToolRegistry, ToolSpec


class EchoInput(BaseModel):
    value: int = Field(ge=1)


def _echo_spec() -> ToolSpec:
    return ToolSpec(
        name="echo",
        description="echo positive int",
        args_schema=EchoInput,
        tags=["debug"],
        embedding_docs=["repeat a number back"],
    )


def test_tool_spec_definition_exposes_args_schema() -> None:
    definition = asyncio.run(_echo_spec().definition("please echo 3"))

    assert definition.name == "echo"
    assert definition.description == "echo positive int"
    assert definition.parameters["properties"]["value"]["minimum"] == 1
    assert definition.parameters["required"] == ["value"]


def test_registry_lookup_returns_none_for_unknown_tool() -> None:
    registry = ToolRegistry([_echo_spec()])

    assert registry.get("echo") is not None
    assert registry.get("ghost") is None
    assert "echo" in registry
    assert "ghost" not in registry
    assert registry.names() == ["echo"]
    assert len(registry) == 1


def test_embedding_documents_include_description_docs_and_tags() -> None:
    assert _echo_spec().embedding_documents() == ["echo positive int", "repeat a number back", "debug"]


def test_untagged_spec_embeds_description_only() -> None:
    spec = ToolSpec(name="plain", description="plain tool", args_schema=EchoInput)

    assert spec.embedding_documents() == ["plain tool"]


def test_duplicate_tool_registration_rejected() -> None:
    registry = ToolRegistry()
    spec = _echo_spec()

    registry.register(spec)
    with pytest.raises(ValueError):
        registry.register(spec)
