"""FastAPI entrypoint exposing context and tool resolution."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from dynamic_agent.agent.agent import Agent
from dynamic_agent.agent.registry import ToolRegistry
from dynamic_agent.config import AgentConfig, LoggingConfig
from dynamic_agent.errors import InvalidPromptError, RetrievalError
from dynamic_agent.obs.logging import setup_logging
from dynamic_agent.obs.tracing import TraceStore
from dynamic_agent.retrieval.embedder import HashingEmbedder
from dynamic_agent.retrieval.index import InMemoryVectorIndex


class ResolveRequest(BaseModel):
    prompt: str | dict[str, Any]


class UpsertDocumentRequest(BaseModel):
    id: str = Field(min_length=1)
    payload: Any
    texts: list[str] | None = None


def create_app(
    agent: Agent | None = None,
    trace_store: TraceStore | None = None,
    *,
    config: AgentConfig | None = None,
) -> FastAPI:
    """Build the HTTP app.

    Without an explicit agent, one is built around a single in-memory context
    index that `/context/documents` writes into. A caller-supplied agent must
    have been built with the same `trace_store` for `/traces` to see its calls.
    """
    trace_store = trace_store or TraceStore()
    context_index: InMemoryVectorIndex | None = None
    if agent is None:
        config = config or AgentConfig()
        context_index = InMemoryVectorIndex(HashingEmbedder())
        agent = Agent.from_config(
            config,
            tools=ToolRegistry(),
            context_indices=[context_index],
            trace_store=trace_store,
        )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        setup_logging(LoggingConfig(level=os.getenv("DYNAMIC_AGENT_LOG_LEVEL", "INFO")))
        yield

    app = FastAPI(title="Dynamic Agent Resolution", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "context_sources": len(agent.dynamic_context),
            "tool_sources": len(agent.dynamic_tools),
            "registered_tools": len(agent.tools),
            "static_tools": list(agent.static_tools),
            "preamble": agent.preamble,
        }

    @app.post("/context/documents")
    def upsert_document(request: UpsertDocumentRequest) -> dict[str, Any]:
        if context_index is None:
            raise HTTPException(status_code=409, detail="Agent context indices are externally managed")
        try:
            context_index.upsert(request.id, request.payload, texts=request.texts)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"id": request.id, "indexed": len(context_index)}

    @app.post("/resolve/context")
    async def resolve_context(request: ResolveRequest) -> dict[str, Any]:
        try:
            documents = await agent.resolve_context(request.prompt)
        except InvalidPromptError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except RetrievalError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"documents": [asdict(document) for document in documents]}

    @app.post("/resolve/tools")
    async def resolve_tools(request: ResolveRequest) -> dict[str, Any]:
        try:
            tools = await agent.resolve_tools(request.prompt)
        except InvalidPromptError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except RetrievalError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"tools": [tool.model_dump() for tool in tools]}

    @app.get("/traces")
    async def traces(limit: int = 20) -> dict[str, Any]:
        return {"items": [asdict(record) for record in trace_store.list_recent(limit=limit)]}

    @app.get("/traces/{trace_id}")
    async def trace_detail(trace_id: str) -> dict[str, Any]:
        try:
            record = trace_store.get(trace_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return asdict(record)

    @app.get("/metrics")
    async def metrics() -> dict[str, Any]:
        return trace_store.summary()

    return app


app = create_app()
