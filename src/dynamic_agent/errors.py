"""Error types raised by dynamic context and tool resolution."""

from __future__ import annotations


class VectorStoreError(Exception):
    """Raised by a retrieval index when a query cannot be served."""


class ResolutionError(Exception):
    """Base class for terminal failures of a resolution call."""


class InvalidPromptError(ResolutionError):
    """The prompt carries no text that can drive similarity search."""

    def __init__(self, message: str = "Invalid prompt") -> None:
        super().__init__(message)


class RetrievalError(ResolutionError):
    """A configured retrieval source failed; the whole fan-out is discarded."""

    def __init__(self, source_position: int, cause: BaseException) -> None:
        super().__init__(f"Retrieval source #{source_position} failed: {cause}")
        self.source_position = source_position
