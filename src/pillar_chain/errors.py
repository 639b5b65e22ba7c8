"""Exceptions raised when a sentence cannot be generated at all."""

from __future__ import annotations

from typing import Sequence


class KnowledgeBaseError(ValueError):
    """The knowledge base is structurally inconsistent."""


class GenerationError(RuntimeError):
    """A generation request failed and produced no sentence."""


class NoForwardLinksError(GenerationError):
    def __init__(self, word: str) -> None:
        super().__init__(f"Pillar {word!r} has no forward links")
        self.word = word


class MissingLinkError(GenerationError):
    """A forward or backward link required by the walk does not exist."""

    def __init__(self, direction: str, word: str, key: Sequence[str]) -> None:
        super().__init__(f"No {direction} link from {word!r} with context {list(key)!r}")
        self.direction = direction
        self.word = word
        self.key = tuple(key)


class BufferAllocationError(GenerationError):
    """The initial sentence buffer could not be created."""
