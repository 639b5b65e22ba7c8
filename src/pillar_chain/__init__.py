"""Pillar Chain package."""

from .config import PillarChainConfig, load_config
from .errors import (
    BufferAllocationError,
    GenerationError,
    KnowledgeBaseError,
    MissingLinkError,
    NoForwardLinksError,
)
from .generator import GenerationResult, SentenceGenerator, generate_sentence
from .knowledge import END_OF_LINE, START_OF_LINE, KnowledgeBase, Link, Word, WordCategory
from .selection import NumpyRandomSource, RandomSource, pick_index

__all__ = [
    "PillarChainConfig",
    "load_config",
    "BufferAllocationError",
    "GenerationError",
    "KnowledgeBaseError",
    "MissingLinkError",
    "NoForwardLinksError",
    "GenerationResult",
    "SentenceGenerator",
    "generate_sentence",
    "END_OF_LINE",
    "START_OF_LINE",
    "KnowledgeBase",
    "Link",
    "Word",
    "WordCategory",
    "NumpyRandomSource",
    "RandomSource",
    "pick_index",
]

__version__ = "0.1.0"
