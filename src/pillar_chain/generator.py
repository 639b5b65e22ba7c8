# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Reply generation: pick a pillar, then grow the sentence both ways."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

from .buffer import SentenceBuffer
from .config import PillarChainConfig
from .errors import KnowledgeBaseError
from .extension import Credits, Stop, extend_left, extend_right
from .knowledge import KnowledgeBase
from .logging import configure_logging, get_logger
from .pillar import select_pillar
from .selection import NumpyRandomSource, RandomSource
from .sequence import init_sequence

LOGGER = get_logger(__name__)

Utterance = Union[str, Sequence[str], None]


@dataclass
class GenerationResult:
    sentence: str
    pillar: int
    credits_used: int
    degraded: bool = False


def _split_utterance(utterance: Utterance) -> Optional[list[str]]:
    if utterance is None:
        return None
    if isinstance(utterance, str):
        return utterance.split()
    return list(utterance)


class SentenceGenerator:
    """Generate sentences from a read-only :class:`KnowledgeBase`.

    A generator holds no per-request state besides its random source, so one
    knowledge base may be shared by generators running in separate threads.
    """

    def __init__(
        self,
        knowledge: KnowledgeBase,
        config: Optional[PillarChainConfig] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        self.knowledge = knowledge
        self.config = config or PillarChainConfig()
        self.random_source = random_source or NumpyRandomSource(self.config.engine.seed)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        config: Optional[PillarChainConfig] = None,
        random_source: Optional[RandomSource] = None,
    ) -> SentenceGenerator:
        config = config or PillarChainConfig()
        configure_logging(config.logging.level)
        knowledge = KnowledgeBase.from_dict(payload, validate=config.knowledge.validate)
        if knowledge.order != config.knowledge.order:
            msg = f"Knowledge base has order {knowledge.order}, configuration expects {config.knowledge.order}"
            raise KnowledgeBaseError(msg)
        return cls(knowledge, config=config, random_source=random_source)

    def generate(
        self,
        seed_utterance: Utterance = None,
        exclusions: Sequence[str] = (),
        *,
        max_words: Optional[int] = None,
    ) -> GenerationResult:
        """Return a sentence grown around a pillar chosen from ``seed_utterance``.

        Raises :class:`~pillar_chain.errors.GenerationError` when the knowledge
        base cannot support the request. Running out of room only shortens the
        sentence.
        """
        knowledge = self.knowledge
        source = self.random_source
        budget = self.config.engine.max_reply_words if max_words is None else max_words
        credits = Credits(budget)

        pillar = select_pillar(knowledge, _split_utterance(seed_utterance), exclusions, source)
        window = init_sequence(knowledge, pillar, source)
        buffer = SentenceBuffer.for_pillar(knowledge[pillar], self.config.engine.max_sentence_size)

        right = extend_right(knowledge, window.right_half(), buffer, credits, source)
        left = extend_left(knowledge, window.left_half(), buffer, credits, source)

        sentence = buffer.text[1:] if buffer.text.startswith(" ") else buffer.text
        degraded = Stop.DEGRADED in (right, left)
        LOGGER.debug(
            "Generated %d characters around %r (right: %s, left: %s)",
            len(sentence),
            knowledge[pillar].text,
            right.value,
            left.value,
        )
        return GenerationResult(
            sentence=sentence,
            pillar=pillar,
            credits_used=budget - credits.remaining,
            degraded=degraded,
        )


def generate_sentence(
    knowledge: KnowledgeBase,
    seed_utterance: Utterance = None,
    exclusions: Sequence[str] = (),
    *,
    config: Optional[PillarChainConfig] = None,
    random_source: Optional[RandomSource] = None,
) -> str:
    """Generate one sentence and return its text."""
    generator = SentenceGenerator(knowledge, config=config, random_source=random_source)
    return generator.generate(seed_utterance, exclusions).sentence
