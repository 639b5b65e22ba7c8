from __future__ import annotations

import sys
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from pillar_chain.config import PillarChainConfig
from pillar_chain.knowledge import KnowledgeBase, Link, Word, WordCategory

START = "<start>"
END = "<end>"


class ScriptedSource:
    """Random source replaying fixed draws, then returning zero."""

    def __init__(self, draws: Iterable[int] = ()) -> None:
        self.draws = list(draws)
        self.calls: list[int] = []

    def draw(self, upper: int) -> int:
        self.calls.append(upper)
        value = self.draws.pop(0) if self.draws else 0
        assert 0 <= value < upper
        return value


def _links(table: Mapping[tuple[int, ...], Counter]) -> tuple[Link, ...]:
    links = []
    for key, counter in table.items():
        targets = tuple(counter)
        counts = tuple(counter[target] for target in targets)
        links.append(Link(key=key, targets=targets, target_occurrences=counts, occurrences=sum(counts)))
    return tuple(links)


def build_knowledge(
    chains: Sequence[Sequence[str]],
    order: int = 2,
    categories: Optional[Mapping[str, WordCategory]] = None,
) -> KnowledgeBase:
    """Count the transitions of ``chains`` into a knowledge base."""
    categories = dict(categories or {})
    texts = [START, END]
    occurrences: Counter = Counter()
    for chain in chains:
        for token in chain:
            if token not in texts:
                texts.append(token)
            occurrences[token] += 1
    ids = {text: index for index, text in enumerate(texts)}
    forward: dict[int, dict[tuple[int, ...], Counter]] = defaultdict(lambda: defaultdict(Counter))
    backward: dict[int, dict[tuple[int, ...], Counter]] = defaultdict(lambda: defaultdict(Counter))
    for chain in chains:
        padded = [0] * order + [ids[token] for token in chain] + [1] * order
        for start in range(len(padded) - order):
            first, *key, last = padded[start : start + order + 1]
            forward[first][tuple(key)][last] += 1
            backward[last][tuple(key)][first] += 1
    words = []
    for text, word_id in ids.items():
        if word_id == 0:
            category = WordCategory.STARTS_SENTENCE
        elif word_id == 1:
            category = WordCategory.ENDS_SENTENCE
        else:
            category = categories.get(text, WordCategory.PLAIN)
        words.append(
            Word(
                text=text,
                occurrences=occurrences[text] or len(chains),
                category=category,
                forward_links=_links(forward[word_id]),
                backward_links=_links(backward[word_id]),
            )
        )
    knowledge = KnowledgeBase(order=order, words=tuple(words))
    knowledge.validate()
    return knowledge


@pytest.fixture
def config() -> PillarChainConfig:
    return PillarChainConfig()


@pytest.fixture
def cats() -> KnowledgeBase:
    return build_knowledge([["cats", "are", "great"]])


@pytest.fixture
def source() -> ScriptedSource:
    return ScriptedSource()
