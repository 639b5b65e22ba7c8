"""Read-only word association model consulted during generation.

Words are addressed by their index in :attr:`KnowledgeBase.words`. Each word
keeps two link tables: forward links (keyed by the words that followed it)
and backward links (keyed by the words that preceded it). A link's key holds
the ``order - 1`` words sitting between the owner and the link's targets, in
reading order for both directions, so that ``forward(t, key)`` listing ``w``
always mirrors ``backward(w, key)`` listing ``t``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import KnowledgeBaseError
from .logging import get_logger

LOGGER = get_logger(__name__)

START_OF_LINE = 0
END_OF_LINE = 1

ContextKey = Tuple[int, ...]


class WordCategory(str, Enum):
    PLAIN = "plain"
    STARTS_SENTENCE = "starts_sentence"
    ENDS_SENTENCE = "ends_sentence"
    SUPPRESS_LEFT_SPACE = "suppress_left_space"
    SUPPRESS_RIGHT_SPACE = "suppress_right_space"


@dataclass(frozen=True)
class Link:
    key: ContextKey
    targets: Tuple[int, ...]
    target_occurrences: Tuple[int, ...]
    occurrences: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Link:
        counts = tuple(int(value) for value in data["target_occurrences"])
        return cls(
            key=tuple(int(value) for value in data.get("key", ())),
            targets=tuple(int(value) for value in data["targets"]),
            target_occurrences=counts,
            occurrences=int(data.get("occurrences", sum(counts))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": list(self.key),
            "targets": list(self.targets),
            "target_occurrences": list(self.target_occurrences),
            "occurrences": self.occurrences,
        }


@dataclass(frozen=True)
class Word:
    text: str
    occurrences: int = 0
    category: WordCategory = WordCategory.PLAIN
    forward_links: Tuple[Link, ...] = ()
    backward_links: Tuple[Link, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Word:
        return cls(
            text=str(data["text"]),
            occurrences=int(data.get("occurrences", 0)),
            category=WordCategory(data.get("category", WordCategory.PLAIN.value)),
            forward_links=tuple(Link.from_dict(link) for link in data.get("forward_links", ())),
            backward_links=tuple(Link.from_dict(link) for link in data.get("backward_links", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "occurrences": self.occurrences,
            "category": self.category.value,
            "forward_links": [link.to_dict() for link in self.forward_links],
            "backward_links": [link.to_dict() for link in self.backward_links],
        }


def find_link(links: Sequence[Link], key: Sequence[int]) -> Optional[int]:
    """Return the index of the link whose key equals ``key`` exactly."""
    wanted = tuple(key)
    for index, link in enumerate(links):
        if link.key == wanted:
            return index
    return None


@dataclass(frozen=True)
class KnowledgeBase:
    """Immutable collection of words and their transition tables."""

    order: int
    words: Tuple[Word, ...]
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.order < 1:
            raise KnowledgeBaseError("order must be at least 1")
        object.__setattr__(self, "words", tuple(self.words))
        index: Dict[str, int] = {}
        for word_id, word in enumerate(self.words):
            index.setdefault(word.text, word_id)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.words)

    def __getitem__(self, word_id: int) -> Word:
        return self.words[word_id]

    def find(self, text: str) -> Optional[int]:
        return self._index.get(text)

    def describe(self, word_ids: Iterable[int]) -> List[str]:
        return [self.words[word_id].text for word_id in word_ids]

    # Construction ---------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, validate: bool = True) -> KnowledgeBase:
        words = data.get("words")
        if not isinstance(words, list):
            msg = "Expected 'words' list in knowledge payload"
            raise TypeError(msg)
        knowledge = cls(order=int(data["order"]), words=tuple(Word.from_dict(word) for word in words))
        if validate:
            knowledge.validate()
        LOGGER.debug("Loaded knowledge base with %d words (order %d)", len(knowledge), knowledge.order)
        return knowledge

    def to_dict(self) -> Dict[str, Any]:
        return {"order": self.order, "words": [word.to_dict() for word in self.words]}

    # Validation -----------------------------------------------------------------
    def validate(self) -> None:
        """Raise :class:`KnowledgeBaseError` unless the link tables are consistent."""
        if len(self.words) <= END_OF_LINE:
            raise KnowledgeBaseError("Knowledge base must define the start and end markers")
        if self.words[START_OF_LINE].category is not WordCategory.STARTS_SENTENCE:
            raise KnowledgeBaseError("Word 0 must be the start-of-sentence marker")
        if self.words[END_OF_LINE].category is not WordCategory.ENDS_SENTENCE:
            raise KnowledgeBaseError("Word 1 must be the end-of-sentence marker")

        forward: Dict[Tuple[int, ContextKey, int], int] = {}
        backward: Dict[Tuple[int, ContextKey, int], int] = {}
        for word_id, word in enumerate(self.words):
            for links, table, reverse in (
                (word.forward_links, forward, False),
                (word.backward_links, backward, True),
            ):
                seen: set[ContextKey] = set()
                for link in links:
                    self._check_link(word, link)
                    if link.key in seen:
                        msg = f"Duplicate link key {list(link.key)!r} on {word.text!r}"
                        raise KnowledgeBaseError(msg)
                    seen.add(link.key)
                    for target, count in zip(link.targets, link.target_occurrences):
                        # Both tables are stored as (earlier word, key, later word).
                        entry = (target, link.key, word_id) if reverse else (word_id, link.key, target)
                        table[entry] = table.get(entry, 0) + count

        if forward != backward:
            mismatched = sorted(set(forward.items()) ^ set(backward.items()))[:5]
            msg = f"Forward and backward links are not inverses; first mismatches: {mismatched!r}"
            raise KnowledgeBaseError(msg)

    def _check_link(self, word: Word, link: Link) -> None:
        if len(link.key) != self.order - 1:
            msg = f"Link key {list(link.key)!r} on {word.text!r} does not have {self.order - 1} words"
            raise KnowledgeBaseError(msg)
        if not link.targets or len(link.targets) != len(link.target_occurrences):
            msg = f"Link on {word.text!r} has mismatched targets and occurrences"
            raise KnowledgeBaseError(msg)
        if link.occurrences <= 0 or sum(link.target_occurrences) != link.occurrences:
            msg = f"Link on {word.text!r} has occurrences {link.occurrences} not matching its targets"
            raise KnowledgeBaseError(msg)
        if any(count < 0 for count in link.target_occurrences):
            raise KnowledgeBaseError(f"Link on {word.text!r} has a negative occurrence count")
        for word_id in (*link.key, *link.targets):
            if not 0 <= word_id < len(self.words):
                raise KnowledgeBaseError(f"Link on {word.text!r} references unknown word {word_id}")
