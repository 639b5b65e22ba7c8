"""Initial context window around the pillar word.

The window is a flat list of ``2 * order + 1`` word identifiers with the
pillar at index ``order``. Initialisation first picks one forward link of the
pillar to fill the right half, then walks backward links to fill the left half
one slot at a time, from the pillar outward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .errors import MissingLinkError, NoForwardLinksError
from .knowledge import END_OF_LINE, START_OF_LINE, KnowledgeBase, find_link
from .logging import get_logger
from .selection import RandomSource, pick_index

LOGGER = get_logger(__name__)


@dataclass
class ContextWindow:
    order: int
    slots: List[int] = field(default_factory=list)

    @classmethod
    def around(cls, pillar: int, order: int) -> ContextWindow:
        """Return a window of markers with ``pillar`` at its centre."""
        slots = [START_OF_LINE] * order + [pillar] + [END_OF_LINE] * order
        return cls(order=order, slots=slots)

    @property
    def pillar(self) -> int:
        return self.slots[self.order]

    def left_half(self) -> List[int]:
        return list(self.slots[: self.order])

    def right_half(self) -> List[int]:
        return list(self.slots[self.order + 1 :])


def _log_window(knowledge: KnowledgeBase, window: ContextWindow) -> None:
    LOGGER.error("Sequence was:")
    for position, word_id in enumerate(window.slots):
        LOGGER.error("[%d] %s", position, knowledge[word_id].text)


def init_sequence(knowledge: KnowledgeBase, pillar: int, source: RandomSource) -> ContextWindow:
    """Build the context window around ``pillar``.

    Raises :class:`NoForwardLinksError` when the pillar has no successor and
    :class:`MissingLinkError` when a backward link needed to fill the left half
    is absent.
    """
    order = knowledge.order
    window = ContextWindow.around(pillar, order)
    slots = window.slots
    word = knowledge[pillar]

    if not word.forward_links:
        LOGGER.error("First word %r has no forward links.", word.text)
        raise NoForwardLinksError(word.text)

    links = word.forward_links
    chosen = links[
        pick_index(
            sum(link.occurrences for link in links),
            [link.occurrences for link in links],
            source,
        )
    ]
    slots[order + 1 : 2 * order] = chosen.key
    slots[2 * order] = chosen.targets[pick_index(chosen.occurrences, chosen.target_occurrences, source)]

    for step in range(order):
        slot = order - step - 1
        owner = knowledge[slots[2 * order - step - 1]]
        key = slots[slot + 1 : slot + order]
        index = find_link(owner.backward_links, key)
        if index is None:
            LOGGER.error(
                "Unexpectedly, no back link was found at step %d: expected a back link with %s from %r.",
                step,
                knowledge.describe(key),
                owner.text,
            )
            _log_window(knowledge, window)
            raise MissingLinkError("backward", owner.text, knowledge.describe(key))
        link = owner.backward_links[index]
        slots[slot] = link.targets[pick_index(link.occurrences, link.target_occurrences, source)]

    LOGGER.debug("Initial sequence: %s", knowledge.describe(slots))
    return window
