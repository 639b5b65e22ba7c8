from __future__ import annotations

import logging

import pytest

from pillar_chain.buffer import GrowthStatus, SentenceBuffer, render_pillar
from pillar_chain.errors import BufferAllocationError
from pillar_chain.knowledge import Word, WordCategory

PLAIN = WordCategory.PLAIN
TIGHT_LEFT = WordCategory.SUPPRESS_LEFT_SPACE
TIGHT_RIGHT = WordCategory.SUPPRESS_RIGHT_SPACE


def _word(text: str, category: WordCategory = PLAIN) -> Word:
    return Word(text=text, occurrences=1, category=category)


@pytest.mark.parametrize(
    ("category", "rendered"),
    [
        (PLAIN, " are "),
        (TIGHT_LEFT, ", "),
        (TIGHT_RIGHT, " ("),
    ],
)
def test_pillar_rendering(category: WordCategory, rendered: str) -> None:
    text = "are" if category is PLAIN else ("," if category is TIGHT_LEFT else "(")
    assert render_pillar(_word(text, category)) == rendered


def test_marker_pillar_is_bracketed(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        buffer = SentenceBuffer.for_pillar(_word("<end>", WordCategory.ENDS_SENTENCE))
    assert buffer.text == " [<end>] "
    assert "unexpectedly selected as pillar" in caplog.text


def test_plain_words_are_space_separated() -> None:
    buffer = SentenceBuffer.for_pillar(_word("are"))
    assert buffer.grow_right(_word("great")).ok
    assert buffer.grow_left(_word("cats")).ok
    assert buffer.text == " cats are great "


def test_right_growth_tight_punctuation() -> None:
    buffer = SentenceBuffer.for_pillar(_word("yes"))
    buffer.grow_right(_word(",", TIGHT_LEFT))
    buffer.grow_right(_word("(", TIGHT_RIGHT))
    buffer.grow_right(_word("maybe"))
    assert buffer.text == " yes, (maybe "


def test_left_growth_tight_punctuation() -> None:
    buffer = SentenceBuffer.for_pillar(_word("maybe"))
    buffer.grow_left(_word("(", TIGHT_RIGHT))
    buffer.grow_left(_word(",", TIGHT_LEFT))
    buffer.grow_left(_word("yes"))
    assert buffer.text == " yes, (maybe "


def test_tight_left_only_removes_a_space() -> None:
    buffer = SentenceBuffer.for_pillar(_word("(", TIGHT_RIGHT))
    buffer.grow_right(_word(")", TIGHT_LEFT))
    assert buffer.text == " () "


def test_size_counts_bytes_and_terminator() -> None:
    buffer = SentenceBuffer.for_pillar(_word("are"))
    assert buffer.size == len(" are ") + 1
    growth = buffer.grow_right(_word("café"))
    assert growth.status is GrowthStatus.GROWN
    assert growth.size == buffer.size == len(" are ") + 1 + len("café".encode("utf-8")) + 1


def test_overflow_leaves_buffer_untouched(caplog: pytest.LogCaptureFixture) -> None:
    buffer = SentenceBuffer.for_pillar(_word("are"), max_size=12)
    assert buffer.grow_right(_word("great")).ok
    before = (buffer.text, buffer.size)
    with caplog.at_level(logging.WARNING):
        growth = buffer.grow_left(_word("cats"))
    assert growth.status is GrowthStatus.OVERFLOW
    assert not growth.ok
    assert (buffer.text, buffer.size) == before
    assert "avoid size overflow" in caplog.text


def test_allocation_failure_is_degraded(monkeypatch: pytest.MonkeyPatch) -> None:
    buffer = SentenceBuffer.for_pillar(_word("are"))

    def exhausted(text: str, word: Word) -> str:
        raise MemoryError

    monkeypatch.setattr("pillar_chain.buffer.render_right", exhausted)
    growth = buffer.grow_right(_word("great"))
    assert growth.status is GrowthStatus.ALLOCATION_FAILED
    assert buffer.text == " are "


def test_initial_buffer_failure_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def exhausted(word: Word) -> str:
        raise MemoryError

    monkeypatch.setattr("pillar_chain.buffer.render_pillar", exhausted)
    with pytest.raises(BufferAllocationError):
        SentenceBuffer.for_pillar(_word("are"))
