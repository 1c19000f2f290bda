"""Unit tests for the SentenceChunker."""

from __future__ import annotations

import pytest

from docembed.services.ingestion.chunker import SentenceChunker


def _sentences(n: int) -> str:
    return " ".join(f"Sentence number {i} is here." for i in range(1, n + 1))


class TestSplitSentences:
    def test_basic_punctuation(self) -> None:
        assert SentenceChunker.split_sentences("One. Two! Three? Four") == [
            "One.",
            "Two!",
            "Three?",
            "Four",
        ]

    def test_abbreviations_do_not_split(self) -> None:
        text = "Dr. Smith met Mr. Jones at St. Mary's. They talked."
        assert SentenceChunker.split_sentences(text) == [
            "Dr. Smith met Mr. Jones at St. Mary's.",
            "They talked.",
        ]

    def test_abbreviation_needs_whole_word(self) -> None:
        assert SentenceChunker.split_sentences("I ate a taco. It was good.") == [
            "I ate a taco.",
            "It was good.",
        ]

    def test_closing_quote_stays_with_sentence(self) -> None:
        assert SentenceChunker.split_sentences('He said "stop." Then left.') == [
            'He said "stop."',
            "Then left.",
        ]

    def test_newlines_collapse(self) -> None:
        assert SentenceChunker.split_sentences("First line\ncontinues.\n\nSecond.") == [
            "First line continues.",
            "Second.",
        ]


class TestSentenceChunker:
    def test_defaults(self) -> None:
        chunker = SentenceChunker()
        assert chunker.window_size == 8
        assert chunker.overlap == 0

    def test_seventeen_sentences_make_three_chunks(self) -> None:
        chunks = SentenceChunker().chunk(_sentences(17))

        assert len(chunks) == 3
        assert chunks[0].startswith("Sentence number 1 ")
        assert chunks[0].endswith("Sentence number 8 is here.")
        assert chunks[1].startswith("Sentence number 9 ")
        assert chunks[2] == "Sentence number 17 is here."

    def test_exact_multiple_has_no_trailing_chunk(self) -> None:
        assert len(SentenceChunker().chunk(_sentences(16))) == 2

    def test_short_text_is_one_chunk(self) -> None:
        assert SentenceChunker().chunk("Just one sentence.") == ["Just one sentence."]

    def test_overlap_shares_sentences(self) -> None:
        chunks = SentenceChunker(window_size=4, overlap=2).chunk(_sentences(10))

        assert len(chunks) == 4
        assert chunks[1].startswith("Sentence number 3 ")
        assert chunks[-1].endswith("Sentence number 10 is here.")

    def test_chunking_is_idempotent(self) -> None:
        chunker = SentenceChunker()
        text = _sentences(20)
        assert chunker.chunk(text) == chunker.chunk(text)

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_empty_input(self, text: str) -> None:
        assert SentenceChunker().chunk(text) == []

    @pytest.mark.parametrize("window,overlap", [(4, 4), (4, 5), (0, 0), (4, -1)])
    def test_invalid_window(self, window: int, overlap: int) -> None:
        with pytest.raises(ValueError):
            SentenceChunker(window_size=window, overlap=overlap)
