"""Sentence-window text chunking.

Splits document text into sentences and groups them into fixed windows of
``window_size`` sentences (8 by default).  Consecutive windows advance by
``window_size - overlap`` sentences, so with the default overlap of 0 every
sentence lands in exactly one chunk.

The sentence splitter is abbreviation-aware: "Dr. Smith" and "vs. them" do
not end a sentence.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

# Common abbreviations that should NOT trigger a sentence split.
_ABBREVIATIONS = frozenset(
    {
        "Dr",
        "Mr",
        "Mrs",
        "Ms",
        "Prof",
        "Jr",
        "Sr",
        "St",
        "Ave",
        "Blvd",
        "Vol",
        "No",
        "vs",
        "etc",
        "approx",
        "dept",
        "est",
        "govt",
        "inc",
        "ltd",
        "co",
        "ft",
        "e.g",
        "i.e",
    }
)

# Whole-word match only, so "Taco." still ends a sentence.
_ABBREVIATION_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(a) for a in sorted(_ABBREVIATIONS, key=len, reverse=True)) + r")\."
)
_SENTENCE_END = re.compile(r"[.!?]+[\"')\]]*(?:\s|$)")
_WHITESPACE = re.compile(r"\s+")


class SentenceChunker:
    """Groups sentences into fixed-size windows.

    Parameters
    ----------
    window_size:
        Sentences per chunk (default 8).
    overlap:
        Sentences shared by consecutive chunks (default 0).  Must be
        smaller than *window_size*.
    """

    def __init__(self, window_size: int = 8, overlap: int = 0) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        if overlap < 0 or overlap >= window_size:
            raise ValueError(
                f"overlap must be in [0, window_size), got {overlap} for window_size {window_size}"
            )
        self._window_size = window_size
        self._overlap = overlap

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def chunk(self, text: str) -> list[str]:
        """Split *text* into chunk strings, in document order.

        Empty or whitespace-only input returns an empty list.  The same
        input always produces the same chunks.
        """
        if not text or not text.strip():
            return []

        sentences = self.split_sentences(text)
        step = self._window_size - self._overlap
        chunks: list[str] = []
        for start in range(0, len(sentences), step):
            chunks.append(" ".join(sentences[start : start + self._window_size]))
            if start + self._window_size >= len(sentences):
                break

        logger.debug(
            "text_chunked",
            sentences=len(sentences),
            chunks=len(chunks),
            window_size=self._window_size,
            overlap=self._overlap,
        )
        return chunks

    @staticmethod
    def split_sentences(text: str) -> list[str]:
        """Split *text* at sentence boundaries while respecting abbreviations.

        Handles ``.``, ``!``, ``?`` (optionally followed by a closing quote
        or bracket) before whitespace or end-of-string.  Internal whitespace
        runs, including line breaks, collapse to single spaces.

        Uses a masking approach instead of a variable-width lookbehind
        (which Python's ``re`` module does not support).
        """
        # Replace the abbreviation's period with '\x00' (same length, keeps
        # indices aligned with the original text).
        masked = _ABBREVIATION_PATTERN.sub(lambda m: m.group(1) + "\x00", text)

        sentences: list[str] = []
        last = 0
        for match in _SENTENCE_END.finditer(masked):
            end = match.end()
            sentence = _WHITESPACE.sub(" ", text[last:end]).strip()
            if sentence:
                sentences.append(sentence)
            last = end

        # Trailing text that didn't end with punctuation.
        remainder = _WHITESPACE.sub(" ", text[last:]).strip()
        if remainder:
            sentences.append(remainder)

        return sentences
