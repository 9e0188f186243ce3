"""Text preparation for speech synthesis."""

from articlecast.text.chunker import split_paragraphs, split_sentences, split_text

__all__ = [
    "split_paragraphs",
    "split_sentences",
    "split_text",
]
