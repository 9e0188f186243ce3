"""Split prose into chunks that fit a text-to-speech request budget.

The budget is measured in bytes of the UTF-8 encoding, which is how the
speech backend counts its input limit.

Text is split at paragraph boundaries (two or more newlines) where possible.
A paragraph that is too long on its own is split at sentence boundaries
(``.``, ``!`` or ``?`` followed by whitespace). A sentence that is too long
on its own cannot be split without breaking it mid-sentence, so the whole
operation fails with :class:`InputTooLongError`.

Adjacent units are packed greedily: a unit is merged with the next one as
long as the result still fits. Paragraphs are re-joined with a single
newline rather than their original blank-line run; sentences keep their
terminator and trailing whitespace, so they are joined with nothing.
"""

import re

from articlecast.core.errors import InputTooLongError, InvalidArgumentError

PARAGRAPH_BOUNDARY = re.compile(r"\n{2,}")
# Capturing group so re.split() hands back the boundaries it consumed.
# ASCII whitespace only: a no-break space does not end a sentence.
SENTENCE_BOUNDARY = re.compile(r"([.!?][ \t\n\f\r]+)")

PARAGRAPH_SEPARATOR = "\n"
SENTENCE_SEPARATOR = ""


def byte_len(text: str) -> int:
    """Length of text in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def split_text(max_bytes: int, text: str) -> list[str]:
    """
    Split text into ordered chunks of at most max_bytes bytes each.

    Args:
        max_bytes: Upper bound for the UTF-8 length of every chunk
        text: Text to split

    Returns:
        Chunks in reading order. Text that already fits is returned as a
        single unchanged chunk, including the empty string.

    Raises:
        InvalidArgumentError: If max_bytes is not positive
        InputTooLongError: If a single sentence exceeds max_bytes
    """
    if max_bytes <= 0:
        raise InvalidArgumentError(f"max_bytes must be positive, got {max_bytes}")
    if byte_len(text) <= max_bytes:
        return [text]
    return split_paragraphs(max_bytes, text)


def split_paragraphs(max_bytes: int, text: str) -> list[str]:
    """
    Split text at paragraph boundaries and pack paragraphs greedily.

    Paragraphs longer than max_bytes are handed to split_sentences() and
    never merged with their neighbours.
    """
    paragraphs = PARAGRAPH_BOUNDARY.split(text)
    separator_len = byte_len(PARAGRAPH_SEPARATOR)
    chunks: list[str] = []

    i = 0
    while i < len(paragraphs):
        current = paragraphs[i]
        current_len = byte_len(current)
        i += 1

        if current_len > max_bytes:
            chunks.extend(split_sentences(max_bytes, current))
            continue

        while i < len(paragraphs):
            next_len = byte_len(paragraphs[i])
            if current_len + separator_len + next_len > max_bytes:
                break
            current += PARAGRAPH_SEPARATOR + paragraphs[i]
            current_len += separator_len + next_len
            i += 1

        chunks.append(current)

    return chunks


def split_sentences(max_bytes: int, paragraph: str) -> list[str]:
    """
    Split a paragraph at sentence boundaries and pack sentences greedily.

    Each sentence keeps the terminator and whitespace that follow it; the
    last sentence keeps whatever trailing text the paragraph had.

    Raises:
        InputTooLongError: If any single sentence exceeds max_bytes
    """
    sentences = _sentences(paragraph)

    for sentence in sentences:
        size = byte_len(sentence)
        if size > max_bytes:
            raise InputTooLongError(size, max_bytes)

    return _pack(sentences, max_bytes, SENTENCE_SEPARATOR)


def _sentences(paragraph: str) -> list[str]:
    """Cut a paragraph into sentences with their boundaries re-attached."""
    # [text, boundary, text, boundary, ..., tail]
    parts = SENTENCE_BOUNDARY.split(paragraph)
    sentences = [parts[i] + parts[i + 1] for i in range(0, len(parts) - 1, 2)]
    sentences.append(parts[-1])
    return sentences


def _pack(units: list[str], max_bytes: int, separator: str) -> list[str]:
    """Greedily merge adjacent units (each already within budget)."""
    separator_len = byte_len(separator)
    chunks: list[str] = []
    current = units[0]
    current_len = byte_len(current)

    for unit in units[1:]:
        unit_len = byte_len(unit)
        if current_len + separator_len + unit_len <= max_bytes:
            current += separator + unit
            current_len += separator_len + unit_len
        else:
            chunks.append(current)
            current, current_len = unit, unit_len

    chunks.append(current)
    return chunks
