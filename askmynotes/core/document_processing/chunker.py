"""
Sliding-window text chunker.

Splits extracted text into fixed-size overlapping windows and attaches a
coarse page estimate to each. Page numbers are a linear heuristic over the
text length, not real page boundaries, and are approximate by contract.

Dependencies: askmynotes.core.exceptions
System role: Second stage of document ingestion pipeline
"""

import math

from askmynotes.core.document_processing.models import ChunkDraft
from askmynotes.core.exceptions import ChunkingConfigError

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200
CHARS_PER_ESTIMATED_PAGE = 3000


def validate_window(size: int, overlap: int) -> None:
    """
    Reject windows that would never advance.

    Raises:
        ChunkingConfigError: If size <= 0, overlap < 0 or overlap >= size
    """
    if size <= 0 or overlap < 0 or overlap >= size:
        raise ChunkingConfigError(size, overlap)


def chunk_text(
    text: str,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """
    Split text into overlapping windows.

    Each chunk is `text[start:start + size]`; `start` advances by
    `size - overlap` until it reaches the end of the text.

    Args:
        text: Text to split
        size: Window length in characters
        overlap: Characters shared by consecutive windows

    Returns:
        list[str]: Chunks in order (empty for empty text)

    Raises:
        ChunkingConfigError: On an invalid window
    """
    validate_window(size, overlap)
    stride = size - overlap
    chunks = []
    start = 0
    while start < len(text):
        chunks.append(text[start:start + size])
        start += stride
    return chunks


def estimate_total_pages(text_length: int) -> int:
    """Estimated page count for a text of the given length."""
    return max(1, math.ceil(text_length / CHARS_PER_ESTIMATED_PAGE))


def estimate_page(chunk_index: int, text_length: int, stride: int) -> int:
    """
    Estimated page of the chunk starting at `chunk_index * stride`.

    Args:
        chunk_index: Zero-based chunk ordinal
        text_length: Length of the whole text
        stride: Window advance (size - overlap)

    Returns:
        int: Page number, at least 1
    """
    if text_length <= 0:
        return 1
    pages = estimate_total_pages(text_length)
    return max(1, math.ceil((chunk_index * stride / text_length) * pages))


def build_chunks(
    text: str,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[ChunkDraft]:
    """
    Chunk text and attach ordinals and page estimates.

    Args:
        text: Extracted document text
        size: Window length in characters
        overlap: Characters shared by consecutive windows

    Returns:
        list[ChunkDraft]: Drafts with chunk_index 0..n-1
    """
    pieces = chunk_text(text, size, overlap)
    stride = size - overlap
    return [
        ChunkDraft(
            content=piece,
            page_number=estimate_page(index, len(text), stride),
            chunk_index=index,
        )
        for index, piece in enumerate(pieces)
    ]
