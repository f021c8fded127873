"""
Test suite for TextExtractor.

Tests plain-text decoding, model-first PDF transcription, the byte-level
fallback and the placeholder for files with no usable text.

System role: Verification of the extraction stage of ingestion
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from askmynotes.core.document_processing.text_extractor import (
    PDF_EXTRACTION_INSTRUCTION,
    TextExtractor,
    heuristic_pdf_text,
    placeholder_text,
)
from askmynotes.core.exceptions import UpstreamRateLimitedError

RAW_PDF = b"%PDF-1.4\x00\x01 Photosynthesis converts light energy\x00\x02"


@pytest.fixture
def mock_generation() -> MagicMock:
    """Generation client with a mocked extract_document_text."""
    generation = MagicMock()
    generation.extract_document_text = AsyncMock()
    return generation


class TestPlainText:
    """Test suite for .txt extraction."""

    async def test_should_decode_utf8(self) -> None:
        """Test text files are returned as decoded."""
        extractor = TextExtractor()

        text = await extractor.extract("Mitosis has four phases.".encode("utf-8"), "bio.txt")

        assert text == "Mitosis has four phases."

    async def test_should_replace_invalid_bytes(self) -> None:
        """Test undecodable bytes do not fail extraction."""
        extractor = TextExtractor()

        text = await extractor.extract(b"Cell division \xff\xfe notes here", "bio.txt")

        assert text.startswith("Cell division")
        assert "notes here" in text

    async def test_extension_match_should_ignore_case(self) -> None:
        extractor = TextExtractor()

        text = await extractor.extract(b"Ribosomes build proteins.", "NOTES.TXT")

        assert text == "Ribosomes build proteins."

    async def test_near_empty_text_should_become_placeholder(self) -> None:
        """Test fewer than 10 usable characters yields the placeholder."""
        extractor = TextExtractor()

        text = await extractor.extract(b"  hi  \n", "short.txt")

        assert text == placeholder_text("short.txt")


class TestPdf:
    """Test suite for .pdf extraction."""

    async def test_model_transcription_should_be_used_first(self, mock_generation: MagicMock) -> None:
        """Test model output is returned when it is usable."""
        # Arrange
        mock_generation.extract_document_text.return_value = "Chapter 1\nThe cell cycle has phases."
        extractor = TextExtractor(mock_generation)

        # Act
        text = await extractor.extract(RAW_PDF, "bio.pdf")

        # Assert
        assert text == "Chapter 1\nThe cell cycle has phases."
        mock_generation.extract_document_text.assert_awaited_once_with(
            RAW_PDF,
            mime_type="application/pdf",
            instruction=PDF_EXTRACTION_INSTRUCTION,
        )

    async def test_model_failure_should_fall_back_to_heuristic(self, mock_generation: MagicMock) -> None:
        """Test a failed model call is not an extraction failure."""
        mock_generation.extract_document_text.side_effect = UpstreamRateLimitedError()
        extractor = TextExtractor(mock_generation)

        text = await extractor.extract(RAW_PDF, "bio.pdf")

        assert text == "Photosynthesis converts light energy"

    async def test_near_empty_model_output_should_fall_back(self, mock_generation: MagicMock) -> None:
        mock_generation.extract_document_text.return_value = "   "
        extractor = TextExtractor(mock_generation)

        text = await extractor.extract(RAW_PDF, "bio.pdf")

        assert text == "Photosynthesis converts light energy"

    async def test_without_model_should_use_heuristic(self) -> None:
        extractor = TextExtractor()

        text = await extractor.extract(RAW_PDF, "bio.pdf")

        assert text == "Photosynthesis converts light energy"

    async def test_empty_pdf_should_become_placeholder(self) -> None:
        """Test a 0-byte PDF still produces text (the placeholder)."""
        extractor = TextExtractor()

        text = await extractor.extract(b"", "empty.pdf")

        assert text == placeholder_text("empty.pdf")
        assert "empty.pdf" in text


class TestHeuristicPdfText:
    """Test suite for heuristic_pdf_text()."""

    def test_should_drop_short_lines(self) -> None:
        """Test lines under 10 characters are discarded."""
        data = b"obj\x00\x00\x00The mitochondria is the powerhouse\x00\x00\x00endobj"

        assert heuristic_pdf_text(data) == "The mitochondria is the powerhouse"

    def test_binary_noise_should_yield_nothing(self) -> None:
        assert heuristic_pdf_text(bytes(range(0, 32)) * 4) == ""

    def test_multibyte_character_should_count_as_one(self) -> None:
        """Test a UTF-8 letter collapses to a single space, not one per byte."""
        data = "Prophase in café notes".encode("utf-8") + b"\xff\xfe"

        assert heuristic_pdf_text(data) == "Prophase in caf  notes"


class TestUnsupported:
    """Test suite for unknown extensions."""

    async def test_unknown_extension_should_become_placeholder(self) -> None:
        extractor = TextExtractor()

        text = await extractor.extract(b"Plenty of readable text here.", "notes.docx")

        assert text == placeholder_text("notes.docx")
