"""
Text extraction from uploaded files.

Plain text is decoded as-is. PDFs are transcribed by the generation model
first, then by a printable-ASCII heuristic over the raw bytes. When neither
yields usable text a placeholder naming the file is returned, so extraction
never fails an upload.

Dependencies: askmynotes.core.grounding.generation
System role: First stage of document ingestion pipeline
"""

import logging
import re
from pathlib import PurePosixPath

from askmynotes.core.grounding.generation import GenerationClient

logger = logging.getLogger(__name__)

MIN_USABLE_CHARS = 10

PDF_EXTRACTION_INSTRUCTION = (
    "Extract ALL text content from this PDF document. Return ONLY the extracted text, "
    "preserving structure, headings, and paragraphs. No commentary."
)

_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n\r\t]")
_WHITESPACE_RUN = re.compile(r"\s{3,}")


def placeholder_text(filename: str) -> str:
    """Stand-in content for files with no recoverable text."""
    return (
        f"[Document: {filename} - Text extraction was limited. "
        "The document may contain images or complex formatting.]"
    )


def heuristic_pdf_text(data: bytes) -> str:
    """
    Recover readable runs of text straight from PDF bytes.

    Bytes are read as UTF-8 with undecodable sequences skipped. Non-printable
    characters become spaces, runs of 3+ whitespace become
    line breaks, and lines shorter than MIN_USABLE_CHARS after trimming are
    dropped.
    """
    decoded = data.decode("utf-8", errors="ignore")
    cleaned = _WHITESPACE_RUN.sub("\n", _NON_PRINTABLE.sub(" ", decoded)).strip()
    lines = (line.strip() for line in cleaned.split("\n"))
    return "\n".join(line for line in lines if len(line) >= MIN_USABLE_CHARS)


def _extension(filename: str) -> str:
    return PurePosixPath(filename.lower()).suffix


class TextExtractor:
    """Best-effort bytes-to-text conversion."""

    def __init__(self, generation: GenerationClient | None = None) -> None:
        """
        Args:
            generation: Model used for PDF transcription; heuristic only when None
        """
        self._generation = generation

    async def extract(self, data: bytes, filename: str) -> str:
        """
        Produce text for an uploaded file. Never raises.

        Args:
            data: Raw file bytes
            filename: Original filename (extension selects the strategy)

        Returns:
            str: Extracted text, or the placeholder when under MIN_USABLE_CHARS
        """
        extension = _extension(filename)
        if extension == ".txt":
            text = data.decode("utf-8", errors="replace")
        elif extension == ".pdf":
            text = await self._extract_pdf(data, filename)
        else:
            logger.warning(
                f"{__name__}:extract - Unsupported extension, no text extracted",
                extra={"doc_filename": filename, "extension": extension},
            )
            text = ""

        if len(text.strip()) < MIN_USABLE_CHARS:
            logger.warning(
                f"{__name__}:extract - Extraction yielded no usable text, using placeholder",
                extra={"doc_filename": filename, "byte_size": len(data)},
            )
            return placeholder_text(filename)
        return text

    async def _extract_pdf(self, data: bytes, filename: str) -> str:
        if self._generation is not None:
            try:
                text = await self._generation.extract_document_text(
                    data,
                    mime_type="application/pdf",
                    instruction=PDF_EXTRACTION_INSTRUCTION,
                )
                if len(text.strip()) >= MIN_USABLE_CHARS:
                    logger.info(
                        f"{__name__}:_extract_pdf - Model extraction succeeded",
                        extra={"doc_filename": filename, "chars": len(text)},
                    )
                    return text
                logger.warning(
                    f"{__name__}:_extract_pdf - Model extraction near-empty, falling back",
                    extra={"doc_filename": filename},
                )
            except Exception as e:
                logger.warning(
                    f"{__name__}:_extract_pdf - Model extraction failed, falling back",
                    extra={"doc_filename": filename, "error": str(e), "error_type": type(e).__name__},
                )

        return heuristic_pdf_text(data)
