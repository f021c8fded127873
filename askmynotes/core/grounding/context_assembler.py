"""
Context assembler.

Renders every chunk of a subject into one prompt context. Each chunk gets a
source label (filename, page, 1-based section) and every physical line gets
an absolute `L<n>` label that keeps counting across chunks, so evidence can
cite unambiguous ranges such as `L12-L15`. Rendering is a pure function of
the chunk rows: the same rows always produce byte-identical output.

Dependencies: sqlalchemy, askmynotes.boundary.db.CRUD
System role: Builds the grounding context for answers and study sets
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.boundary.db.CRUD.chunk_crud import chunk_crud
from askmynotes.boundary.db.CRUD.document_crud import document_crud

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n---\n\n"
UNKNOWN_FILENAME = "unknown"


class ChunkLike(Protocol):
    document_id: UUID
    content: str
    page_number: int | None


@dataclass(frozen=True)
class AssembledContext:
    """Rendered context and its shape."""

    text: str
    section_count: int
    line_count: int

    @property
    def is_empty(self) -> bool:
        return self.section_count == 0


def render_context(
    chunks: Sequence[ChunkLike],
    filenames: Mapping[UUID, str],
) -> AssembledContext:
    """
    Render ordered chunks into a line-numbered context.

    Args:
        chunks: Chunks in reconstruction order
        filenames: Document id to filename; missing ids render as "unknown"

    Returns:
        AssembledContext
    """
    sections = []
    line_number = 0
    for index, chunk in enumerate(chunks):
        filename = filenames.get(chunk.document_id, UNKNOWN_FILENAME)
        page = chunk.page_number if chunk.page_number is not None else "N/A"
        numbered = []
        for line in chunk.content.split("\n"):
            line_number += 1
            numbered.append(f"L{line_number}: {line}")
        header = f"[Source: {filename}, Page {page}, Section {index + 1}]"
        sections.append(header + "\n" + "\n".join(numbered))

    return AssembledContext(
        text=SECTION_SEPARATOR.join(sections),
        section_count=len(sections),
        line_count=line_number,
    )


class ContextAssembler:
    """Loads a subject's chunks and renders them."""

    async def assemble(self, db: AsyncSession, subject_id: UUID) -> AssembledContext:
        """
        Build the context for a subject.

        Args:
            db: Async database session
            subject_id: Subject to assemble

        Returns:
            AssembledContext (empty when the subject has no chunks)
        """
        chunks = await chunk_crud.list_for_subject(db, subject_id)
        if not chunks:
            logger.info(
                f"{__name__}:assemble - Subject has no chunks",
                extra={"subject_id": str(subject_id)},
            )
            return AssembledContext(text="", section_count=0, line_count=0)

        filenames = await document_crud.filename_map(db, (chunk.document_id for chunk in chunks))
        context = render_context(chunks, filenames)
        logger.info(
            f"{__name__}:assemble - Context assembled",
            extra={
                "subject_id": str(subject_id),
                "sections": context.section_count,
                "lines": context.line_count,
                "chars": len(context.text),
            },
        )
        return context
