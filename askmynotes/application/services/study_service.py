"""
Study service orchestrator.

Dependencies: askmynotes.core.grounding
System role: Study set use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from askmynotes.application.services.subject_service import resolve_subject
from askmynotes.application.session_context import SessionContext
from askmynotes.core.grounding.context_assembler import ContextAssembler
from askmynotes.core.grounding.study_generator import StudySetGenerator
from askmynotes.core.grounding.study_schema import StudySet

logger = logging.getLogger(__name__)


class StudyService:
    """Generate study sets for a subject."""

    def __init__(
        self,
        db: AsyncSession,
        generator: StudySetGenerator,
        assembler: ContextAssembler,
    ) -> None:
        self.db = db
        self.generator = generator
        self.assembler = assembler

    async def generate_study_set(
        self,
        subject_id: UUID,
        session: SessionContext | None = None,
    ) -> StudySet:
        """
        Build a study set from all of a subject's chunks.

        Raises:
            SubjectNotFoundError: Subject missing or not owned
            UpstreamError: Generation failed
        """
        subject = await resolve_subject(self.db, subject_id, session)
        context = await self.assembler.assemble(self.db, subject_id)
        return await self.generator.generate(subject.name, context)
