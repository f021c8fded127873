"""
Study set request schema.

The response body is askmynotes.core.grounding.study_schema.StudySet.

Dependencies: pydantic
System role: Study API contracts
"""

from uuid import UUID

from pydantic import BaseModel


class StudyRequest(BaseModel):
    """Generate a study set for a subject."""

    subject_id: UUID
