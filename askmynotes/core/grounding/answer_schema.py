"""
Grounded answer schemas.

Structured output contract for answers: content plus citations, evidence
and a coarse confidence label. Also used as the API response body.

Dependencies: pydantic
System role: Answer engine output schema
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Confidence(str, Enum):
    """Self-assessed reliability of a generated answer or question."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def normalize_confidence(value):
    """Accept any casing of High/Medium/Low."""
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


def _page_to_str(value):
    if value is None:
        return "N/A"
    return str(value)


class SourceCitation(BaseModel):
    """A document and page the answer relies on."""

    filename: str = Field(description="Source filename exactly as shown in the context label")
    page: str = Field(description="Page number from the context label, or N/A")

    _coerce_page = field_validator("page", mode="before")(_page_to_str)


class EvidenceItem(BaseModel):
    """A verbatim quote tying the answer to context lines."""

    quote: str = Field(description="Short verbatim quote from the notes")
    page: str = Field(default="N/A", description="Page number from the context label, or N/A")
    section: str = Field(default="N/A", description="Section number from the context label")
    lines: str = Field(description="Line range such as L12-L15")

    _coerce_page = field_validator("page", "section", mode="before")(_page_to_str)


class GroundedAnswer(BaseModel):
    """Answer produced strictly from a subject's notes."""

    content: str = Field(description="Full answer text")
    citations: list[SourceCitation] = Field(
        default_factory=list,
        description="Sources used, in order of use",
    )
    evidence: list[EvidenceItem] = Field(
        default_factory=list,
        description="Supporting quotes with line ranges",
    )
    confidence: Confidence = Field(description="High, Medium or Low")

    _normalize_confidence = field_validator("confidence", mode="before")(normalize_confidence)
