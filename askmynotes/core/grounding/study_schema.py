"""
Study set schemas.

Multiple-choice and short-answer items as returned to the client. Field
aliases keep the camelCase wire names (correctAnswer, quotedText, ...).

Dependencies: pydantic
System role: Study set generator output schema
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from askmynotes.core.grounding.answer_schema import Confidence, SourceCitation, normalize_confidence


class _StudyItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: str = Field(default="", description="Item identifier")
    question: str
    quoted_text: str = Field(default="", alias="quotedText")
    quoted_lines: str = Field(default="", alias="quotedLines")
    citation: SourceCitation | None = None
    confidence: Confidence = Confidence.MEDIUM

    _normalize_confidence = field_validator("confidence", mode="before")(normalize_confidence)

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        return "" if value is None else str(value)


class McqOption(BaseModel):
    """One labeled answer option."""

    label: str = Field(description="A, B, C or D")
    text: str


class MultipleChoiceQuestion(_StudyItem):
    """Four-option question with the correct label and an explanation."""

    options: list[McqOption] = Field(min_length=4, max_length=4)
    correct_answer: str = Field(alias="correctAnswer")
    explanation: str = ""


class ShortAnswerQuestion(_StudyItem):
    """Open question with a model answer."""

    model_answer: str = Field(alias="modelAnswer")


class StudySet(BaseModel):
    """A battery of quiz items grounded in one subject's notes."""

    model_config = ConfigDict(populate_by_name=True)

    mcqs: list[MultipleChoiceQuestion] = Field(default_factory=list)
    short_answers: list[ShortAnswerQuestion] = Field(default_factory=list, alias="shortAnswers")
