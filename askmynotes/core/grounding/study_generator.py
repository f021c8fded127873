"""
Study set generator.

Asks the model for 5 multiple-choice and 3 short-answer questions grounded
in a subject's context and decodes the JSON it returns. Malformed output
degrades to an empty or partial set; it is never an error.

Dependencies: pydantic, askmynotes.core.grounding
System role: Quiz generation from a subject's notes
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from askmynotes.configs.generation import GenerationSettings
from askmynotes.core.grounding.context_assembler import AssembledContext
from askmynotes.core.grounding.generation import GenerationClient
from askmynotes.core.grounding.study_prompt import (
    INSUFFICIENT_NOTES,
    MCQ_COUNT,
    SHORT_ANSWER_COUNT,
    STUDY_PROMPT,
)
from askmynotes.core.grounding.study_schema import (
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    StudySet,
)

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(raw: str) -> dict[str, Any] | None:
    """
    Parse the outermost `{...}` block of a model reply.

    Returns:
        dict, or None when there is no parseable object
    """
    match = _JSON_OBJECT.search(raw or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _validate_items(raw_items: Any, model: type, limit: int, kind: str) -> list:
    if not isinstance(raw_items, list):
        return []
    items = []
    for position, raw_item in enumerate(raw_items):
        try:
            item = model.model_validate(raw_item)
        except PydanticValidationError as e:
            logger.warning(
                f"{__name__}:_validate_items - Dropping invalid {kind} item",
                extra={"position": position, "errors": e.error_count()},
            )
            continue
        items.append(item)
    items = items[:limit]
    for index, item in enumerate(items):
        if not item.id:
            item.id = str(index + 1)
    return items


def decode_study_set(raw: str) -> StudySet:
    """
    Decode a model reply into a StudySet.

    Invalid items are dropped one by one and each list is capped at its
    requested size. Missing ids become "1", "2", ... by position.
    """
    payload = extract_json_object(raw)
    if payload is None:
        logger.warning(f"{__name__}:decode_study_set - No JSON object in reply, returning empty set")
        return StudySet()
    return StudySet(
        mcqs=_validate_items(payload.get("mcqs"), MultipleChoiceQuestion, MCQ_COUNT, "mcq"),
        short_answers=_validate_items(
            payload.get("shortAnswers"), ShortAnswerQuestion, SHORT_ANSWER_COUNT, "short_answer"
        ),
    )


class StudySetGenerator:
    """Generate a quiz battery from assembled context."""

    def __init__(self, generation: GenerationClient, settings: GenerationSettings) -> None:
        self._generation = generation
        self._settings = settings

    async def generate(self, subject_name: str, context: AssembledContext) -> StudySet:
        """
        Generate a study set.

        Args:
            subject_name: Subject display name
            context: Assembled subject context

        Returns:
            StudySet (empty without a model call when the context is empty)

        Raises:
            UpstreamError: When the provider call fails
        """
        if context.is_empty:
            logger.info(f"{__name__}:generate - Empty context, returning empty study set")
            return StudySet()

        messages = STUDY_PROMPT.format_messages(
            subject_name=subject_name,
            mcq_count=MCQ_COUNT,
            short_answer_count=SHORT_ANSWER_COUNT,
            insufficient=INSUFFICIENT_NOTES,
            context=context.text,
        )
        raw = await self._generation.generate_text(
            messages,
            model=self._settings.study_model,
            temperature=self._settings.study_temperature,
        )
        study_set = decode_study_set(raw)
        logger.info(
            f"{__name__}:generate - Study set generated",
            extra={"mcqs": len(study_set.mcqs), "short_answers": len(study_set.short_answers)},
        )
        return study_set
