"""
Grounded answer engine.

Answers one question from a subject's assembled context with a single
structured generation call. Per request:

    received -> context_assembled -> generation_requested
             -> structured_result | fallback_text | error

An empty context short-circuits to a fixed "no notes yet" answer without
calling the model. Output that does not validate against GroundedAnswer is
kept as raw text with neutral defaults instead of failing the request.

Dependencies: langchain_core, askmynotes.core.grounding
System role: Core question answering over a subject's notes
"""

import logging
from typing import Sequence

from askmynotes.configs.generation import GenerationSettings
from askmynotes.core.exceptions import UpstreamError
from askmynotes.core.grounding.answer_prompt import ANSWER_PROMPT, mode_profile
from askmynotes.core.grounding.answer_schema import Confidence, GroundedAnswer
from askmynotes.core.grounding.context_assembler import AssembledContext
from askmynotes.core.grounding.conversation import (
    ConversationMode,
    ConversationTurn,
    RequestStage,
    bounded_history,
    to_messages,
)
from askmynotes.core.grounding.generation import GenerationClient, StructuredResult

logger = logging.getLogger(__name__)

NO_NOTES_TEMPLATE = "I don't have any notes for {subject_name} yet. Please upload some documents first."
EMPTY_FALLBACK_CONTENT = "Sorry, I couldn't generate a response."


def no_notes_answer(subject_name: str) -> GroundedAnswer:
    """Fixed answer for a subject without chunks."""
    return GroundedAnswer(
        content=NO_NOTES_TEMPLATE.format(subject_name=subject_name),
        citations=[],
        evidence=[],
        confidence=Confidence.LOW,
    )


class GroundedAnswerEngine:
    """Single-call grounded answering, parameterized by conversation mode."""

    def __init__(self, generation: GenerationClient, settings: GenerationSettings) -> None:
        """
        Args:
            generation: Generation capability adapter
            settings: Model id, per-mode temperatures and history window
        """
        self._generation = generation
        self._settings = settings

    def _log_stage(self, stage: RequestStage, **extra) -> None:
        logger.info(f"{__name__}:answer - stage={stage.value}", extra={"stage": stage.value, **extra})

    async def answer(
        self,
        subject_name: str,
        question: str,
        context: AssembledContext,
        history: Sequence[ConversationTurn] | None = None,
        mode: ConversationMode = ConversationMode.CHAT,
    ) -> GroundedAnswer:
        """
        Answer a question strictly from the given context.

        Args:
            subject_name: Display name used in instructions and refusals
            question: User question
            context: Assembled subject context
            history: Prior turns (only the last `history_window` are used)
            mode: Chat or voice call register

        Returns:
            GroundedAnswer

        Raises:
            UpstreamRateLimitedError: Provider rate limit
            UpstreamQuotaExhaustedError: Provider quota or billing exhausted
            GenerationError: Any other provider failure
        """
        self._log_stage(RequestStage.RECEIVED, mode=mode.value, question_len=len(question))

        if context.is_empty:
            self._log_stage(RequestStage.CONTEXT_ASSEMBLED, sections=0)
            return no_notes_answer(subject_name)
        self._log_stage(
            RequestStage.CONTEXT_ASSEMBLED,
            sections=context.section_count,
            lines=context.line_count,
        )

        profile = mode_profile(mode, self._settings)
        turns = bounded_history(history, self._settings.history_window)
        messages = ANSWER_PROMPT.format_messages(
            subject_name=subject_name,
            refusal=profile.refusal(subject_name),
            style=profile.style,
            context=context.text,
            chat_history=to_messages(turns),
            question=question,
        )

        self._log_stage(
            RequestStage.GENERATION_REQUESTED,
            model=self._settings.answer_model,
            temperature=profile.temperature,
            history_turns=len(turns),
        )
        try:
            result = await self._generation.generate_structured(
                messages,
                GroundedAnswer,
                model=self._settings.answer_model,
                temperature=profile.temperature,
            )
        except UpstreamError as e:
            self._log_stage(RequestStage.ERROR, error_type=type(e).__name__, error=e.message)
            raise

        if isinstance(result, StructuredResult):
            answer = result.value
            self._log_stage(
                RequestStage.STRUCTURED_RESULT,
                citations=len(answer.citations),
                evidence=len(answer.evidence),
                confidence=answer.confidence.value,
            )
            return answer

        self._log_stage(RequestStage.FALLBACK_TEXT, raw_len=len(result.text))
        return GroundedAnswer(
            content=result.text.strip() or EMPTY_FALLBACK_CONTENT,
            citations=[],
            evidence=[],
            confidence=Confidence.MEDIUM,
        )
