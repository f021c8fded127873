"""
Test suite for study set generation.

Tests JSON extraction from chatty replies, per-item validation, count caps,
positional id defaults, the empty-context short circuit and the camelCase
wire format.

System role: Verification of quiz generation
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from askmynotes.core.grounding.answer_schema import Confidence
from askmynotes.core.grounding.context_assembler import AssembledContext
from askmynotes.core.grounding.study_generator import (
    StudySetGenerator,
    decode_study_set,
    extract_json_object,
)
from askmynotes.core.grounding.study_schema import StudySet

BIO_CONTEXT = AssembledContext(
    text="[Source: bio.txt, Page 1, Section 1]\nL1: Mitosis has four phases.",
    section_count=1,
    line_count=1,
)


def mcq(question: str, **overrides) -> dict:
    item = {
        "question": question,
        "options": [
            {"label": "A", "text": "Two"},
            {"label": "B", "text": "Three"},
            {"label": "C", "text": "Four"},
            {"label": "D", "text": "Five"},
        ],
        "correctAnswer": "C",
        "explanation": "The notes list four phases.",
        "quotedText": "Mitosis has four phases.",
        "quotedLines": "L1",
        "citation": {"filename": "bio.txt", "page": "1"},
        "confidence": "high",
    }
    item.update(overrides)
    return item


def short_answer(question: str, **overrides) -> dict:
    item = {
        "question": question,
        "modelAnswer": "Four.",
        "citation": {"filename": "bio.txt", "page": 1},
    }
    item.update(overrides)
    return item


@pytest.fixture
def mock_generation() -> MagicMock:
    generation = MagicMock()
    generation.generate_text = AsyncMock()
    return generation


class TestExtractJsonObject:
    """Test suite for extract_json_object()."""

    def test_should_find_object_inside_prose(self) -> None:
        raw = 'Here you go:\n```json\n{"mcqs": [], "shortAnswers": []}\n```\nGood luck!'

        assert extract_json_object(raw) == {"mcqs": [], "shortAnswers": []}

    def test_no_object_should_be_none(self) -> None:
        assert extract_json_object("I cannot help with that.") is None

    def test_broken_json_should_be_none(self) -> None:
        assert extract_json_object('{"mcqs": [') is None


class TestDecodeStudySet:
    """Test suite for decode_study_set()."""

    def test_should_cap_mcqs_at_five_and_short_answers_at_three(self) -> None:
        # Arrange
        raw = json.dumps({
            "mcqs": [mcq(f"Question {i}") for i in range(7)],
            "shortAnswers": [short_answer(f"Explain {i}") for i in range(4)],
        })

        # Act
        study_set = decode_study_set(raw)

        # Assert
        assert len(study_set.mcqs) == 5
        assert len(study_set.short_answers) == 3

    def test_missing_ids_should_default_to_position(self) -> None:
        raw = json.dumps({"mcqs": [mcq("Q1"), mcq("Q2", id=7)], "shortAnswers": [short_answer("S1")]})

        study_set = decode_study_set(raw)

        assert [item.id for item in study_set.mcqs] == ["1", "7"]
        assert study_set.short_answers[0].id == "1"

    def test_invalid_items_should_be_dropped_individually(self) -> None:
        """Test one malformed MCQ does not discard the others."""
        raw = json.dumps({
            "mcqs": [mcq("Good one"), {"question": "No options"}, mcq("Another good one")],
            "shortAnswers": [{"question": "No model answer"}],
        })

        study_set = decode_study_set(raw)

        assert [item.question for item in study_set.mcqs] == ["Good one", "Another good one"]
        assert study_set.short_answers == []

    def test_mcq_without_exactly_four_options_should_be_dropped(self) -> None:
        two_options = mcq("Too few", options=[{"label": "A", "text": "Yes"}, {"label": "B", "text": "No"}])
        five_options = mcq("Too many", options=mcq("x")["options"] + [{"label": "E", "text": "Six"}])
        raw = json.dumps({"mcqs": [two_options, mcq("Four options"), five_options]})

        study_set = decode_study_set(raw)

        assert [item.question for item in study_set.mcqs] == ["Four options"]
        assert len(study_set.mcqs[0].options) == 4

    def test_fields_should_be_normalized(self) -> None:
        raw = json.dumps({"mcqs": [mcq("Q")], "shortAnswers": [short_answer("S")]})

        study_set = decode_study_set(raw)

        assert study_set.mcqs[0].confidence is Confidence.HIGH
        assert study_set.mcqs[0].correct_answer == "C"
        assert study_set.short_answers[0].citation.page == "1"
        assert study_set.short_answers[0].confidence is Confidence.MEDIUM

    def test_unparseable_reply_should_be_empty_set(self) -> None:
        study_set = decode_study_set("Sorry, something went wrong.")

        assert study_set == StudySet()

    def test_wire_format_should_use_camel_case(self) -> None:
        raw = json.dumps({"mcqs": [mcq("Q")], "shortAnswers": [short_answer("S")]})

        payload = decode_study_set(raw).model_dump(by_alias=True)

        assert set(payload) == {"mcqs", "shortAnswers"}
        assert payload["mcqs"][0]["correctAnswer"] == "C"
        assert payload["mcqs"][0]["quotedLines"] == "L1"
        assert payload["shortAnswers"][0]["modelAnswer"] == "Four."


class TestStudySetGenerator:
    """Test suite for StudySetGenerator.generate()."""

    async def test_empty_context_should_not_call_model(self, mock_generation, generation_settings) -> None:
        generator = StudySetGenerator(mock_generation, generation_settings)

        study_set = await generator.generate("Biology", AssembledContext("", 0, 0))

        assert study_set.mcqs == []
        assert study_set.short_answers == []
        mock_generation.generate_text.assert_not_awaited()

    async def test_should_prompt_with_context_and_study_temperature(
        self, mock_generation, generation_settings
    ) -> None:
        # Arrange
        mock_generation.generate_text.return_value = json.dumps({"mcqs": [mcq("Q")], "shortAnswers": []})
        generator = StudySetGenerator(mock_generation, generation_settings)

        # Act
        study_set = await generator.generate("Biology", BIO_CONTEXT)

        # Assert
        assert len(study_set.mcqs) == 1
        (messages,), kwargs = mock_generation.generate_text.call_args
        assert kwargs["temperature"] == 0.7
        system = messages[0].content
        assert 'study assistant for "Biology"' in system
        assert "5 Multiple Choice Questions" in system
        assert "3 Short Answer Questions" in system
        assert "L1: Mitosis has four phases." in system
        assert '"correctAnswer": "A"' in system
