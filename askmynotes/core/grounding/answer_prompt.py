"""
Grounded answer prompts.

One prompt template shared by both conversation modes. A mode only changes
the register instructions, the refusal sentence and the temperature; the
grounding rules and the citation contract are identical.

Dependencies: langchain_core.prompts
System role: Prompt template and per-mode profiles for the answer engine
"""

from dataclasses import dataclass

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from askmynotes.configs.generation import GenerationSettings
from askmynotes.core.grounding.conversation import ConversationMode

CHAT_REFUSAL = "Not found in your notes for {subject_name}"
VOICE_CALL_REFUSAL = "That's not in your notes for {subject_name}."

SYSTEM_PROMPT = """You are a study assistant for "{subject_name}".

## Grounding rules
1. Answer ONLY from the NOTES below. Never use outside knowledge, even if you know the answer.
2. If the NOTES do not contain the answer, reply with exactly this sentence and nothing else:
{refusal}
   In that case return no citations, no evidence and confidence Low.
3. Cite every source you used with its filename and page exactly as written in the [Source: ...] labels.
4. For evidence, copy a short verbatim quote and give its line range using the L-numbers in the NOTES (for example L12-L15), together with the page and section of that source.
5. Set confidence to High when the NOTES state the answer directly, Medium when it has to be combined or inferred from several places, Low when support is thin.

## Response style
{style}

## Conversation history
Earlier turns are provided for follow-up questions only. They are not a source of facts.

NOTES:
{context}"""

CHAT_STYLE = """- Use markdown where it helps (lists, bold key terms).
- Be concise but complete."""

VOICE_CALL_STYLE = """- You are speaking aloud to a student on a voice call. Be warm and encouraging, like a friendly tutor.
- Plain spoken sentences only: no markdown, no bullet points, no headings, no symbols.
- Keep it to 2-4 sentences.
- Always name the source file in the sentence itself, for example "According to your notes in biology.txt, ...".
- Always end with a natural follow-up question that keeps the student studying."""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    MessagesPlaceholder("chat_history", optional=True),
    ("human", "{question}"),
])


@dataclass(frozen=True)
class ModeProfile:
    """Everything that differs between conversation modes."""

    mode: ConversationMode
    style: str
    refusal_template: str
    temperature: float

    def refusal(self, subject_name: str) -> str:
        return self.refusal_template.format(subject_name=subject_name)


def mode_profile(mode: ConversationMode, settings: GenerationSettings) -> ModeProfile:
    """
    Resolve the profile for a conversation mode.

    Args:
        mode: Chat or voice call
        settings: Source of per-mode temperatures

    Returns:
        ModeProfile
    """
    if mode is ConversationMode.VOICE_CALL:
        return ModeProfile(
            mode=mode,
            style=VOICE_CALL_STYLE,
            refusal_template=VOICE_CALL_REFUSAL,
            temperature=settings.voice_call_temperature,
        )
    return ModeProfile(
        mode=ConversationMode.CHAT,
        style=CHAT_STYLE,
        refusal_template=CHAT_REFUSAL,
        temperature=settings.chat_temperature,
    )
