"""AI-backed student features: study help, university matching, opportunity search
and the mentor chat.

Every feature goes through an ``AIAssistant``. Failures never propagate: they are
logged and turned into an ``AIResponse`` flagged ``unavailable`` so the caller
can offer a retry. Nothing here retries on its own.
"""

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Sequence

from matricpulse.config.settings import settings
from matricpulse.core.aps import APSResult
from matricpulse.core.catalog import DEFAULT_LANGUAGE
from matricpulse.core.crisis import CRISIS_REPLY, SADAG_PHONE, detect_crisis
from matricpulse.services.ai_service import (
    AIAssistant,
    AIServiceError,
    AssistantContext,
    ChatTurn,
    Citation,
    InlineImage,
)

logger = logging.getLogger(__name__)

LOW_APS_THRESHOLD = 21
MENTOR_TEMPERATURE = 0.8

STUDY_PROMPT = """
You are an expert South African Matric Tutor specializing in the CAPS curriculum.
Analyze the following input which is either a text description or a photo of a textbook page.

Tasks:
1. Identify the specific CAPS topic.
2. Provide a "Sharp Sharp Summary": A high-impact, easy-to-understand breakdown.
3. Generate 3 "Quick Quiz" questions with answers (use >! spoiler tags for answers).
4. Provide a "Memory Hack": A mnemonic or visual trick to remember this.
5. Suggest search terms for Siyavula, Mind the Gap, or Past Papers.

Tone: Relatable, supportive (use subtle Mzansi slang like "Gents", "Sharp", "Now-now"), but academically rigorous.
""".strip()

UNIVERSITY_PROMPT = """
Analyze the 2025/2026 South African University Prospectuses for a student with:
- Total APS Score: {aps}
- Subjects: {subjects}

Please provide:
1. A list of specific Degree/Diploma programs they qualify for at top institutions (UCT, Wits, UP, UJ, Stellenbosch, etc.).
2. "Reach" programs where they might just fall short but could get into with an improved final mark.
3. Suggested alternative pathways (Higher Certificates) if the APS is below {low_aps}.

Only suggest programs from official South African institutions.
""".strip()

UNIVERSITY_SYSTEM = "You are a specialized SA Career Counselor. Use the latest APS conversion tables for the NSC."

OPPORTUNITY_PROMPT = (
    "Find currently open (live) bursaries, learnerships, or NSFAS updates for: {query}. "
    "Focus on 2025/2026 intake in South Africa."
)

MENTOR_SYSTEM = """
You are 'The Mentor' on MatricPulse. You are an encouraging older sibling figure to South African Matriculants.
Language: {language}.
Personality: Helpful, optimistic, wise, and relatable.
Use local South African references and Mzansi slang appropriately.
Crucial Safety: If the student mentions self-harm, depression, or severe stress, gently suggest they visit the Crisis Support tab and give them the SADAG number: {sadag} immediately.
""".strip()


@dataclass(frozen=True)
class AIResponse:
    text: str
    citations: List[Citation] = field(default_factory=list)
    unavailable: bool = False
    crisis: bool = False

    def to_dict(self) -> Dict:
        return {
            "text": self.text,
            "citations": [c.to_dict() for c in self.citations],
            "unavailable": self.unavailable,
            "crisis": self.crisis,
        }


def _search(
    assistant: AIAssistant,
    feature: str,
    prompt: str,
    context: AssistantContext,
    *,
    empty_text: str,
    failure_text: str,
) -> AIResponse:
    try:
        text, citations = assistant.search(prompt, context)
    except AIServiceError as exc:
        logger.warning("%s request failed: %s", feature, exc)
        return AIResponse(text=failure_text, unavailable=True)
    return AIResponse(text=text or empty_text, citations=citations)


def analyze_study_material(
    assistant: AIAssistant,
    text: str,
    image_base64: Optional[str] = None,
    mime_type: str = "image/jpeg",
) -> AIResponse:
    prompt = STUDY_PROMPT
    if text and text.strip():
        prompt = f"{prompt}\n\nStudent Input: {text.strip()}"
    image = InlineImage(mime_type=mime_type, data=image_base64) if image_base64 else None
    context = AssistantContext(model=settings.gemini_pro_model, image=image)
    return _search(
        assistant,
        "study",
        prompt,
        context,
        empty_text="Eish, I couldn't process that. Try a clearer photo or more text.",
        failure_text="Error connecting to the AI brain. Please check your internet or API key.",
    )


def match_universities(assistant: AIAssistant, result: APSResult) -> AIResponse:
    subjects = ", ".join(f"{s.name} ({s.percent}%)" for s in result.subjects)
    prompt = UNIVERSITY_PROMPT.format(aps=result.total_score, subjects=subjects, low_aps=LOW_APS_THRESHOLD)
    context = AssistantContext(model=settings.gemini_pro_model, system_instruction=UNIVERSITY_SYSTEM)
    return _search(
        assistant,
        "university match",
        prompt,
        context,
        empty_text="No programs found. Try entering more subjects.",
        failure_text="Failed to match universities. The system might be under heavy load.",
    )


def find_opportunities(assistant: AIAssistant, query: str) -> AIResponse:
    context = AssistantContext(model=settings.gemini_flash_model)
    return _search(
        assistant,
        "opportunity search",
        OPPORTUNITY_PROMPT.format(query=query.strip()),
        context,
        empty_text="No current opportunities found for this search.",
        failure_text="Search failed. Try searching for 'General Grade 12 Bursaries'.",
    )


def chat_with_mentor(
    assistant: AIAssistant,
    history: Sequence[ChatTurn],
    message: str,
    language: str = DEFAULT_LANGUAGE,
) -> AIResponse:
    if detect_crisis(message):
        logger.info("Mentor message routed to crisis support")
        return AIResponse(text=CRISIS_REPLY, crisis=True)

    context = AssistantContext(
        model=settings.gemini_flash_model,
        system_instruction=MENTOR_SYSTEM.format(language=language or DEFAULT_LANGUAGE, sadag=SADAG_PHONE),
        history=tuple(history),
        temperature=MENTOR_TEMPERATURE,
    )
    try:
        text = assistant.respond(message, context)
    except AIServiceError as exc:
        logger.warning("mentor chat failed: %s", exc)
        return AIResponse(text="Network's a bit dodge right now. Try sending that again in a second.", unavailable=True)
    return AIResponse(text=text or "Eish, my connection dipped. What was that again?")
