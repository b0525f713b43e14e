import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from matricpulse.config.settings import settings
from matricpulse.core.aps import SubjectEntry, calculate_aps, clamp_percent
from matricpulse.core.catalog import DEFAULT_LANGUAGE, SA_LANGUAGES, SUBJECT_OPTIONS
from matricpulse.core.crisis import CRISIS_SECTIONS
from matricpulse.services import advisor_service
from matricpulse.services.ai_service import AIAssistant, AIServiceError, ChatTurn, GeminiAssistant


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="MatricPulse API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubjectPayload(BaseModel):
    name: str = ""
    percent: float = 0


class APSPayload(BaseModel):
    subjects: List[SubjectPayload] = Field(default_factory=list)


class StudyPayload(BaseModel):
    text: str = ""
    image_base64: Optional[str] = None
    mime_type: str = "image/jpeg"


class OpportunityPayload(BaseModel):
    query: str = Field(min_length=1)


class ChatTurnPayload(BaseModel):
    role: str = Field(pattern="^(user|model)$")
    text: str


class MentorPayload(BaseModel):
    history: List[ChatTurnPayload] = Field(default_factory=list)
    message: str = Field(min_length=1)
    language: str = DEFAULT_LANGUAGE


def get_assistant() -> AIAssistant:
    try:
        return GeminiAssistant.from_settings()
    except AIServiceError as exc:
        logger.warning("AI assistant unavailable: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def _to_entries(subjects: List[SubjectPayload]) -> List[SubjectEntry]:
    return [SubjectEntry(name=s.name.strip(), percent=clamp_percent(s.percent)) for s in subjects]


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/catalog/subjects")
def list_subject_options() -> List[str]:
    return list(SUBJECT_OPTIONS)


@app.get("/catalog/languages")
def list_languages() -> List[str]:
    return list(SA_LANGUAGES)


@app.get("/crisis/contacts")
def list_crisis_contacts() -> List[Dict]:
    return [section.to_dict() for section in CRISIS_SECTIONS]


@app.post("/aps")
def calculate(payload: APSPayload) -> Dict:
    return calculate_aps(_to_entries(payload.subjects)).to_dict()


@app.post("/ai/study")
def analyze_study_material(payload: StudyPayload, assistant: AIAssistant = Depends(get_assistant)) -> Dict:
    if not payload.text.strip() and not payload.image_base64:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide text or an image")
    response = advisor_service.analyze_study_material(
        assistant, payload.text, payload.image_base64, payload.mime_type
    )
    return response.to_dict()


@app.post("/ai/universities")
def match_universities(payload: APSPayload, assistant: AIAssistant = Depends(get_assistant)) -> Dict:
    result = calculate_aps(_to_entries(payload.subjects))
    if not result.subjects:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No scored subjects")
    response = advisor_service.match_universities(assistant, result)
    return {"aps": result.to_dict(), "response": response.to_dict()}


@app.post("/ai/opportunities")
def find_opportunities(payload: OpportunityPayload, assistant: AIAssistant = Depends(get_assistant)) -> Dict:
    return advisor_service.find_opportunities(assistant, payload.query).to_dict()


@app.post("/ai/mentor")
def chat_with_mentor(payload: MentorPayload, assistant: AIAssistant = Depends(get_assistant)) -> Dict:
    history = [ChatTurn(role=turn.role, text=turn.text) for turn in payload.history]
    return advisor_service.chat_with_mentor(assistant, history, payload.message, payload.language).to_dict()
