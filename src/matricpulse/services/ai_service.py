from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple
import requests
from requests import RequestException

from matricpulse.config.settings import settings

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    pass


@dataclass(frozen=True)
class Citation:
    uri: str
    title: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"uri": self.uri, "title": self.title}


@dataclass(frozen=True)
class ChatTurn:
    role: str
    text: str


@dataclass(frozen=True)
class InlineImage:
    mime_type: str
    data: str


@dataclass(frozen=True)
class AssistantContext:
    model: Optional[str] = None
    system_instruction: Optional[str] = None
    history: Sequence[ChatTurn] = field(default_factory=tuple)
    temperature: Optional[float] = None
    image: Optional[InlineImage] = None


class AIAssistant(Protocol):
    def respond(self, prompt: str, context: Optional[AssistantContext] = None) -> str:
        ...

    def search(self, query: str, context: Optional[AssistantContext] = None) -> Tuple[str, List[Citation]]:
        ...


class GeminiAssistant:
    GENERATE_PATH = "/models/{model}:generateContent"

    def __init__(self, api_key: str, endpoint: str, default_model: str, timeout: float = 30) -> None:
        if not api_key:
            raise AIServiceError("AI_SERVICE_NOT_CONFIGURED")
        if not default_model:
            raise AIServiceError("Missing GEMINI_FLASH_MODEL in environment")
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "GeminiAssistant":
        return cls(
            settings.gemini_api_key,
            settings.gemini_endpoint,
            settings.gemini_flash_model,
            timeout=settings.ai_timeout_seconds,
        )

    def respond(self, prompt: str, context: Optional[AssistantContext] = None) -> str:
        text, _ = self._generate(prompt, context or AssistantContext(), grounded=False)
        return text

    def search(self, query: str, context: Optional[AssistantContext] = None) -> Tuple[str, List[Citation]]:
        return self._generate(query, context or AssistantContext(), grounded=True)

    def _generate(self, prompt: str, context: AssistantContext, *, grounded: bool) -> Tuple[str, List[Citation]]:
        model = context.model or self.default_model
        data = self._post(self.GENERATE_PATH.format(model=model), self._build_payload(prompt, context, grounded))
        return self._to_text(data), self._to_citations(data)

    @staticmethod
    def _build_payload(prompt: str, context: AssistantContext, grounded: bool) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if context.image is not None:
            parts.append({"inlineData": {"mimeType": context.image.mime_type, "data": context.image.data}})

        contents = [{"role": turn.role, "parts": [{"text": turn.text}]} for turn in context.history]
        contents.append({"role": "user", "parts": parts})

        payload: Dict[str, Any] = {"contents": contents}
        if context.system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": context.system_instruction}]}
        if context.temperature is not None:
            payload["generationConfig"] = {"temperature": context.temperature}
        if grounded:
            payload["tools"] = [{"googleSearch": {}}]
        return payload

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.endpoint}{path}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        logger.debug("POST %s", url)
        try:
            res = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        except RequestException as exc:
            raise AIServiceError("AI_SERVICE_UNAVAILABLE") from exc
        try:
            data = res.json()
        except ValueError as exc:
            raise AIServiceError("AI_SERVICE_UNAVAILABLE") from exc
        if not isinstance(data, dict):
            raise AIServiceError("AI_SERVICE_UNAVAILABLE")

        if res.status_code >= 400:
            error = data.get("error") or {}
            raise AIServiceError(str(error.get("status") or error.get("message") or "AI_SERVICE_ERROR"))

        return data

    @staticmethod
    def _first_candidate(data: Dict[str, Any]) -> Dict[str, Any]:
        candidates = data.get("candidates") or []
        return candidates[0] if candidates else {}

    @classmethod
    def _to_text(cls, data: Dict[str, Any]) -> str:
        content = cls._first_candidate(data).get("content") or {}
        # Thought summaries are not part of the answer.
        texts = [part.get("text", "") for part in content.get("parts") or [] if not part.get("thought")]
        return "".join(texts).strip()

    @classmethod
    def _to_citations(cls, data: Dict[str, Any]) -> List[Citation]:
        metadata = cls._first_candidate(data).get("groundingMetadata") or {}
        citations: List[Citation] = []
        for chunk in metadata.get("groundingChunks") or []:
            web = chunk.get("web") or {}
            uri = web.get("uri")
            if uri:
                citations.append(Citation(uri=uri, title=web.get("title") or uri))
        return citations
