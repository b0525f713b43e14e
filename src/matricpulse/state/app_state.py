from dataclasses import dataclass, field
from typing import List, Optional
from uuid import uuid4

from matricpulse.core.aps import APSResult, SubjectEntry, calculate_aps, clamp_percent
from matricpulse.core.catalog import DEFAULT_LANGUAGE, DEFAULT_SUBJECTS
from matricpulse.services.ai_service import ChatTurn

MAX_SUBJECT_ROWS = 12
THEMES = ("dark", "light")


def _new_id() -> str:
    return uuid4().hex


@dataclass
class SubjectRow:
    id: str = field(default_factory=_new_id)
    name: str = ""
    percent: int = 0

    def to_entry(self) -> SubjectEntry:
        return SubjectEntry(name=self.name, percent=self.percent)


@dataclass
class AppState:
    """Per-student state. Build one per student and pass it around explicitly."""

    subjects: List[SubjectRow] = field(default_factory=list)
    language: str = DEFAULT_LANGUAGE
    theme: str = "dark"
    has_seen_tutorial: bool = False
    last_result: Optional[APSResult] = None
    chat_history: List[ChatTurn] = field(default_factory=list)

    @classmethod
    def new(cls) -> "AppState":
        return cls(subjects=[SubjectRow(name=name) for name in DEFAULT_SUBJECTS])

    def find_subject(self, row_id: str) -> Optional[SubjectRow]:
        return next((row for row in self.subjects if row.id == row_id), None)

    def add_subject(self) -> Optional[SubjectRow]:
        if len(self.subjects) >= MAX_SUBJECT_ROWS:
            return None
        row = SubjectRow()
        self.subjects.append(row)
        return row

    def remove_subject(self, row_id: str) -> bool:
        if len(self.subjects) <= 1:
            return False
        row = self.find_subject(row_id)
        if row is None:
            return False
        self.subjects.remove(row)
        return True

    def update_subject(self, row_id: str, *, name: Optional[str] = None, percent: Optional[float] = None) -> bool:
        row = self.find_subject(row_id)
        if row is None:
            return False
        if name is not None:
            row.name = name
        if percent is not None:
            row.percent = clamp_percent(percent)
        return True

    def calculate(self) -> APSResult:
        self.last_result = calculate_aps(row.to_entry() for row in self.subjects)
        return self.last_result

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    def complete_tutorial(self) -> None:
        self.has_seen_tutorial = True

    def record_chat(self, message: str, reply: str) -> None:
        self.chat_history.append(ChatTurn(role="user", text=message))
        self.chat_history.append(ChatTurn(role="model", text=reply))
