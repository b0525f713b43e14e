from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

CRISIS_KEYWORDS: tuple[str, ...] = ("SUICIDE", "HELP", "KILL MYSELF")

SADAG_PHONE = "0800 567 567"

CRISIS_REPLY = (
    "It sounds like you might be going through something really heavy right now. "
    "You don't have to carry it alone. Please open the Crisis Support tab or call "
    f"SADAG on {SADAG_PHONE} (free, 24/7) to talk to someone immediately."
)


@dataclass(frozen=True)
class CrisisContact:
    name: str
    phone: str
    website: str
    description: str
    status: Optional[str] = None
    sms: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "dial": dial_string(self.phone),
            "website": self.website,
            "description": self.description,
            "status": self.status,
            "sms": self.sms,
        }


@dataclass(frozen=True)
class CrisisSection:
    title: str
    contacts: Tuple[CrisisContact, ...]

    def to_dict(self) -> Dict:
        return {"title": self.title, "contacts": [c.to_dict() for c in self.contacts]}


CRISIS_SECTIONS: tuple[CrisisSection, ...] = (
    CrisisSection(
        "Mental Health",
        (
            CrisisContact(
                "Lifeline South Africa",
                "0861 322 322",
                "https://lifelinesa.co.za",
                "24-hour crisis counselling and support for people in distress.",
                status="24/7",
            ),
            CrisisContact(
                "SADAG Depression & Anxiety Helpline",
                SADAG_PHONE,
                "https://www.sadag.org",
                "Support for depression, anxiety, and other mental health issues.",
                status="24/7",
                sms="31393",
            ),
            CrisisContact(
                "Suicide Crisis Line",
                SADAG_PHONE,
                "https://www.sadag.org",
                "Immediate support for those experiencing suicidal thoughts.",
                status="24/7",
            ),
        ),
    ),
    CrisisSection(
        "Abuse & Violence",
        (
            CrisisContact(
                "Childline South Africa",
                "0800 055 555",
                "https://www.childlinesa.org.za",
                "Support for children and youth experiencing abuse or difficulties.",
                status="24/7",
            ),
            CrisisContact(
                "Gender-Based Violence Command Centre",
                "0800 428 428",
                "https://gbv.org.za",
                "Report and get help for gender-based violence.",
                status="24/7",
                sms="31531",
            ),
        ),
    ),
    CrisisSection(
        "Substance Abuse",
        (
            CrisisContact(
                "SANCA National Helpline",
                "0861 472 622",
                "https://sancanational.org.za",
                "Help for substance abuse and addiction.",
            ),
        ),
    ),
    CrisisSection(
        "General Support",
        (
            CrisisContact(
                "loveLife",
                "0800 121 900",
                "https://lovelife.org.za",
                "Youth-focused health and wellbeing support.",
            ),
        ),
    ),
    CrisisSection(
        "Academic Support",
        (
            CrisisContact(
                "Department of Education Helpline",
                "0800 202 933",
                "https://www.education.gov.za",
                "Help with school and education-related issues.",
            ),
        ),
    ),
)


def dial_string(phone: str) -> str:
    return "".join(phone.split())


def detect_crisis(text: str) -> bool:
    upper = text.upper()
    return any(keyword in upper for keyword in CRISIS_KEYWORDS)
