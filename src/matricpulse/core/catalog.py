from typing import Tuple

SUBJECT_OPTIONS: Tuple[str, ...] = (
    "English Home Language",
    "English First Additional",
    "Afrikaans Home Language",
    "Afrikaans First Additional",
    "Mathematics",
    "Mathematical Literacy",
    "Physical Sciences",
    "Life Sciences",
    "Accounting",
    "Business Studies",
    "Economics",
    "History",
    "Geography",
    "Life Orientation",
    "Information Technology",
    "Computer App Technology",
    "Tourism",
    "Visual Arts",
    "Dramatic Arts",
)

SA_LANGUAGES: Tuple[str, ...] = (
    "English",
    "isiZulu",
    "isiXhosa",
    "Afrikaans",
    "Sepedi",
    "Setswana",
    "Sesotho",
    "Xitsonga",
    "siSwati",
    "Tshivenda",
    "isiNdebele",
)

DEFAULT_LANGUAGE = "English"

# Rows a fresh calculator starts with, all unmarked.
DEFAULT_SUBJECTS: Tuple[str, ...] = (
    "English Home Language",
    "Mathematics",
    "Life Orientation",
    "Physical Sciences",
)
