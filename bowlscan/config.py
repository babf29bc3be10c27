# bowlscan/config.py
from functools import lru_cache
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary

ROOT = Path(__file__).resolve().parents[1]

# Load in ascending precedence; later overrides earlier
load_dotenv(ROOT / ".env")
load_dotenv(ROOT / ".env.local", override=True)

def _csv(raw: Optional[str]) -> list[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]

def _int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default

class Settings:
    def __init__(self) -> None:
        # Server
        self.PORT: int = _int("PORT", 8000)
        self.ALLOWED_ORIGINS: list[str] = _csv(os.getenv("ALLOWED_ORIGINS", "http://localhost:5173"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

        # OCR parsing
        self.OCR_EXTRA_HEADERS: list[str] = _csv(os.getenv("OCR_EXTRA_HEADERS"))
        self.OCR_MAX_TOKEN_DIGITS: int = max(4, _int("OCR_MAX_TOKEN_DIGITS", 15))

    def vocabulary(self) -> RecognitionVocabulary:
        return DEFAULT_VOCABULARY.with_extra_headers(self.OCR_EXTRA_HEADERS)

@lru_cache
def get_settings() -> Settings:
    return Settings()
