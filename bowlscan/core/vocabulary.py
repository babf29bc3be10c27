# bowlscan/core/vocabulary.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import FrozenSet, Iterable, Tuple
import re

# Column headers and other printed noise on a Korean league scoresheet.
KOREAN_HEADERS = {
    "이름", "성명", "합계", "총점", "핸디캡", "핸디", "순위",
    "게임", "1G", "2G", "3G", "4G", "5G", "6G",
    "점수", "평균", "AVG", "TOTAL", "NAME", "GAME",
    "RANK", "HDC", "SCORE", "SUM", "HIGH", "번호", "NO",
    "레인", "비고", "LANE", "NOTE", "클럽", "정기전",
    "1GAME", "2GAME", "3GAME", "4GAME", "IGAME", "소계",
}

# "GAME" and its usual misreads are noise anywhere inside a token ("3GAME", "GARNE1")
GAME_FRAGMENTS = ("GAME", "GARNE", "GANE")


@dataclass(frozen=True)
class RecognitionVocabulary:
    """Locale-specific words and script used to tell names from noise."""
    headers: FrozenSet[str] = field(default_factory=lambda: frozenset(h.upper() for h in KOREAN_HEADERS))
    noise_fragments: Tuple[str, ...] = GAME_FRAGMENTS
    # inclusive code point range of the script player names are written in
    name_char_first: str = "가"
    name_char_last: str = "힣"

    def is_header(self, text: str) -> bool:
        up = (text or "").upper()
        if up in self.headers:
            return True
        return any(f in up for f in self.noise_fragments)

    def is_name_char(self, ch: str) -> bool:
        return self.name_char_first <= ch <= self.name_char_last

    def has_name_char(self, text: str) -> bool:
        return any(self.is_name_char(c) for c in text or "")

    def leading_name_run(self, text: str) -> str:
        n = 0
        for c in text:
            if not self.is_name_char(c):
                break
            n += 1
        return text[:n]

    @cached_property
    def _char_class(self) -> str:
        return f"[{re.escape(self.name_char_first)}-{re.escape(self.name_char_last)}]"

    @cached_property
    def name_pattern(self) -> re.Pattern:
        return re.compile(rf"^{self._char_class}{{2,4}}$")

    @cached_property
    def single_char_pattern(self) -> re.Pattern:
        return re.compile(rf"^{self._char_class}$")

    @cached_property
    def name_run_pattern(self) -> re.Pattern:
        return re.compile(rf"{self._char_class}{{2,4}}")

    def with_extra_headers(self, extra: Iterable[str]) -> "RecognitionVocabulary":
        more = {e.strip().upper() for e in extra if e and e.strip()}
        if not more:
            return self
        return replace(self, headers=self.headers | more)


DEFAULT_VOCABULARY = RecognitionVocabulary()
