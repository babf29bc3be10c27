# bowlscan/core/models.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

# --------------------------- Recognizer input ---------------------------

@dataclass(frozen=True)
class Vertex:
    x: Optional[int] = None
    y: Optional[int] = None

@dataclass(frozen=True)
class BoundingPoly:
    # 4 vertices: top-left, top-right, bottom-right, bottom-left
    vertices: Tuple[Vertex, ...] = ()

@dataclass(frozen=True)
class TextAnnotation:
    text: str
    poly: Optional[BoundingPoly] = None
    locale: Optional[str] = None

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return self.poly.vertices if self.poly else ()

@dataclass(frozen=True)
class Symbol:
    text: str = ""
    bbox: Optional[BoundingPoly] = None
    confidence: Optional[float] = None

@dataclass(frozen=True)
class Word:
    symbols: Tuple[Symbol, ...] = ()
    bbox: Optional[BoundingPoly] = None
    confidence: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.symbols if s.text)

@dataclass(frozen=True)
class Paragraph:
    words: Tuple[Word, ...] = ()
    bbox: Optional[BoundingPoly] = None
    confidence: Optional[float] = None

@dataclass(frozen=True)
class Block:
    paragraphs: Tuple[Paragraph, ...] = ()
    bbox: Optional[BoundingPoly] = None
    confidence: Optional[float] = None

@dataclass(frozen=True)
class Page:
    blocks: Tuple[Block, ...] = ()
    width: Optional[int] = None
    height: Optional[int] = None
    confidence: Optional[float] = None

@dataclass(frozen=True)
class RecognizerError:
    code: Optional[int] = None
    message: Optional[str] = None

    def describe(self) -> str:
        msg = (self.message or "").strip()
        return msg or f"recognizer error (code {self.code})"

@dataclass(frozen=True)
class RecognitionResponse:
    """
    One image's worth of recognizer output.

    `annotations` is the flat list where index 0 conventionally spans the
    whole image; `pages` is the Page -> Block -> Paragraph -> Word -> Symbol tree.
    """
    raw_text: Optional[str] = None
    annotations: Tuple[TextAnnotation, ...] = ()
    pages: Tuple[Page, ...] = ()
    error: Optional[RecognizerError] = None

# --------------------------- Pipeline output ---------------------------

@dataclass(frozen=True)
class ParsedScoreRow:
    player_name: str
    scores: Tuple[int, ...]
    confidence: float = 1.0
    # dictionary names a glyph-only name could belong to; never auto-picked
    name_candidates: Tuple[str, ...] = ()

    @property
    def is_name_unresolved(self) -> bool:
        return bool(self.name_candidates)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["scores"] = list(self.scores)
        d["name_candidates"] = list(self.name_candidates)
        return d

NO_SCORE_DATA = "no score data found"

@dataclass(frozen=True)
class OcrParseResult:
    rows: Tuple[ParsedScoreRow, ...] = ()
    raw_text: str = ""
    is_success: bool = False
    error_message: Optional[str] = None
    strategy: Optional[str] = None

    @classmethod
    def success(cls, rows: List[ParsedScoreRow], raw_text: str, strategy: str) -> "OcrParseResult":
        if not rows:
            return cls.failure(raw_text, NO_SCORE_DATA)
        return cls(rows=tuple(rows), raw_text=raw_text, is_success=True, strategy=strategy)

    @classmethod
    def failure(cls, raw_text: str, message: str = NO_SCORE_DATA) -> "OcrParseResult":
        return cls(rows=(), raw_text=raw_text, is_success=False, error_message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "raw_text": self.raw_text,
            "is_success": self.is_success,
            "error_message": self.error_message,
            "strategy": self.strategy,
        }

@dataclass
class NameResolution:
    status: str                      # "resolved" | "ambiguous" | "unknown"
    fragment: str
    name: Optional[str] = None
    candidates: List[str] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"
