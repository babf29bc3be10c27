# bowlscan/routers/ocr_api.py
from __future__ import annotations
from functools import lru_cache
from typing import Any, List, Optional

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field

from bowlscan.config import get_settings
from bowlscan.services.ocr_parser import ScoreboardParser
from bowlscan.services.scores import extract_scores, iter_splits, plausibility
from bowlscan.services.vision import response_from_json

router = APIRouter(prefix="/ocr", tags=["ocr"])

@lru_cache
def get_parser() -> ScoreboardParser:
    s = get_settings()
    return ScoreboardParser(vocab=s.vocabulary(), max_digits=s.OCR_MAX_TOKEN_DIGITS)

# ---------- Schemas ----------
class ScoreRowOut(BaseModel):
    player_name: str
    scores: List[int]
    confidence: float
    name_candidates: List[str] = []

class OcrParseResponse(BaseModel):
    rows: List[ScoreRowOut]
    raw_text: str
    is_success: bool
    error_message: Optional[str] = None
    strategy: Optional[str] = None

class SplitRequest(BaseModel):
    digits: str = Field(..., pattern=r"^[0-9]{1,32}$")

class SplitCandidate(BaseModel):
    values: List[int]
    weight: int

class SplitResponse(BaseModel):
    digits: str
    best: List[int]
    candidates: List[SplitCandidate]

# ---------- Endpoints ----------
@router.post("/parse", response_model=OcrParseResponse)
def parse_vision_response(payload: Any = Body(...)):
    """Parse a Vision `images:annotate` response (single or batch envelope)."""
    result = get_parser().parse(response_from_json(payload))
    return OcrParseResponse(**result.to_dict())

@router.post("/split", response_model=SplitResponse)
def split_digits(req: SplitRequest):
    """Show how a run of digits with no separators would be cut into scores."""
    limit = get_settings().OCR_MAX_TOKEN_DIGITS
    cands: List[SplitCandidate] = []
    # short runs are never split; runs over the limit are refused outright
    if 4 <= len(req.digits) <= limit:
        cands = [SplitCandidate(values=list(c), weight=plausibility(c)) for c in iter_splits(req.digits)]
    return SplitResponse(digits=req.digits, best=extract_scores(req.digits, limit), candidates=cands)
