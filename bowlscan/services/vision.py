# bowlscan/services/vision.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from bowlscan.core.models import (
    Block, BoundingPoly, Page, Paragraph, RecognitionResponse, RecognizerError,
    Symbol, TextAnnotation, Vertex, Word,
)

"""
Google Cloud Vision `images:annotate` JSON -> RecognitionResponse.

Accepts either one AnnotateImageResponse or the batch envelope
{"responses": [...]} (first entry used). Vision leaves out zero
coordinates and empty lists, so every field is optional here.
"""

EMPTY_RESPONSE = "recognizer returned an empty response"

class RecognizerPayloadError(ValueError):
    pass

def _dicts(v: Any) -> List[Dict[str, Any]]:
    return [x for x in v if isinstance(x, dict)] if isinstance(v, list) else []

def _int_or_none(v: Any) -> Optional[int]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None

def _float_or_none(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None

def _poly(d: Any) -> Optional[BoundingPoly]:
    if not isinstance(d, dict):
        return None
    verts = tuple(Vertex(x=_int_or_none(v.get("x")), y=_int_or_none(v.get("y"))) for v in _dicts(d.get("vertices")))
    return BoundingPoly(vertices=verts)

def _symbol(d: Dict[str, Any]) -> Symbol:
    return Symbol(text=str(d.get("text") or ""), bbox=_poly(d.get("boundingBox")),
                  confidence=_float_or_none(d.get("confidence")))

def _word(d: Dict[str, Any]) -> Word:
    return Word(symbols=tuple(_symbol(s) for s in _dicts(d.get("symbols"))),
                bbox=_poly(d.get("boundingBox")), confidence=_float_or_none(d.get("confidence")))

def _paragraph(d: Dict[str, Any]) -> Paragraph:
    return Paragraph(words=tuple(_word(w) for w in _dicts(d.get("words"))),
                     bbox=_poly(d.get("boundingBox")), confidence=_float_or_none(d.get("confidence")))

def _block(d: Dict[str, Any]) -> Block:
    return Block(paragraphs=tuple(_paragraph(p) for p in _dicts(d.get("paragraphs"))),
                 bbox=_poly(d.get("boundingBox")), confidence=_float_or_none(d.get("confidence")))

def _page(d: Dict[str, Any]) -> Page:
    return Page(blocks=tuple(_block(b) for b in _dicts(d.get("blocks"))),
                width=_int_or_none(d.get("width")), height=_int_or_none(d.get("height")),
                confidence=_float_or_none(d.get("confidence")))

def _annotation(d: Dict[str, Any]) -> TextAnnotation:
    return TextAnnotation(text=str(d.get("description") or ""), poly=_poly(d.get("boundingPoly")),
                          locale=d.get("locale") if isinstance(d.get("locale"), str) else None)

def _error(d: Any) -> Optional[RecognizerError]:
    if not isinstance(d, dict):
        return None
    msg = d.get("message")
    return RecognizerError(code=_int_or_none(d.get("code")), message=str(msg) if msg is not None else None)

def _unwrap(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if "responses" in payload:
        items = _dicts(payload.get("responses"))
        return items[0] if items else None
    return payload

def response_from_json(payload: Any) -> RecognitionResponse:
    if not isinstance(payload, dict):
        raise RecognizerPayloadError(f"expected a JSON object, got {type(payload).__name__}")

    one = _unwrap(payload)
    if one is None:
        return RecognitionResponse(error=RecognizerError(message=EMPTY_RESPONSE))

    full = one.get("fullTextAnnotation") if isinstance(one.get("fullTextAnnotation"), dict) else {}
    annotations = tuple(_annotation(a) for a in _dicts(one.get("textAnnotations")))
    raw_text = full.get("text") if isinstance(full.get("text"), str) else None

    return RecognitionResponse(
        raw_text=raw_text,
        annotations=annotations,
        pages=tuple(_page(p) for p in _dicts(full.get("pages"))),
        error=_error(one.get("error")),
    )
