# bowlscan/services/tokens.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple
import re
import logging

from bowlscan.core.models import NameResolution
from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary
from bowlscan.services.scores import DEFAULT_MAX_DIGITS, extract_scores

log = logging.getLogger(__name__)

_DIGIT_RUN_RX = re.compile(r"[0-9]+")
_ALL_DIGITS_RX = re.compile(r"^[0-9]+$")

class TokenKind(str, Enum):
    noise = "noise"              # blank, header keyword, punctuation
    name = "name"                # 2-4 name glyphs
    fragment = "fragment"        # exactly one name glyph
    digits = "digits"            # ASCII digits only
    mixed = "mixed"              # digits with separators, e.g. "189-203"
    name_digits = "name_digits"  # name glyphs abutting a score, e.g. "홍길동183"
    other_name = "other_name"    # any other lettered text (latin names etc.)

@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    name: str = ""
    digit_runs: Tuple[str, ...] = ()

def classify_token(raw: str, vocab: RecognitionVocabulary = DEFAULT_VOCABULARY) -> Token:
    text = (raw or "").strip()
    if not text or vocab.is_header(text):
        return Token(TokenKind.noise, text)
    if vocab.name_pattern.match(text):
        return Token(TokenKind.name, text, name=text)
    if vocab.single_char_pattern.match(text):
        return Token(TokenKind.fragment, text, name=text)
    if _ALL_DIGITS_RX.match(text):
        return Token(TokenKind.digits, text, digit_runs=(text,))

    # leading name run is checked before generic digit extraction so a name
    # glued to its first score keeps the name
    lead = vocab.leading_name_run(text)
    if len(lead) >= 2 and not vocab.is_header(lead):
        runs = tuple(_DIGIT_RUN_RX.findall(text[len(lead):]))
        return Token(TokenKind.name_digits if runs else TokenKind.name, text, name=lead, digit_runs=runs)

    runs = tuple(_DIGIT_RUN_RX.findall(text))
    if runs:
        return Token(TokenKind.mixed, text, digit_runs=runs)
    if any(c.isalpha() for c in text):
        return Token(TokenKind.other_name, text, name=text)
    return Token(TokenKind.noise, text)

@dataclass
class RowTokens:
    names: List[str] = field(default_factory=list)
    fragments: List[str] = field(default_factory=list)
    scores: List[int] = field(default_factory=list)

def collect_tokens(texts: Sequence[str], vocab: RecognitionVocabulary = DEFAULT_VOCABULARY,
                   max_digits: int = DEFAULT_MAX_DIGITS) -> RowTokens:
    """Classify every token of a row and gather names, glyph fragments and scores."""
    out = RowTokens()
    for raw in texts:
        tok = classify_token(raw, vocab)
        if tok.kind is TokenKind.fragment:
            out.fragments.append(tok.name)
        elif tok.name:
            out.names.append(tok.name)
        for run in tok.digit_runs:
            out.scores.extend(extract_scores(run, max_digits))
    return out

# --------------------------- Name dictionary ---------------------------

def extract_name_dictionary(raw_text: str, vocab: RecognitionVocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """Distinct 2-4 glyph runs from the whole-image text, in first-seen order, headers excluded."""
    seen = dict.fromkeys(
        m for m in vocab.name_run_pattern.findall(raw_text or "") if not vocab.is_header(m)
    )
    return list(seen)

def resolve_name_fragments(fragment: str, dictionary: Sequence[str]) -> NameResolution:
    """
    Look a glyph-only name up in the dictionary.

    Only an exact hit resolves. Partial hits are reported as candidates and
    left for a person to pick: a single surname glyph routinely matches two
    different players.
    """
    if not fragment or not dictionary:
        return NameResolution(status="unknown", fragment=fragment)
    if fragment in dictionary:
        return NameResolution(status="resolved", fragment=fragment, name=fragment)

    prefix = [n for n in dictionary if n.startswith(fragment)]
    inner = [n for n in dictionary if fragment in n and n not in prefix]
    candidates = prefix + inner
    if candidates:
        log.debug("resolve_name_fragments: '%s' -> candidates %s (left unresolved)", fragment, candidates)
        return NameResolution(status="ambiguous", fragment=fragment, candidates=candidates)
    return NameResolution(status="unknown", fragment=fragment)
