# bowlscan/services/rows.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from bowlscan.core.models import ParsedScoreRow, TextAnnotation
from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary
from bowlscan.services.geometry import row_center_y
from bowlscan.services.layout import ROW_Y_THRESHOLD
from bowlscan.services.scores import (
    DEFAULT_MAX_DIGITS, MAX_SCORE, clean_scores, drop_lane_numbers, filter_total,
)
from bowlscan.services.tokens import collect_tokens, resolve_name_fragments

log = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 1.0
MIN_HIGH_SCORES_FOR_GLYPH_NAME = 2

@dataclass(frozen=True)
class RowParse:
    """A named row before orphan reconciliation; `scores` may still be short or empty."""
    player_name: str
    scores: Tuple[int, ...]
    name_candidates: Tuple[str, ...] = ()
    confidence: float = DEFAULT_CONFIDENCE

    @property
    def is_complete(self) -> bool:
        return len(self.scores) >= 3 and any(s >= 100 for s in self.scores)

    def to_row(self, scores: Optional[Sequence[int]] = None) -> ParsedScoreRow:
        return ParsedScoreRow(
            player_name=self.player_name,
            scores=tuple(self.scores if scores is None else scores),
            confidence=self.confidence,
            name_candidates=self.name_candidates,
        )

def parse_row(
    texts: Sequence[str],
    dictionary: Sequence[str] = (),
    vocab: RecognitionVocabulary = DEFAULT_VOCABULARY,
    *,
    separator: str = "",
    promote_fragments: bool = True,
    max_digits: int = DEFAULT_MAX_DIGITS,
) -> Tuple[Optional[RowParse], List[int]]:
    """
    Parse one visual row. Returns (named row or None, raw scores seen).

    The raw score list is what an orphan row contributes when no name
    could be found.
    """
    toks = collect_tokens(texts, vocab, max_digits)
    names = list(toks.names)
    candidates: Tuple[str, ...] = ()

    if not names and toks.fragments and promote_fragments:
        combined = "".join(toks.fragments)
        res = resolve_name_fragments(combined, dictionary)
        high = sum(1 for s in toks.scores if 100 <= s <= MAX_SCORE)
        if res.is_resolved:
            names.append(combined)
        elif high >= MIN_HIGH_SCORES_FOR_GLYPH_NAME:
            names.append(combined)
            candidates = tuple(res.candidates)
            log.debug("parse_row: glyphs '%s' promoted to name (%d scores in range)", combined, high)

    player = separator.join(names).strip()
    if not player or not toks.scores:
        return None, toks.scores

    cleaned = drop_lane_numbers(toks.scores)
    if not cleaned:
        return None, toks.scores
    games = filter_total(cleaned)
    log.debug("parse_row: name=%s raw=%s final=%s", player, toks.scores, games)
    return RowParse(player_name=player, scores=tuple(games), name_candidates=candidates), toks.scores

def merge_rows(
    rows: Sequence[Sequence[TextAnnotation]],
    dictionary: Sequence[str] = (),
    vocab: RecognitionVocabulary = DEFAULT_VOCABULARY,
    *,
    threshold: float = ROW_Y_THRESHOLD,
    max_digits: int = DEFAULT_MAX_DIGITS,
) -> List[ParsedScoreRow]:
    """
    Parse grouped rows, then fold score-only rows into a nearby named row
    that came up short (a name written slightly above or below its scores).
    """
    done: List[ParsedScoreRow] = []
    incomplete: List[Tuple[float, RowParse]] = []
    orphans: List[Tuple[float, List[int]]] = []

    for row in rows:
        y = row_center_y(row)
        parsed, raw_scores = parse_row([a.text for a in row], dictionary, vocab, max_digits=max_digits)
        if parsed is not None:
            if parsed.is_complete:
                done.append(parsed.to_row())
            else:
                incomplete.append((y, parsed))
        elif raw_scores:
            orphans.append((y, raw_scores))

    for name_y, named in incomplete:
        combined = list(named.scores)
        remaining: List[Tuple[float, List[int]]] = []
        for orphan_y, scores in orphans:
            if abs(orphan_y - name_y) <= threshold * 2:
                combined.extend(scores)
            else:
                remaining.append((orphan_y, scores))
        orphans = remaining

        games = clean_scores(combined)
        if games:
            log.debug("merge_rows: %s + orphans -> %s", named.player_name, games)
            done.append(named.to_row(games))

    return done
