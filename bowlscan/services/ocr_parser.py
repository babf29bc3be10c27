# bowlscan/services/ocr_parser.py
from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence
import logging

from bowlscan.core.models import (
    OcrParseResult, Page, ParsedScoreRow, RecognitionResponse, TextAnnotation,
)
from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary
from bowlscan.services.layout import filter_small, group_rows, merge_adjacent
from bowlscan.services.rows import merge_rows, parse_row
from bowlscan.services.scores import DEFAULT_MAX_DIGITS
from bowlscan.services.tokens import extract_name_dictionary

log = logging.getLogger(__name__)

"""
Scoreboard OCR -> per-player score rows.

Three extraction strategies are tried in a fixed order and the first one
that yields any row wins:

  word        recognizer's own word boxes from the page tree
  coordinate  flat per-glyph/per-word annotations, re-merged by position
  line        plain text split on newlines, no geometry at all
"""

class Strategy(str, Enum):
    word = "word"
    coordinate = "coordinate"
    line = "line"

STRATEGY_ORDER = (Strategy.word, Strategy.coordinate, Strategy.line)

# --------------------------- Inputs ---------------------------

def words_from_pages(pages: Sequence[Page]) -> List[TextAnnotation]:
    """Flatten Page -> Block -> Paragraph -> Word into annotations carrying the word box."""
    out: List[TextAnnotation] = []
    for page in pages:
        for block in page.blocks:
            for para in block.paragraphs:
                for word in para.words:
                    text = word.text
                    if text.strip():
                        out.append(TextAnnotation(text=text, poly=word.bbox))
    return out

def raw_text_of(resp: RecognitionResponse) -> str:
    if resp.raw_text is not None:
        return resp.raw_text
    if resp.annotations:
        return resp.annotations[0].text or ""
    return ""

# --------------------------- Strategies ---------------------------

class ScoreboardParser:
    """
    Stateless apart from configuration; one instance can serve any number
    of concurrent calls.
    """

    def __init__(self, vocab: RecognitionVocabulary = DEFAULT_VOCABULARY,
                 max_digits: int = DEFAULT_MAX_DIGITS):
        self.vocab = vocab
        self.max_digits = max_digits
        self._dispatch: Dict[Strategy, Callable[[RecognitionResponse, str, List[str]], List[ParsedScoreRow]]] = {
            Strategy.word: self._from_words,
            Strategy.coordinate: self._from_coordinates,
            Strategy.line: self._from_lines,
        }

    def parse(self, resp: RecognitionResponse) -> OcrParseResult:
        raw_text = raw_text_of(resp)

        if resp.error is not None:
            msg = resp.error.describe()
            log.warning("recognizer reported an error, skipping parse: %s", msg)
            return OcrParseResult.failure(raw_text, msg)

        dictionary = extract_name_dictionary(raw_text, self.vocab)
        log.debug("name dictionary: %s", dictionary)

        for strategy in STRATEGY_ORDER:
            rows = self.run(strategy, resp, raw_text, dictionary)
            log.debug("strategy %s -> %d rows", strategy.value, len(rows))
            if rows:
                log.info("parsed %d rows with %s strategy", len(rows), strategy.value)
                return OcrParseResult.success(rows, raw_text, strategy.value)

        log.info("no score rows found (%d chars of text)", len(raw_text))
        return OcrParseResult.failure(raw_text)

    def run(self, strategy: Strategy, resp: RecognitionResponse, raw_text: str,
            dictionary: Optional[List[str]] = None) -> List[ParsedScoreRow]:
        if dictionary is None:
            dictionary = extract_name_dictionary(raw_text, self.vocab)
        return self._dispatch[strategy](resp, raw_text, dictionary)

    def _from_words(self, resp: RecognitionResponse, raw_text: str, dictionary: List[str]) -> List[ParsedScoreRow]:
        words = words_from_pages(resp.pages)
        if not words:
            return []
        kept = filter_small(words, self.vocab)
        log.debug("word strategy: %d words, %d after size filter", len(words), len(kept))
        rows = group_rows(kept)
        return merge_rows(rows, dictionary, self.vocab, max_digits=self.max_digits)

    def _from_coordinates(self, resp: RecognitionResponse, raw_text: str, dictionary: List[str]) -> List[ParsedScoreRow]:
        # index 0 is the whole-image annotation
        pieces = list(resp.annotations[1:])
        if not pieces:
            return []
        rows = [merge_adjacent(r, self.vocab) for r in group_rows(pieces)]
        return merge_rows(rows, dictionary, self.vocab, max_digits=self.max_digits)

    def _from_lines(self, resp: RecognitionResponse, raw_text: str, dictionary: List[str]) -> List[ParsedScoreRow]:
        if not raw_text.strip():
            return []
        out: List[ParsedScoreRow] = []
        for line in raw_text.split("\n"):
            if not line.strip():
                continue
            parsed, _ = parse_row(
                line.split(), dictionary, self.vocab,
                separator=" ", promote_fragments=False, max_digits=self.max_digits,
            )
            if parsed is not None and parsed.scores:
                out.append(parsed.to_row())
        return out


_default_parser = ScoreboardParser()

def parse(resp: RecognitionResponse, parser: Optional[ScoreboardParser] = None) -> OcrParseResult:
    return (parser or _default_parser).parse(resp)
