# bowlscan/services/layout.py
from __future__ import annotations
from typing import List, Sequence
import logging

from bowlscan.core.models import TextAnnotation
from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary
from bowlscan.services.geometry import center_y, envelope, height, left_x, right_x, width

log = logging.getLogger(__name__)

ROW_Y_THRESHOLD = 30.0       # px between centre lines of one printed row
SMALL_HEIGHT_RATIO = 0.4
MERGE_GAP_FACTOR = 1.5
MERGE_OVERLAP_FACTOR = 0.5

Row = List[TextAnnotation]

# --------------------------- Row grouping ---------------------------

def group_rows(annotations: Sequence[TextAnnotation], threshold: float = ROW_Y_THRESHOLD) -> List[Row]:
    """
    Greedy single pass: sort by centre-Y, open a new row whenever an
    annotation is more than `threshold` away from the row's first member,
    then order each row left to right. Annotations without a centre-Y are
    left out.
    """
    with_y = [(a, y) for a in annotations for y in (center_y(a),) if y is not None]
    if not with_y:
        return []
    with_y.sort(key=lambda p: p[1])

    rows: List[Row] = []
    current: Row = [with_y[0][0]]
    anchor = with_y[0][1]
    for a, y in with_y[1:]:
        if abs(y - anchor) <= threshold:
            current.append(a)
        else:
            rows.append(current)
            current, anchor = [a], y
    rows.append(current)

    return [sorted(r, key=lambda a: left_x(a) or 0.0) for r in rows]

# --------------------------- Glyph merging ---------------------------

def _glyph_kind(text: str, vocab: RecognitionVocabulary) -> str:
    if "0" <= text <= "9":
        return "digit"
    if vocab.is_name_char(text):
        return "name"
    return ""

def should_merge(prev: TextAnnotation, cur: TextAnnotation,
                 vocab: RecognitionVocabulary = DEFAULT_VOCABULARY) -> bool:
    a, b = (prev.text or "").strip(), (cur.text or "").strip()
    if len(a) != 1 or len(b) != 1:
        return False
    kind = _glyph_kind(a, vocab)
    if not kind or kind != _glyph_kind(b, vocab):
        return False

    prev_right, cur_left = right_x(prev), left_x(cur)
    prev_w, cur_w = width(prev), width(cur)
    if prev_right is None or cur_left is None or prev_w is None or cur_w is None:
        return False

    gap = cur_left - prev_right
    avg_w = (prev_w + cur_w) / 2.0
    return -avg_w * MERGE_OVERLAP_FACTOR <= gap < avg_w * MERGE_GAP_FACTOR

def _merge_group(group: Row) -> TextAnnotation:
    if len(group) == 1:
        return group[0]
    return TextAnnotation(
        text="".join(a.text or "" for a in group),
        poly=envelope(group),
        locale=group[0].locale,
    )

def merge_adjacent(row: Row, vocab: RecognitionVocabulary = DEFAULT_VOCABULARY) -> Row:
    """Fuse runs of single digits ("2","1","4") or single name glyphs into one token."""
    if len(row) <= 1:
        return list(row)
    out: Row = []
    group: Row = [row[0]]
    for cur in row[1:]:
        if should_merge(group[-1], cur, vocab):
            group.append(cur)
        else:
            out.append(_merge_group(group))
            group = [cur]
    out.append(_merge_group(group))
    if len(out) != len(row):
        log.debug("merge_adjacent: %d -> %d tokens: %s", len(row), len(out), [a.text for a in out])
    return out

# --------------------------- Size filter ---------------------------

def filter_small(annotations: Sequence[TextAnnotation],
                 vocab: RecognitionVocabulary = DEFAULT_VOCABULARY) -> List[TextAnnotation]:
    """
    Drop annotations much shorter than the median (hand-written sums such as
    "362+184" squeezed into a cell). Text containing name glyphs is always kept.
    """
    heights = sorted(h for h in (height(a) for a in annotations) if h is not None)
    if len(heights) < 3:
        return list(annotations)

    median = heights[len(heights) // 2]
    min_h = median * SMALL_HEIGHT_RATIO
    log.debug("filter_small: median=%.1f min=%.1f", median, min_h)

    out: List[TextAnnotation] = []
    for a in annotations:
        text = (a.text or "").strip()
        h = height(a)
        if vocab.has_name_char(text) or h is None or h >= min_h:
            out.append(a)
        else:
            log.debug("filter_small: dropped '%s' (h=%.1f)", text, h)
    return out
