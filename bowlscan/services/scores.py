# bowlscan/services/scores.py
from __future__ import annotations
from typing import Iterator, List, Optional, Sequence, Tuple
import logging

log = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 300
MAX_TOTAL = 999          # largest value a 3-digit running total can take
LANE_NUMBER_CEILING = 10 # values below this are row/lane indices once a real score is present
TOTAL_TOLERANCE = 0.15
DEFAULT_MAX_DIGITS = 15

# --------------------------- Splitting ---------------------------

def iter_splits(digits: str, start: int = 0, prefix: Tuple[int, ...] = ()) -> Iterator[Tuple[int, ...]]:
    """
    Yield every way to cut `digits[start:]` into 1-3 digit numbers in 0..999.

    Longest pieces are tried first, so the yield order is also the tie-break
    order. Multi-digit pieces with a leading zero are rejected.
    """
    if start >= len(digits):
        if prefix:
            yield prefix
        return
    for size in (3, 2, 1):
        end = start + size
        if end > len(digits):
            continue
        piece = digits[start:end]
        if size > 1 and piece.startswith("0"):
            continue
        value = int(piece)
        if MIN_SCORE <= value <= MAX_TOTAL:
            yield from iter_splits(digits, end, prefix + (value,))

def plausibility(split: Sequence[int]) -> int:
    total = 0
    for v in split:
        if 100 <= v <= MAX_SCORE:
            total += 1000
        elif MAX_SCORE < v <= MAX_TOTAL:
            total += 200
        elif 50 <= v <= 99:
            total += 500
        elif 10 <= v <= 49:
            total += 100
        elif 1 <= v <= 9:
            total -= 500
        else:
            total -= 200
    return total

def best_split(digits: str) -> List[int]:
    best: Optional[Tuple[int, ...]] = None
    best_w = 0
    for cand in iter_splits(digits):
        w = plausibility(cand)
        # strict '>' keeps the first candidate on ties
        if best is None or w > best_w:
            best, best_w = cand, w
    return list(best) if best is not None else []

def extract_scores(digits: str, max_digits: int = DEFAULT_MAX_DIGITS) -> List[int]:
    """Candidate scores from one run of ASCII digits."""
    if not digits or not digits.isascii() or not digits.isdigit():
        return []
    value = int(digits)
    if MIN_SCORE <= value <= MAX_SCORE:
        return [value]
    if len(digits) == 3 and MAX_SCORE < value <= MAX_TOTAL:
        return [value]
    if len(digits) >= 4:
        if len(digits) > max_digits:
            log.debug("extract_scores: '%s' longer than %d digits, not split", digits, max_digits)
            return []
        out = best_split(digits)
        log.debug("extract_scores: split '%s' -> %s", digits, out)
        return out
    return []

# --------------------------- Row clean-up ---------------------------

def drop_lane_numbers(scores: Sequence[int]) -> List[int]:
    """When any value looks like a real game (>=100), single digits are row/lane numbers."""
    if any(s >= 100 for s in scores):
        kept = [s for s in scores if s >= LANE_NUMBER_CEILING]
        if len(kept) != len(scores):
            log.debug("lane filter: %s -> %s", list(scores), kept)
        return kept
    return list(scores)

def filter_total(scores: Sequence[int]) -> List[int]:
    """
    Remove a trailing total column.

    Values above 300 are always dropped. With more than three games left the
    largest is treated as a total when it is within 15% of the sum of the
    others; either way at most three values survive, sorted ascending.
    """
    games = [s for s in scores if s <= MAX_SCORE]
    removed = [s for s in scores if s > MAX_SCORE]
    if removed:
        log.debug("filter_total: dropped totals >%d: %s", MAX_SCORE, removed)
    if len(games) <= 3:
        return games

    ordered = sorted(games, reverse=True)
    largest, rest = ordered[0], ordered[1:]
    rest_sum = sum(rest)
    is_total = (
        rest_sum > 0
        and largest >= int(rest_sum * (1 - TOTAL_TOLERANCE))
        and largest <= int(rest_sum * (1 + TOTAL_TOLERANCE))
    )
    # NOTE: kept values come back sorted by value, not in game order
    if is_total:
        log.debug("filter_total: %d ~ sum(%s)=%d, treated as total", largest, rest, rest_sum)
        return sorted(rest[:3])
    log.debug("filter_total: %d != sum(%s)=%d, keeping top 3", largest, rest, rest_sum)
    return sorted(ordered[:3])

def clean_scores(scores: Sequence[int]) -> List[int]:
    return filter_total(drop_lane_numbers(scores))
