# bowlscan/routers/health.py
from fastapi import APIRouter

from bowlscan.config import get_settings
from bowlscan.services.layout import MERGE_GAP_FACTOR, ROW_Y_THRESHOLD, SMALL_HEIGHT_RATIO
from bowlscan.services.scores import MAX_SCORE, MAX_TOTAL, MIN_SCORE

router = APIRouter()

@router.get("/health")
def health():
    s = get_settings()
    vocab = s.vocabulary()
    return {
        "status": "ok",
        # server
        "PORT": s.PORT,
        "ALLOWED_ORIGINS": s.ALLOWED_ORIGINS,
        "LOG_LEVEL": s.LOG_LEVEL,
        # parser (fixed constants + configurable vocabulary)
        "OCR": {
            "row_y_threshold": ROW_Y_THRESHOLD,
            "score_range": [MIN_SCORE, MAX_SCORE],
            "max_total": MAX_TOTAL,
            "small_height_ratio": SMALL_HEIGHT_RATIO,
            "merge_gap_factor": MERGE_GAP_FACTOR,
            "max_token_digits": s.OCR_MAX_TOKEN_DIGITS,
            "header_keywords": len(vocab.headers),
            "name_script": [vocab.name_char_first, vocab.name_char_last],
        },
    }
