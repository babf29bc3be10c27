# bowlscan/cli.py
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from bowlscan.config import get_settings
from bowlscan.services.ocr_parser import ScoreboardParser
from bowlscan.services.vision import RecognizerPayloadError, response_from_json

EXIT_OK, EXIT_NO_ROWS, EXIT_BAD_INPUT = 0, 1, 2

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="bowlscan-parse",
        description="Turn a saved Vision images:annotate JSON response into bowling score rows.",
    )
    ap.add_argument("response", help="path to the recognizer JSON response")
    ap.add_argument("--pretty", action="store_true", help="indent the JSON output")
    ap.add_argument("-v", "--verbose", action="store_true", help="log parser decisions to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    try:
        payload = json.loads(Path(args.response).read_text(encoding="utf-8"))
        resp = response_from_json(payload)
    except (OSError, ValueError) as e:
        # RecognizerPayloadError and JSONDecodeError are both ValueErrors
        kind = "bad payload" if isinstance(e, RecognizerPayloadError) else "cannot read"
        print(f"bowlscan-parse: {kind}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    s = get_settings()
    result = ScoreboardParser(vocab=s.vocabulary(), max_digits=s.OCR_MAX_TOKEN_DIGITS).parse(resp)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if args.pretty else None))
    return EXIT_OK if result.is_success else EXIT_NO_ROWS


if __name__ == "__main__":
    sys.exit(main())
