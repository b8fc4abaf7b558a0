#!/usr/bin/env python3
"""
ClearCue — Entry Point
=======================

Runs extraction on a model reply and, optionally, renders the PDF report.
No network access: the reply comes from a file or the built-in sample.

Usage:
    python main.py                                   # Sample diagnosis reply
    python main.py skincare reply.txt                # Your own reply text
    python main.py diagnosis reply.txt report.pdf    # ...and write the PDF
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from clearcue.exceptions import ClearCueError
from clearcue.extraction import extract
from clearcue.fallbacks import fallback_for
from clearcue.layout import render
from clearcue.models import FORM_TYPES, RenderRequest, parse_mode

load_dotenv()


# ─── A Typical Model Reply, Chatty on Purpose ───────────────────────

SAMPLE_REPLY = """\
Sure, here is the analysis:
```json
{
  "diagnosis": "Mild eczema (atopic dermatitis)",
  "cause": "Dry climate combined with a compromised skin barrier",
  "treatment": ["Moisturize twice daily", "Use lukewarm water when washing"],
  "prevention": ["Hydrate", "Avoid harsh soaps"],
  "medicines": ["OTC 1% hydrocortisone cream, once daily for up to 7 days"],
  "naturalRemedies": ["Aloe vera gel on affected patches"],
  "products": ["CeraVe Moisturizing Cream"]
}
```
Let me know if you need anything else!"""


# ─── ANSI Color Constants ───────────────────────────────────────────

_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_record(record, is_fallback: bool) -> None:
    """Pretty-print a record with ANSI color codes."""
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  CLEARCUE RECORD{_RESET}")
    print(f"{'=' * _WIDTH}")
    if is_fallback:
        print(f"  {_YELLOW}Reply was unusable, showing the generic fallback record{_RESET}")
    else:
        print(f"  {_GREEN}Reply parsed and validated{_RESET}")
    print(f"{'─' * _WIDTH}")

    for key, value in record.model_dump(by_alias=True).items():
        if isinstance(value, list):
            print(f"  {_BOLD}{key}{_RESET}")
            for item in value:
                print(f"    {_DIM}-{_RESET} {item}")
        else:
            print(f"  {_BOLD}{key}{_RESET}: {value}")

    print(f"{'=' * _WIDTH}\n")


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str]) -> int:
    """Extract a record from a reply and optionally write its PDF."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        mode = parse_mode(argv[0] if argv else "diagnosis")
    except ClearCueError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    reply = Path(argv[1]).read_text(encoding="utf-8") if len(argv) > 1 else SAMPLE_REPLY

    record = extract(reply, mode)
    print_record(record, is_fallback=record == fallback_for(mode))

    if len(argv) > 2:
        request = RenderRequest(mode=mode, record=record, form_data=FORM_TYPES[mode]())
        document = render(request)
        Path(argv[2]).write_bytes(document.pdf)
        print(f"  Wrote {len(document.pages)} page(s) to {argv[2]}\n")

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
