from __future__ import annotations

import os
import sys
from typing import TextIO


def print_event_gray(text: str, *, file: TextIO | None = None) -> None:
    """
    Print event/debug output in gray using ANSI escape codes.

    Color is skipped when the stream is not a terminal or NO_COLOR is set.
    """
    stream = file if file is not None else sys.stdout
    GRAY = "\033[90m"
    RESET = "\033[0m"
    if os.environ.get("NO_COLOR") or not getattr(stream, "isatty", lambda: False)():
        print(text, file=stream)
        return
    print(f"{GRAY}{text}{RESET}", file=stream)
