from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from config_loader import DEFAULT_CONFIG, load_config
from helper import print_event_gray
from md_lexer import classify_lines

logger = logging.getLogger(__name__)

ARTICLE_SUFFIXES = {".md", ".markdown", ".txt"}


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Parse and validate a user-supplied path.

    Goals:
    - reject obvious malicious / malformed inputs (NUL, empty)
    - avoid directory traversal surprises when a root is given
    - resolve symlinks and return an absolute path
    """
    if not raw or raw.strip() == "":
        raise ValueError("Empty input path.")

    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    p = Path(raw).expanduser()

    # Stricter than necessary, but keeps article lookups predictable.
    if any(part == ".." for part in p.parts):
        raise ValueError("Path traversal ('..') is not allowed.")

    if root is not None and not p.is_absolute():
        p = root / p

    # strict=False so it still resolves when missing (checked below)
    resolved = p.resolve(strict=False)

    if root is not None:
        root_resolved = root.resolve(strict=True)
        try:
            resolved.relative_to(root_resolved)
        except ValueError as e:
            logger.warning("Rejected path outside root: %s", resolved)
            raise ValueError(f"Input path must be within root: {root_resolved}") from e

    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise IsADirectoryError(f"Not a file: {resolved}")

    return resolved


def read_source(path: Path) -> str:
    """
    Read article markup as UTF-8. A leading BOM is dropped; line endings are
    left for the classifier to normalize.
    """
    text = Path(path).read_text(encoding="utf-8")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def list_articles(root: Path) -> list[Path]:
    """Article files below root, sorted, hidden directories skipped."""
    if not root.is_dir():
        return []
    found: list[Path] = []
    for p in sorted(root.glob("**/*")):
        rel = p.relative_to(root)
        if any(seg.startswith(".") for seg in rel.parts):
            continue
        if p.is_file() and p.suffix.lower() in ARTICLE_SUFFIXES:
            found.append(p)
    return found


def format_line_event(lineno: int, kind: str, level: int, text: str) -> str:
    level_part = f" level={level}" if level else ""
    return f"{lineno:>4} {kind:<15}{level_part} {text!r}"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md_reader.py",
        description="Print how each line of an article is classified.",
    )
    parser.add_argument("input", help="Article file to read")
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a config YAML (default: built-in settings)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Optional root directory: input file must be within this directory.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log config and reading details to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = DEFAULT_CONFIG
    if args.config:
        try:
            cfg = load_config(Path(args.config))
        except Exception as e:
            print(f"[md_reader] Failed to load config: {e}", file=sys.stderr)
            return 2

    root_dir: Path | None = None
    if args.root:
        try:
            root_dir = Path(args.root).expanduser().resolve(strict=True)
        except OSError as e:
            print(f"[md_reader] Invalid --root: {e}", file=sys.stderr)
            return 2

    try:
        input_path = safe_input_path(args.input, root=root_dir)
    except (ValueError, OSError) as e:
        print(f"[md_reader] Invalid input path: {e}", file=sys.stderr)
        return 2

    try:
        text = read_source(input_path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[md_reader] Error while reading: {e}", file=sys.stderr)
        return 1
    logger.debug("Read %d characters from %s", len(text), input_path)

    for lineno, line in enumerate(classify_lines(text, cfg), start=1):
        print_event_gray(format_line_event(lineno, line.kind, line.level, line.text))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
