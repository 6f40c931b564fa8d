# config_loader.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
import re

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e

logger = logging.getLogger(__name__)

# Deepest heading the dialect knows about. Configs may lower it, never raise it.
MAX_HEADING_LEVEL = 3

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*$")


def build_heading_re(max_level: int) -> re.Pattern:
    # heading text keeps its trailing whitespace here; the classifier trims it
    return re.compile(r"^(#{1,%d})[ \t]+(\S.*)$" % max_level)


def build_link_re(schemes: tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(s) for s in schemes)
    return re.compile(r"\[([^\[\]\n]+)\]\(((?:%s):[^)\n]*)\)" % alternatives)


class DialectConfig:
    """
    Immutable-ish container for dialect and rendering settings.

    Patterns are compiled once here and shared read-only by every render call.
    """

    def __init__(
        self,
        *,
        max_heading_level: int = MAX_HEADING_LEVEL,
        link_schemes: tuple[str, ...] = ("http", "https"),
        link_target: str = "_blank",
        link_rel: str = "noopener",
        heading_ids: bool = False,
        toc: bool = False,
        toc_min_headings: int = 2,
    ):
        self.max_heading_level = max_heading_level
        self.link_schemes = link_schemes
        self.link_target = link_target
        self.link_rel = link_rel
        # a table of contents needs anchors to point at
        self.heading_ids = heading_ids or toc
        self.toc = toc
        self.toc_min_headings = toc_min_headings

        self.hr_line = "---"
        self.heading_re = build_heading_re(max_heading_level)
        self.unordered_list_re = re.compile(r"^- (.*)$")
        self.ordered_list_re = re.compile(r"^\d+\.\s(.*)$")
        self.image_re = re.compile(r"!\[([^\[\]\n]*)\]\(([^)\n]+)\)")
        self.link_re = build_link_re(link_schemes)
        self.bold_re = re.compile(r"\*\*(.+?)\*\*")

    def __repr__(self) -> str:
        return (
            f"DialectConfig(max_heading_level={self.max_heading_level!r}, "
            f"link_schemes={self.link_schemes!r}, heading_ids={self.heading_ids!r}, "
            f"toc={self.toc!r})"
        )


# ---------------- Defaults ---------------------------------------------------

DEFAULT_CONFIG = DialectConfig()

# ---------------- Loader -----------------------------------------------------


def _as_bool(value: Any, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be true or false")
    return value


def _as_int(value: Any, name: str, default: int, *, low: int, high: int | None = None) -> int:
    if value is None:
        return default
    # bool is an int subclass; "true" is not a level
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < low or (high is not None and value > high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise ValueError(f"{name} must be {bound}, got {value}")
    return value


def _as_str(value: Any, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    return value


def _as_scheme_tuple(value: Any, name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list of strings")
    schemes: list[str] = []
    for item in value:
        scheme = str(item).strip().lower().rstrip(":")
        if not _SCHEME_RE.match(scheme):
            raise ValueError(f"{name}: invalid URL scheme {item!r}")
        if scheme not in schemes:
            schemes.append(scheme)
    if not schemes:
        raise ValueError(f"{name} must not be empty")
    return tuple(schemes)


def config_from_mapping(raw: Any) -> DialectConfig:
    """
    Build a DialectConfig from an already-parsed mapping (YAML root or a dict).
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    d = DEFAULT_CONFIG
    return DialectConfig(
        max_heading_level=_as_int(
            raw.get("max_heading_level"), "max_heading_level", d.max_heading_level,
            low=1, high=MAX_HEADING_LEVEL,
        ),
        link_schemes=_as_scheme_tuple(raw.get("link_schemes"), "link_schemes", d.link_schemes),
        link_target=_as_str(raw.get("link_target"), "link_target", d.link_target),
        link_rel=_as_str(raw.get("link_rel"), "link_rel", d.link_rel),
        heading_ids=_as_bool(raw.get("heading_ids"), "heading_ids", d.heading_ids),
        toc=_as_bool(raw.get("toc"), "toc", d.toc),
        toc_min_headings=_as_int(
            raw.get("toc_min_headings"), "toc_min_headings", d.toc_min_headings, low=1,
        ),
    )


def load_config(path: Path) -> DialectConfig:
    """
    Load YAML config and return a DialectConfig instance.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    cfg = config_from_mapping(raw)
    logger.debug("Loaded config from %s: %r", path, cfg)
    return cfg
