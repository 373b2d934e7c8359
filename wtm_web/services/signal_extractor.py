"""
Heuristic, regex-based extraction of messaging signals from raw HTML.

This deliberately does not build a DOM: archived pages are often truncated or
broken, and a first-match regex degrades to empty fields instead of failing.
All functions are pure; the compiled patterns are read-only module constants.
"""
from __future__ import annotations

import re
from collections import Counter
from typing import List, Sequence

from wtm_web.domain.models import PageSignals

MAX_HEADINGS = 5
MAX_KEY_PHRASES = 8
MIN_TOKEN_LEN = 4

_TAG = re.compile(r"<[^>]*>")
_TITLE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
_META_NAME_FIRST = re.compile(
    r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']*)["'][^>]*>""",
    re.IGNORECASE,
)
_META_CONTENT_FIRST = re.compile(
    r"""<meta[^>]*content=["']([^"']*)["'][^>]*name=["']description["'][^>]*>""",
    re.IGNORECASE,
)
_HEADING = re.compile(r"<h[1-3][^>]*>([\s\S]*?)</h[1-3]>", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def strip_tags(fragment: str) -> str:
    return _TAG.sub("", fragment).strip()


def extract_title(html: str) -> str:
    m = _TITLE.search(html)
    return strip_tags(m.group(1)) if m else ""


def extract_meta_description(html: str) -> str:
    m = _META_NAME_FIRST.search(html) or _META_CONTENT_FIRST.search(html)
    return m.group(1).strip() if m else ""


def extract_headings(html: str) -> List[str]:
    """First h1-h3 texts in document order, keeping only 2 < len < 200."""
    headings: List[str] = []
    for m in _HEADING.finditer(html):
        if len(headings) >= MAX_HEADINGS:
            break
        text = strip_tags(m.group(1))
        if 2 < len(text) < 200:
            headings.append(text)
    return headings


def extract_key_phrases(title: str, description: str, headings: Sequence[str]) -> List[str]:
    all_text = " ".join([title, description, *headings]).lower()
    tokens = (_NON_ALNUM.sub("", w) for w in all_text.split())
    # Counter keeps first-seen order and most_common() is stable on ties
    freq = Counter(t for t in tokens if len(t) >= MIN_TOKEN_LEN)
    return [word for word, _ in freq.most_common(MAX_KEY_PHRASES)]


def extract_signals(html: str) -> PageSignals:
    html = html or ""
    title = extract_title(html)
    meta_description = extract_meta_description(html)
    headings = extract_headings(html)
    return PageSignals(
        title=title,
        meta_description=meta_description,
        headings=tuple(headings),
        key_phrases=tuple(extract_key_phrases(title, meta_description, headings)),
    )
