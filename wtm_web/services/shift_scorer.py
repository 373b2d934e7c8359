from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from wtm_web.domain.models import ShiftResult, YearMessaging

TITLE_WEIGHT = 3
DESCRIPTION_WEIGHT = 2
HEADING_WEIGHT = 3
PHRASE_WEIGHT = 2

DESCRIPTION_PREVIEW_CHARS = 80
MAX_HEADINGS_LISTED = 3

SUMMARY_MAJOR = "Major rebrand or redesign detected"
SUMMARY_SIGNIFICANT = "Significant messaging shift"
SUMMARY_MODERATE = "Moderate messaging update"
SUMMARY_MINOR = "Minor wording adjustments"


@dataclass(frozen=True)
class ScoredPair:
    before: YearMessaging
    after: YearMessaging
    score: float


def _overlap_change(before: Sequence[str], after: Sequence[str]) -> float:
    """1 - |after items found in before| / max(|set(before)|, |after|, 1)."""
    before_set = set(before)
    overlap = sum(1 for item in after if item in before_set)
    total = max(len(before_set), len(after), 1)
    return 1 - overlap / total


def score_pair(a: YearMessaging, b: YearMessaging) -> float:
    """Dissimilarity of two consecutive years, 0 (same) .. 10."""
    score = 0.0
    if a.title != b.title:
        score += TITLE_WEIGHT
    if a.meta_description != b.meta_description:
        score += DESCRIPTION_WEIGHT

    # headings compare case-insensitively, key phrases are already lowercase
    score += _overlap_change(
        [h.lower() for h in a.headings],
        [h.lower() for h in b.headings],
    ) * HEADING_WEIGHT
    score += _overlap_change(a.key_phrases, b.key_phrases) * PHRASE_WEIGHT
    return score


def pick_biggest(pairs: Sequence[ScoredPair]) -> ScoredPair:
    """
    Highest score wins. On a tie the earlier pair is kept, so a run of
    all-zero pairs still yields the first one.
    """
    best = pairs[0]
    for pair in pairs[1:]:
        if pair.score > best.score:
            best = pair
    return best


def summarize(score: float) -> str:
    if score > 5:
        return SUMMARY_MAJOR
    if score > 3:
        return SUMMARY_SIGNIFICANT
    if score > 1:
        return SUMMARY_MODERATE
    return SUMMARY_MINOR


def _preview(description: str) -> str:
    if not description:
        return "(none)"
    if len(description) > DESCRIPTION_PREVIEW_CHARS:
        return description[:DESCRIPTION_PREVIEW_CHARS] + "..."
    return description


def _missing_from(headings: Sequence[str], other: Sequence[str]) -> List[str]:
    other_lower = {h.lower() for h in other}
    return [h for h in headings if h.lower() not in other_lower]


def _quoted(headings: Sequence[str]) -> str:
    return ", ".join(f'"{h}"' for h in headings[:MAX_HEADINGS_LISTED])


def describe(a: YearMessaging, b: YearMessaging) -> List[str]:
    details: List[str] = []
    if a.title != b.title:
        details.append(f'Title changed from "{a.title or "(none)"}" to "{b.title or "(none)"}"')
    if a.meta_description != b.meta_description:
        details.append(
            f'Description changed from "{_preview(a.meta_description)}" to "{_preview(b.meta_description)}"'
        )

    added = _missing_from(b.headings, a.headings)
    removed = _missing_from(a.headings, b.headings)
    if added:
        details.append(f"New headings appeared: {_quoted(added)}")
    if removed:
        details.append(f"Headings removed: {_quoted(removed)}")
    return details


def compute_biggest_shift(years: Sequence[YearMessaging]) -> Optional[ShiftResult]:
    """
    Finds the consecutive year pair whose messaging changed the most.
    `years` must already be in ascending year order.
    """
    if len(years) < 2:
        return None

    pairs = [ScoredPair(a, b, score_pair(a, b)) for a, b in zip(years, years[1:])]
    best = pick_biggest(pairs)

    return ShiftResult(
        from_year=best.before.year,
        to_year=best.after.year,
        score=best.score,
        summary=summarize(best.score),
        details=tuple(describe(best.before, best.after)),
    )
