from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Sequence

from wtm_web.domain.models import MessagingEvolution, Snapshot, YearGroup, YearMessaging
from wtm_web.services.shift_scorer import compute_biggest_shift
from wtm_web.services.signal_extractor import extract_signals
from wtm_web.services.url_normalization import UrlNormalizer, WaybackUrlNormalizer

log = logging.getLogger(__name__)


def representative_snapshot(group: YearGroup) -> Snapshot:
    # middle of the year's chronological list; later-middle when even
    return group.snapshots[len(group.snapshots) // 2]


@dataclass(frozen=True)
class EvolutionService:
    """
    Service layer: picks one snapshot per year, fetches it, extracts
    messaging signals and scores the biggest year-over-year shift.
    """
    client: object                      # WaybackClient-like: fetch_page(archive_url) -> str
    fetch_workers: int = 4
    url_normalizer: UrlNormalizer = field(default_factory=WaybackUrlNormalizer)

    def _fetch_all(self, snapshots: Sequence[Snapshot]) -> List[str]:
        urls = [s.archive_url for s in snapshots]
        if self.fetch_workers <= 1 or len(urls) <= 1:
            return [self.client.fetch_page(u) for u in urls]

        # map() yields in submission order, whatever order fetches finish in
        with ThreadPoolExecutor(max_workers=min(self.fetch_workers, len(urls))) as pool:
            return list(pool.map(self.client.fetch_page, urls))

    def analyze(self, year_groups: Sequence[YearGroup], url: str) -> MessagingEvolution:
        url = self.url_normalizer.validate(url)
        ordered = sorted(year_groups, key=lambda g: g.year)
        picked = [representative_snapshot(g) for g in ordered]
        pages = self._fetch_all(picked)

        years: List[YearMessaging] = []
        for snapshot, html in zip(picked, pages):
            signals = extract_signals(html)
            if not html:
                log.info("No content for %s (%s); using empty signals", snapshot.year, snapshot.archive_url)
            years.append(
                YearMessaging(
                    year=snapshot.year,
                    snapshot=snapshot,
                    title=signals.title,
                    meta_description=signals.meta_description,
                    headings=signals.headings,
                    key_phrases=signals.key_phrases,
                )
            )

        return MessagingEvolution(
            url=url,
            years=tuple(years),
            biggest_shift=compute_biggest_shift(years),
        )
