from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from itertools import groupby
from typing import Callable, List, Optional, Sequence, Tuple

from wtm_web.domain.models import Snapshot, WaybackResponse, YearGroup
from wtm_web.services.url_normalization import UrlNormalizer, WaybackUrlNormalizer

log = logging.getLogger(__name__)

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_timestamp(ts: str) -> Tuple[int, str, str]:
    """'20230105000000' -> (2023, 'Jan', 'Jan 5, 2023')."""
    year = int(ts[0:4])
    month_idx = int(ts[4:6]) - 1
    month = MONTHS[month_idx] if 0 <= month_idx < len(MONTHS) else "Jan"
    day = int(ts[6:8])
    return year, month, f"{month} {day}, {year}"


def lookback_window(today: date, years: int) -> Tuple[str, str]:
    return f"{today.year - years}0101", f"{today.year}1231"


def group_by_year(snapshots: Sequence[Snapshot]) -> List[YearGroup]:
    """Expects `snapshots` sorted by timestamp; returns the newest year first."""
    groups = [
        YearGroup(year=year, snapshots=tuple(snaps))
        for year, snaps in groupby(snapshots, key=lambda s: s.year)
    ]
    return sorted(groups, key=lambda g: g.year, reverse=True)


@dataclass(frozen=True)
class SnapshotLocator:
    """
    Finds a URL's captures in the archive index and groups them by year.
    """
    client: object                      # WaybackClient-like: query_index(url, from_ts, to_ts)
    archive_base: str = "https://web.archive.org/web"
    lookback_years: int = 10
    url_normalizer: UrlNormalizer = field(default_factory=WaybackUrlNormalizer)
    today: Callable[[], date] = date.today

    def _to_snapshot(self, row: Sequence[str]) -> Optional[Snapshot]:
        if not isinstance(row, (list, tuple)) or len(row) < 4:
            log.warning("Skipping short CDX row: %r", row)
            return None
        timestamp, original, status_code, mime_type = (str(v) for v in row[:4])
        if len(timestamp) != 14 or not timestamp.isdigit():
            log.warning("Skipping CDX row with bad timestamp: %r", row)
            return None

        year, month, formatted_date = parse_timestamp(timestamp)
        full_original = self.url_normalizer.for_archive(original)
        return Snapshot(
            timestamp=timestamp,
            url=full_original,
            status_code=status_code,
            mime_type=mime_type,
            archive_url=f"{self.archive_base}/{timestamp}/{full_original}",
            formatted_date=formatted_date,
            year=year,
            month=month,
        )

    def snapshots_from_rows(self, rows: Sequence[Sequence[str]]) -> List[Snapshot]:
        """Maps CDX data rows (header already removed), de-duplicated and time-sorted."""
        seen = set()
        snapshots: List[Snapshot] = []
        for row in rows:
            snap = self._to_snapshot(row)
            if snap is None:
                continue
            key = (snap.timestamp, row[1])
            if key in seen:
                continue
            seen.add(key)
            snapshots.append(snap)
        snapshots.sort(key=lambda s: s.timestamp)
        return snapshots

    def locate(self, url: str) -> WaybackResponse:
        url = self.url_normalizer.validate(url)
        from_ts, to_ts = lookback_window(self.today(), self.lookback_years)
        query_url = self.url_normalizer.for_index_query(url)

        data = self.client.query_index(query_url, from_ts, to_ts)
        if not data or len(data) <= 1:
            log.info("No captures for %s between %s and %s", query_url, from_ts, to_ts)
            return WaybackResponse(url=url, year_groups=(), oldest_snapshot=None, newest_snapshot=None)

        snapshots = self.snapshots_from_rows(data[1:])
        if not snapshots:
            return WaybackResponse(url=url, year_groups=(), oldest_snapshot=None, newest_snapshot=None)

        return WaybackResponse(
            url=url,
            year_groups=tuple(group_by_year(snapshots)),
            oldest_snapshot=snapshots[0],
            newest_snapshot=snapshots[-1],
        )
