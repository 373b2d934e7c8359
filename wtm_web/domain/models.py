######## models.py
########

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from wtm_web.domain.errors import InvalidInput

SNAPSHOT_STR_FIELDS = (
    "timestamp",
    "url",
    "statusCode",
    "mimeType",
    "archiveUrl",
    "formattedDate",
    "month",
)


def _require_int(raw: Any, what: str) -> int:
    # bool is an int subclass; a JSON true/false is not a year
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidInput(f"{what} must be an integer")
    return raw


@dataclass(frozen=True)
class Snapshot:
    timestamp: str              # YYYYMMDDHHMMSS
    url: str
    status_code: str
    mime_type: str
    archive_url: str
    formatted_date: str         # "Jan 5, 2023"
    year: int
    month: str                  # "Jan" .. "Dec"

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "url": self.url,
            "statusCode": self.status_code,
            "mimeType": self.mime_type,
            "archiveUrl": self.archive_url,
            "formattedDate": self.formatted_date,
            "year": self.year,
            "month": self.month,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Snapshot":
        if not isinstance(raw, dict):
            raise InvalidInput("snapshot must be an object")
        for key in SNAPSHOT_STR_FIELDS:
            if not isinstance(raw.get(key), str):
                raise InvalidInput(f"snapshot.{key} must be a string")
        return cls(
            timestamp=raw["timestamp"],
            url=raw["url"],
            status_code=raw["statusCode"],
            mime_type=raw["mimeType"],
            archive_url=raw["archiveUrl"],
            formatted_date=raw["formattedDate"],
            year=_require_int(raw.get("year"), "snapshot.year"),
            month=raw["month"],
        )


@dataclass(frozen=True)
class YearGroup:
    year: int
    snapshots: Tuple[Snapshot, ...]

    @property
    def count(self) -> int:
        return len(self.snapshots)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "snapshots": [s.to_dict() for s in self.snapshots],
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "YearGroup":
        """
        Parses a year group posted back by the presentation layer.
        `count` must be present and numeric but is recomputed from the list.
        """
        if not isinstance(raw, dict):
            raise InvalidInput("year group must be an object")
        year = _require_int(raw.get("year"), "yearGroup.year")
        _require_int(raw.get("count"), "yearGroup.count")

        snaps_raw = raw.get("snapshots")
        if not isinstance(snaps_raw, list):
            raise InvalidInput("yearGroup.snapshots must be a list")
        if not snaps_raw:
            raise InvalidInput(f"year group {year} has no snapshots")

        snapshots = tuple(Snapshot.from_dict(s) for s in snaps_raw)
        strays = sorted({s.year for s in snapshots if s.year != year})
        if strays:
            raise InvalidInput(f"year group {year} contains snapshots from {strays}")
        return cls(year=year, snapshots=snapshots)


@dataclass(frozen=True)
class WaybackResponse:
    url: str
    year_groups: Tuple[YearGroup, ...]
    oldest_snapshot: Optional[Snapshot]
    newest_snapshot: Optional[Snapshot]

    @property
    def total_snapshots(self) -> int:
        return sum(g.count for g in self.year_groups)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "totalSnapshots": self.total_snapshots,
            "yearGroups": [g.to_dict() for g in self.year_groups],
            "oldestSnapshot": self.oldest_snapshot.to_dict() if self.oldest_snapshot else None,
            "newestSnapshot": self.newest_snapshot.to_dict() if self.newest_snapshot else None,
        }


@dataclass(frozen=True)
class PageSignals:
    title: str
    meta_description: str
    headings: Tuple[str, ...]
    key_phrases: Tuple[str, ...]


@dataclass(frozen=True)
class YearMessaging:
    year: int
    snapshot: Snapshot
    title: str
    meta_description: str
    headings: Tuple[str, ...]
    key_phrases: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "snapshot": self.snapshot.to_dict(),
            "title": self.title,
            "metaDescription": self.meta_description,
            "headings": list(self.headings),
            "keyPhrases": list(self.key_phrases),
        }


@dataclass(frozen=True)
class ShiftResult:
    from_year: int
    to_year: int
    score: float
    summary: str
    details: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "fromYear": self.from_year,
            "toYear": self.to_year,
            "score": self.score,
            "summary": self.summary,
            "details": list(self.details),
        }


@dataclass(frozen=True)
class MessagingEvolution:
    url: str
    years: Tuple[YearMessaging, ...]
    biggest_shift: Optional[ShiftResult]

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "years": [y.to_dict() for y in self.years],
            "biggestShift": self.biggest_shift.to_dict() if self.biggest_shift else None,
        }
