from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from wtm_web.domain.errors import UnexpectedFailure, UpstreamUnavailable

log = logging.getLogger(__name__)

CDX_FIELDS = "timestamp,original,statuscode,mimetype"


def decode_body(body: bytes, content_type: str, declared: Optional[str]) -> str:
    """
    Uses the charset only when the Content-Type header names one; otherwise
    UTF-8. requests would fall back to ISO-8859-1 for charset-less text/html.
    """
    encoding = declared if declared and "charset" in (content_type or "").lower() else "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        log.warning("Unknown charset %r, decoding as UTF-8", encoding)
        return body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class WaybackClient:
    """
    Thin requests adapter for the two Internet Archive calls we make:
    the CDX index query and the archived page fetch.
    No session is shared, so one client can serve concurrent requests.
    """
    cdx_endpoint: str = "https://web.archive.org/cdx/search/cdx"
    user_agent: str = "WebTimeMachine/1.0"
    row_limit: int = 500
    index_timeout_seconds: int = 30
    page_timeout_seconds: int = 10

    @property
    def _headers(self) -> dict:
        return {"User-Agent": self.user_agent}

    def query_index(self, url: str, from_ts: str, to_ts: str) -> List[List[str]]:
        """
        Returns the raw CDX rows, header row included.
        An empty body is treated as an empty result.
        """
        params = [
            ("url", url),
            ("output", "json"),
            ("fl", CDX_FIELDS),
            ("filter", "statuscode:200"),
            ("filter", "mimetype:text/html"),
            ("collapse", "timestamp:6"),
            ("from", from_ts),
            ("to", to_ts),
            ("limit", str(self.row_limit)),
        ]

        try:
            resp = requests.get(
                self.cdx_endpoint,
                params=params,
                headers=self._headers,
                timeout=self.index_timeout_seconds,
            )
        except requests.RequestException as e:
            raise UnexpectedFailure(f"CDX request failed: {e}") from e

        if not resp.ok:
            raise UpstreamUnavailable(f"CDX index answered HTTP {resp.status_code}")

        if not (resp.text or "").strip():
            return []

        try:
            data = resp.json()
        except ValueError as e:
            raise UnexpectedFailure("CDX index returned invalid JSON") from e

        if not isinstance(data, list):
            raise UnexpectedFailure(f"CDX index returned {type(data).__name__}, expected a list")
        return data

    def fetch_page(self, archive_url: str) -> str:
        """Archived HTML, or "" on any failure. Never raises."""
        try:
            resp = requests.get(
                archive_url,
                headers=self._headers,
                timeout=self.page_timeout_seconds,
            )
        except requests.RequestException as e:
            log.warning("Archive fetch failed for %s: %s", archive_url, e)
            return ""

        if not resp.ok:
            log.warning("Archive fetch for %s answered HTTP %s", archive_url, resp.status_code)
            return ""

        body = resp.content or b""
        log.debug("Fetched %s (%d bytes)", archive_url, len(body))
        return decode_body(body, resp.headers.get("Content-Type", ""), resp.encoding)
