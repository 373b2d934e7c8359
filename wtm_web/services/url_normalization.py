import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from wtm_web.domain.errors import InvalidInput

_SCHEME_PREFIX = re.compile(r"^https?://")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


class UrlNormalizer:
    """Strategy interface."""
    def validate(self, s: str) -> str:
        raise NotImplementedError

    def for_index_query(self, s: str) -> str:
        raise NotImplementedError

    def for_archive(self, original: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class WaybackUrlNormalizer(UrlNormalizer):
    default_scheme: str = "https"

    def validate(self, s: str) -> str:
        """Returns `s` trimmed if it is an absolute URL, else raises InvalidInput."""
        if not isinstance(s, str) or not s.strip():
            raise InvalidInput("URL is required.")
        if any(ch.isspace() for ch in s.strip()):
            raise InvalidInput(f"Not a valid URL: {s!r}")
        try:
            parts = urlsplit(s.strip())
        except ValueError as e:
            raise InvalidInput(f"Not a valid URL: {s!r}") from e
        if not parts.scheme or not _SCHEME.match(parts.scheme) or not parts.netloc:
            raise InvalidInput(f"Not a valid URL: {s!r}")
        return s.strip()

    def for_index_query(self, s: str) -> str:
        # one trailing slash, then the scheme
        if s.endswith("/"):
            s = s[:-1]
        return _SCHEME_PREFIX.sub("", s, count=1)

    def for_archive(self, original: str) -> str:
        if original.startswith("http"):
            return original
        return f"{self.default_scheme}://{original}"
