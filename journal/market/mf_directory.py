from dataclasses import dataclass
from typing import Any, Callable, List, Literal, Optional, Sequence, Tuple

import requests

from journal.core.cache import MISS, ExpiringCache
from journal.core.config import Settings
from journal.core.logging import get_logger
from journal.core.validation import InvalidInputError


logger = get_logger(__name__)

SCHEMES_KEY = "schemes"
MAX_RESULTS = 15
MIN_QUERY_LENGTH = 2
DEFAULT_NAV_TTL_SECONDS = 6 * 60 * 60

SchemeFetcher = Callable[[], Sequence[Any]]
NavFetcher = Callable[[str], Any]
NavSource = Literal["api", "cache", "stale_cache"]


@dataclass(frozen=True)
class MutualFundScheme:
    scheme_code: str
    scheme_name: str


@dataclass(frozen=True)
class NavQuote:
    scheme_code: str
    nav: float
    date: str
    source: NavSource


def http_scheme_fetcher(url: str, timeout: float = 10.0) -> SchemeFetcher:
    """Fetcher reading the AMFI scheme list (``[{schemeCode, schemeName}, ...]``)."""

    def fetch() -> Sequence[Any]:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()

    return fetch


def http_nav_fetcher(base_url: str, timeout: float = 10.0) -> NavFetcher:
    """Fetcher reading one scheme's NAV history (``{"data": [{date, nav}, ...]}``, newest first)."""

    def fetch(scheme_code: str) -> Any:
        response = requests.get(f"{base_url.rstrip('/')}/{scheme_code}", timeout=timeout)
        response.raise_for_status()
        return response.json()

    return fetch


def _normalize(raw: Any) -> List[MutualFundScheme]:
    if not isinstance(raw, list):
        raise ValueError(f"expected a list of schemes, got {type(raw).__name__}")
    schemes: List[MutualFundScheme] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        code = item.get("schemeCode")
        name = item.get("schemeName")
        if code is None or not name:
            continue
        # AMFI returns numeric codes for most schemes
        schemes.append(MutualFundScheme(scheme_code=str(code), scheme_name=str(name)))
    return schemes


def _latest_nav_entry(payload: Any) -> Optional[Tuple[float, str]]:
    """(nav, date) of the newest entry, or None when the scheme has no NAV history."""
    if not isinstance(payload, dict):
        raise ValueError(f"expected a NAV object, got {type(payload).__name__}")
    history = payload.get("data")
    if not isinstance(history, list) or not history:
        return None
    latest = history[0]
    if not isinstance(latest, dict):
        raise ValueError("malformed NAV entry")
    return float(latest["nav"]), str(latest.get("date") or "")


class MutualFundDirectory:
    """Searchable scheme list and latest NAVs, each read through an expiring cache."""

    def __init__(
        self,
        fetcher: SchemeFetcher,
        cache: ExpiringCache,
        nav_fetcher: Optional[NavFetcher] = None,
        nav_cache: Optional[ExpiringCache] = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._nav_fetcher = nav_fetcher
        self._nav_cache = nav_cache or ExpiringCache(DEFAULT_NAV_TTL_SECONDS)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MutualFundDirectory":
        return cls(
            http_scheme_fetcher(settings.mf_api_url, timeout=settings.http_timeout_seconds),
            ExpiringCache(settings.mf_cache_ttl_seconds),
            nav_fetcher=http_nav_fetcher(settings.mf_api_url, timeout=settings.http_timeout_seconds),
            nav_cache=ExpiringCache(settings.mf_nav_cache_ttl_seconds),
        )

    def schemes(self) -> List[MutualFundScheme]:
        cached = self._cache.get(SCHEMES_KEY)
        if cached is not MISS:
            return cached
        try:
            schemes = _normalize(self._fetcher())
        except (requests.RequestException, ValueError) as exc:
            return self._stale_schemes("mf_refresh_failed", str(exc))
        if not schemes:
            # an empty list is never cached so the next call refetches
            return self._stale_schemes("mf_refresh_empty", "scheme list was empty")
        self._cache.set(SCHEMES_KEY, schemes)
        logger.info("mf_schemes_loaded", extra={"event": "mf_schemes_loaded", "count": len(schemes)})
        return schemes

    def _stale_schemes(self, event: str, error: str) -> List[MutualFundScheme]:
        stale = self._cache.peek_stale(SCHEMES_KEY)
        logger.warning(event, extra={"event": event, "error": error, "serving_stale": stale is not MISS})
        return [] if stale is MISS else stale

    def search(self, query: Optional[str]) -> List[MutualFundScheme]:
        """Case-insensitive substring match on scheme name, first 15 hits."""
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []
        needle = query.strip().upper()
        results: List[MutualFundScheme] = []
        for scheme in self.schemes():
            if needle in scheme.scheme_name.upper():
                results.append(scheme)
                if len(results) >= MAX_RESULTS:
                    break
        return results

    def latest_nav(self, scheme_code: str) -> Optional[NavQuote]:
        """Latest NAV for a scheme, falling back to the last known value when the API fails.

        Returns None when the API has no NAV and nothing was cached before.
        """
        code = (scheme_code or "").strip()
        if not code:
            raise InvalidInputError("scheme_code", scheme_code, "is required")
        if self._nav_fetcher is None:
            raise RuntimeError("NAV fetcher not configured")

        cached = self._nav_cache.get(code)
        if cached is not MISS:
            nav, date = cached
            return NavQuote(code, nav, date, "cache")

        try:
            entry = _latest_nav_entry(self._nav_fetcher(code))
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "mf_nav_fetch_failed",
                extra={"event": "mf_nav_fetch_failed", "scheme_code": code, "error": str(exc)},
            )
            entry = None

        if entry is None:
            stale = self._nav_cache.peek_stale(code)
            if stale is MISS:
                return None
            nav, date = stale
            return NavQuote(code, nav, date, "stale_cache")

        self._nav_cache.set(code, entry)
        nav, date = entry
        return NavQuote(code, nav, date, "api")
