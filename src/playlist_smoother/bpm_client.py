"""GetSongBPM lookup client.

Resolves (artist, title) pairs to tempo/key/energy details. Lookups never
raise: HTTP and transport failures are reported as ``RuntimeWarning`` and
resolve to ``None`` so a playlist can still be smoothed with partial data.
"""
from __future__ import annotations

import logging
import re
import threading
import time
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, TypeVar

import requests
from requests.exceptions import JSONDecodeError, RequestException

from playlist_smoother.config import (
    BPM_MAX_CONCURRENT,
    BPM_REQUEST_DELAY_SECONDS,
    BPM_REQUEST_TIMEOUT_SECONDS,
    GETSONGBPM_API_BASE,
)
from playlist_smoother.models import SongDetails

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TITLE_PATTERNS = [
    re.compile(r"\(feat\.[^)]*\)", re.IGNORECASE),
    re.compile(r"\[feat\.[^\]]*\]", re.IGNORECASE),
    re.compile(r"\(Remastered[^)]*\)", re.IGNORECASE),
    re.compile(r"\[Remastered[^\]]*\]", re.IGNORECASE),
    re.compile(r"-\s*Remastered.*$", re.IGNORECASE),
    re.compile(r"\([^)]*\)"),
    re.compile(r"\[[^\]]*\]"),
]


def clean_title(raw: str) -> str:
    """Strip featuring credits, remaster tags and bracketed suffixes.

    "Come Together - Remastered 2009" -> "Come Together"
    "Help! [Single Version]"          -> "Help!"
    """
    title = raw
    for pattern in _TITLE_PATTERNS:
        title = pattern.sub("", title)
    return title.strip()


def clean_artist(raw: str) -> str:
    """Keep only the primary artist ("Daft Punk, Pharrell" -> "Daft Punk")."""
    artist = re.split(r"\s+feat\.?\s+", raw, flags=re.IGNORECASE)[0]
    artist = artist.split(",")[0]
    artist = re.split(r"\s+&\s+", artist)[0]
    return artist.strip()


class LookupCache:
    """Per-session lookup cache keyed by (artist, title), case-insensitive.

    Negative results are cached as ``None`` so a missing song is only
    searched for once.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], SongDetails | None] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(artist: str, title: str) -> tuple[str, str]:
        return artist.lower(), title.lower()

    def contains(self, artist: str, title: str) -> bool:
        with self._lock:
            return self._key(artist, title) in self._entries

    def get(self, artist: str, title: str) -> SongDetails | None:
        with self._lock:
            return self._entries.get(self._key(artist, title))

    def set(self, artist: str, title: str, details: SongDetails | None) -> None:
        with self._lock:
            self._entries[self._key(artist, title)] = details

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class BpmClient:
    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        cache: LookupCache | None = None,
        base_url: str = GETSONGBPM_API_BASE,
        timeout: float = BPM_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if not api_key:
            raise ValueError("Missing GetSongBPM API key. Set GETSONGBPM_API_KEY in the environment or .env file.")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else LookupCache()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, path: str, params: dict, what: str) -> dict | None:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                params={"api_key": self.api_key, **params},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except JSONDecodeError:
            warnings.warn(
                f"GetSongBPM {what} returned a non-JSON body. Treating attributes as unknown.",
                RuntimeWarning,
                stacklevel=3,
            )
            return None
        except RequestException as exc:
            status = exc.response.status_code if exc.response is not None else None
            warnings.warn(
                f"GetSongBPM {what} failed ({status or 'no response'}). Treating attributes as unknown.",
                RuntimeWarning,
                stacklevel=3,
            )
            return None

    def search_song(self, artist: str, title: str) -> dict | None:
        """Return the first search hit for the cleaned artist/title, or ``None``."""
        cleaned_title = clean_title(title)
        cleaned_artist = clean_artist(artist)
        data = self._get_json(
            "/search/",
            {"type": "song", "lookup": f"song:{cleaned_title} artist:{cleaned_artist}"},
            what=f'search for "{cleaned_title}" by "{cleaned_artist}"',
        )
        if not data:
            return None
        # The service answers {"search": {"error": "no result"}} on a miss.
        results = data.get("search")
        if not isinstance(results, list) or not results:
            return None
        return results[0]

    def get_song_details(self, song_id: str) -> SongDetails | None:
        data = self._get_json("/song/", {"id": song_id}, what=f'song details for id "{song_id}"')
        if not data:
            return None
        song = data.get("song")
        if not isinstance(song, dict):
            return None
        return SongDetails.from_payload(song)

    def lookup_track_details(self, artist: str, title: str) -> SongDetails | None:
        """Search then fetch details, going through the session cache."""
        if self.cache.contains(artist, title):
            return self.cache.get(artist, title)

        hit = self.search_song(artist, title)
        if not hit or not hit.get("id"):
            logger.debug("No GetSongBPM match for %r by %r", title, artist)
            self.cache.set(artist, title, None)
            return None

        details = self.get_song_details(str(hit["id"]))
        self.cache.set(artist, title, details)
        return details


def process_in_batches(
    tasks: Sequence[Callable[[], T]],
    concurrency: int = BPM_MAX_CONCURRENT,
    delay: float = BPM_REQUEST_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> list[T]:
    """Run ``tasks`` at most ``concurrency`` at a time, pausing ``delay`` seconds between batches.

    Results come back in task order. There is no pause after the last batch.
    """
    concurrency = max(1, concurrency)
    results: list[T] = []

    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        for start in range(0, len(tasks), concurrency):
            batch = tasks[start : start + concurrency]
            results.extend(executor.map(lambda task: task(), batch))

            if start + concurrency < len(tasks):
                sleep(delay)

    return results
