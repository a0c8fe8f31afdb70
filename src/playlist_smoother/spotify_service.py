from __future__ import annotations

import logging
import os
import re
from typing import Callable, TypeVar

import spotipy
from requests.exceptions import HTTPError
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOAuth

from playlist_smoother.config import SPOTIFY_SCOPES, TRACKS_PER_PAGE

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PLAYLIST_REF_RE = re.compile(r"playlist[/:]([a-zA-Z0-9]+)")
_BARE_ID_RE = re.compile(r"^[a-zA-Z0-9]{22}$")


class SpotifyAuthError(Exception):
    """The access token is missing, expired or was rejected (HTTP 401)."""

    def __init__(self, message: str = "Spotify access token expired or invalid") -> None:
        super().__init__(message)


class SpotifyApiError(Exception):
    """Any other non-OK answer from the Spotify Web API."""

    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(message)
        self.status = status


def extract_playlist_id(text: str) -> str | None:
    """Accept a playlist URL, a ``spotify:playlist:`` URI or a bare 22-character id."""
    match = _PLAYLIST_REF_RE.search(text)
    if match:
        return match.group(1)
    candidate = text.strip()
    if _BARE_ID_RE.match(candidate):
        return candidate
    return None


class SpotifyService:
    def __init__(self, client: spotipy.Spotify | None = None) -> None:
        if client is None:
            self._validate_credentials()
            client = spotipy.Spotify(auth_manager=SpotifyOAuth(scope=SPOTIFY_SCOPES))
        self.client = client

    @staticmethod
    def _validate_credentials() -> None:
        required = ("SPOTIPY_CLIENT_ID", "SPOTIPY_CLIENT_SECRET", "SPOTIPY_REDIRECT_URI")
        missing = [name for name in required if not os.getenv(name)]
        if missing:
            missing_list = ", ".join(missing)
            raise ValueError(
                f"Missing Spotify credentials: {missing_list}. "
                "Set them in environment variables or local .env file."
            )

    @staticmethod
    def _call(request: Callable[..., T], *args, **kwargs) -> T:
        try:
            return request(*args, **kwargs)
        except (HTTPError, SpotifyException) as exc:
            status = exc.response.status_code if isinstance(exc, HTTPError) else exc.http_status
            if status == 401:
                raise SpotifyAuthError() from exc
            raise SpotifyApiError(status, f"Spotify API error ({status}): {exc}") from exc

    def current_user(self) -> dict:
        return self._call(self.client.current_user)

    def get_playlist(self, playlist_id: str) -> dict:
        return self._call(self.client.playlist, playlist_id)

    def get_playlist_tracks(self, playlist_id: str) -> list[dict]:
        """All items of a playlist, following ``next`` links page by page."""
        page = self._call(
            self.client.playlist_items,
            playlist_id,
            limit=TRACKS_PER_PAGE,
            additional_types=("track",),
        )
        items: list[dict] = []
        while page:
            items.extend(page.get("items", []))
            if not page.get("next"):
                break
            page = self._call(self.client.next, page)
        logger.debug("Fetched %d items from playlist %s", len(items), playlist_id)
        return items

    def reorder_playlist(self, playlist_id: str, uris: list[str]) -> None:
        """Replace the playlist contents with ``uris`` in order.

        The first page replaces everything already there; later pages are
        appended.
        """
        self._call(self.client.playlist_replace_items, playlist_id, uris[:TRACKS_PER_PAGE])
        for start in range(TRACKS_PER_PAGE, len(uris), TRACKS_PER_PAGE):
            self._call(self.client.playlist_add_items, playlist_id, uris[start : start + TRACKS_PER_PAGE])

    def create_playlist(self, user_id: str, name: str, description: str = "") -> dict:
        return self._call(
            self.client.user_playlist_create,
            user_id,
            name,
            public=False,
            description=description,
        )

    def add_tracks(self, playlist_id: str, uris: list[str]) -> None:
        for start in range(0, len(uris), TRACKS_PER_PAGE):
            self._call(self.client.playlist_add_items, playlist_id, uris[start : start + TRACKS_PER_PAGE])
