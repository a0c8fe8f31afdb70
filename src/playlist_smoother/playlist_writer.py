from __future__ import annotations

from typing import Sequence

from playlist_smoother.models import Track
from playlist_smoother.spotify_service import SpotifyService


def smoothed_playlist_name(original_name: str) -> str:
    return f"{original_name} (Smoothed)"


def reorder_existing_playlist(service: SpotifyService, playlist_id: str, tracks: Sequence[Track]) -> None:
    service.reorder_playlist(playlist_id, [track.uri for track in tracks])


def create_smoothed_playlist(
    service: SpotifyService,
    user_id: str,
    original_name: str,
    tracks: Sequence[Track],
) -> str:
    """Create a private copy of the playlist in smoothed order and return its id."""
    description = f"Smoothed version of {original_name}, ordered for key, BPM and energy flow."
    playlist = service.create_playlist(user_id, smoothed_playlist_name(original_name), description)
    service.add_tracks(playlist["id"], [track.uri for track in tracks])
    return playlist["id"]
