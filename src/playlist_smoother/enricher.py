from __future__ import annotations

import logging
import threading
import warnings
from typing import Callable

from playlist_smoother.bpm_client import BpmClient, process_in_batches
from playlist_smoother.camelot import to_camelot_code
from playlist_smoother.config import BPM_MAX_CONCURRENT, BPM_REQUEST_DELAY_SECONDS
from playlist_smoother.models import SongDetails, Track

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def parse_bpm(details: SongDetails) -> float | None:
    try:
        value = float(details.tempo) if details.tempo is not None else None
    except ValueError:
        return None
    if value is None or value != value or value <= 0:
        return None
    return float(round(value))


def parse_energy(details: SongDetails) -> float | None:
    """GetSongBPM's danceability (0-100) is used as the energy score."""
    if details.danceability is None or details.danceability.strip() == "":
        return None
    try:
        value = float(details.danceability)
    except ValueError:
        return None
    if value != value:
        return None
    return value


def to_base_track(item: dict, index: int) -> Track | None:
    """Playlist item -> ``Track`` with unknown attributes; ``None`` for removed or local items."""
    track = item.get("track")
    if not track or not track.get("id") or not track.get("uri"):
        return None

    images = (track.get("album") or {}).get("images") or []
    return Track(
        track_id=track["id"],
        uri=track["uri"],
        name=track.get("name", ""),
        artist=", ".join(a.get("name", "") for a in track.get("artists", [])),
        original_index=index,
        album_art=images[0].get("url", "") if images else "",
        duration_ms=int(track.get("duration_ms") or 0),
    )


def apply_details(track: Track, details: SongDetails | None) -> Track:
    if details is None:
        return track
    return track.with_attributes(
        bpm=parse_bpm(details),
        camelot_code=to_camelot_code(details),
        energy=parse_energy(details),
    )


def enrich_tracks(
    items: list[dict],
    client: BpmClient | None,
    on_progress: ProgressCallback | None = None,
    concurrency: int = BPM_MAX_CONCURRENT,
    delay: float = BPM_REQUEST_DELAY_SECONDS,
) -> list[Track]:
    """Build tracks from playlist items and fill in BPM, key and energy.

    Without a client the tracks are returned with unknown attributes. A
    failed lookup leaves that track's attributes unknown; it never aborts
    the whole run.
    """
    base_tracks = [
        track for track in (to_base_track(item, index) for index, item in enumerate(items)) if track is not None
    ]
    total = len(base_tracks)

    if client is None:
        if on_progress:
            on_progress(total, total)
        return base_tracks

    done = 0
    progress_lock = threading.Lock()

    def _make_task(track: Track) -> Callable[[], Track]:
        def _task() -> Track:
            nonlocal done
            try:
                enriched = apply_details(track, client.lookup_track_details(track.artist, track.name))
            except Exception as exc:
                warnings.warn(
                    f'Failed to enrich "{track.name}" by "{track.artist}": {exc}',
                    RuntimeWarning,
                    stacklevel=2,
                )
                enriched = track
            with progress_lock:
                done += 1
                if on_progress:
                    on_progress(done, total)
            return enriched

        return _task

    enriched_tracks = process_in_batches(
        [_make_task(track) for track in base_tracks],
        concurrency=concurrency,
        delay=delay,
    )
    resolved = sum(1 for track in enriched_tracks if track.has_attributes)
    logger.info("Resolved attributes for %d of %d tracks", resolved, total)
    return enriched_tracks
