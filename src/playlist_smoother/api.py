"""FastAPI web server for Playlist Smoother."""
import logging
from typing import Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from playlist_smoother.bpm_client import BpmClient
from playlist_smoother.config import TWO_OPT_MAX_ROUNDS, env_str
from playlist_smoother.enricher import enrich_tracks
from playlist_smoother.models import SmoothResult, Track
from playlist_smoother.playlist_writer import (
    create_smoothed_playlist,
    reorder_existing_playlist,
    smoothed_playlist_name,
)
from playlist_smoother.scoring import transition_scores
from playlist_smoother.smoother import smooth_playlist
from playlist_smoother.spotify_service import SpotifyApiError, SpotifyAuthError, SpotifyService

logger = logging.getLogger(__name__)

app = FastAPI(title="Playlist Smoother")

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class TrackIn(BaseModel):
    """A track with whatever attributes are known; missing ones count as unknown."""
    id: str
    uri: str
    name: str = ""
    artist: str = ""
    bpm: float | None = Field(default=None, gt=0)
    camelot_code: str | None = None
    energy: float | None = Field(default=None, ge=0, le=100)
    album_art: str = ""
    duration_ms: int = 0


class SmoothRequest(BaseModel):
    tracks: list[TrackIn]
    max_rounds: int = Field(default=TWO_OPT_MAX_ROUNDS, ge=1, le=1000)


class TrackOut(BaseModel):
    id: str
    uri: str
    name: str
    artist: str
    bpm: float | None = None
    camelot_code: str | None = None
    energy: float | None = None
    original_index: int
    transition_cost: float = 0.0


class SmoothResponse(BaseModel):
    """Smoothed order plus the cost of the original order for comparison."""
    tracks: list[TrackOut]
    original_cost: float
    optimized_cost: float
    improvement_percent: int


class PlaylistSmoothRequest(BaseModel):
    save: Literal["none", "reorder", "create"] = "none"
    max_rounds: int = Field(default=TWO_OPT_MAX_ROUNDS, ge=1, le=1000)


class PlaylistSmoothResponse(SmoothResponse):
    playlist_id: str
    playlist_name: str
    saved_playlist_id: str | None = None
    message: str | None = None


def get_spotify_service() -> SpotifyService:
    """Initialize the Spotify catalog service."""
    return SpotifyService()


def get_bpm_client() -> BpmClient | None:
    """GetSongBPM client, or ``None`` when no API key is configured."""
    api_key = env_str("GETSONGBPM_API_KEY")
    if not api_key:
        logger.warning("GETSONGBPM_API_KEY is not set; smoothing without BPM/key/energy data")
        return None
    return BpmClient(api_key)


def _to_track(track: TrackIn, index: int) -> Track:
    return Track(
        track_id=track.id,
        uri=track.uri,
        name=track.name,
        artist=track.artist,
        bpm=track.bpm,
        camelot_code=track.camelot_code,
        energy=track.energy,
        original_index=index,
        album_art=track.album_art,
        duration_ms=track.duration_ms,
    )


def _track_rows(result: SmoothResult) -> list[TrackOut]:
    scores = transition_scores(result.sorted_tracks)
    return [
        TrackOut(
            id=track.track_id,
            uri=track.uri,
            name=track.name,
            artist=track.artist,
            bpm=track.bpm,
            camelot_code=track.camelot_code,
            energy=track.energy,
            original_index=track.original_index,
            transition_cost=score,
        )
        for track, score in zip(result.sorted_tracks, scores)
    ]


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/api/smooth", response_model=SmoothResponse)
def smooth_tracks(request: SmoothRequest):
    """Reorder a caller-supplied track list; no Spotify or lookup calls are made."""
    tracks = [_to_track(track, index) for index, track in enumerate(request.tracks)]
    result = smooth_playlist(tracks, max_rounds=request.max_rounds)
    return SmoothResponse(
        tracks=_track_rows(result),
        original_cost=result.original_cost,
        optimized_cost=result.optimized_cost,
        improvement_percent=result.improvement_percent,
    )


@app.post("/api/playlists/{playlist_id}/smooth", response_model=PlaylistSmoothResponse)
def smooth_spotify_playlist(playlist_id: str, request: PlaylistSmoothRequest | None = None):
    """Fetch a playlist, resolve track attributes, smooth it and optionally save the result."""
    request = request or PlaylistSmoothRequest()
    try:
        service = get_spotify_service()
        playlist = service.get_playlist(playlist_id)
        items = service.get_playlist_tracks(playlist_id)

        enriched = enrich_tracks(items, get_bpm_client())
        result = smooth_playlist(enriched, max_rounds=request.max_rounds)

        playlist_name = playlist.get("name", "")
        saved_playlist_id = None
        message = None
        if request.save == "reorder":
            user = service.current_user()
            if (playlist.get("owner") or {}).get("id") != user.get("id"):
                raise HTTPException(status_code=403, detail="Only the playlist owner can reorder it")
            reorder_existing_playlist(service, playlist_id, result.sorted_tracks)
            saved_playlist_id = playlist_id
            message = "Playlist reordered successfully."
        elif request.save == "create":
            user = service.current_user()
            saved_playlist_id = create_smoothed_playlist(service, user["id"], playlist_name, result.sorted_tracks)
            message = f'New playlist created: "{smoothed_playlist_name(playlist_name)}".'

        return PlaylistSmoothResponse(
            tracks=_track_rows(result),
            original_cost=result.original_cost,
            optimized_cost=result.optimized_cost,
            improvement_percent=result.improvement_percent,
            playlist_id=playlist_id,
            playlist_name=playlist_name,
            saved_playlist_id=saved_playlist_id,
            message=message,
        )

    except SpotifyAuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except SpotifyApiError as e:
        if e.status == 404:
            raise HTTPException(status_code=404, detail=f"Playlist '{playlist_id}' not found")
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")
