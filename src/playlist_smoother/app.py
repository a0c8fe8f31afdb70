from __future__ import annotations

import argparse
import logging
from typing import Sequence

from playlist_smoother.bpm_client import BpmClient
from playlist_smoother.config import (
    BPM_MAX_CONCURRENT,
    BPM_REQUEST_DELAY_SECONDS,
    TWO_OPT_MAX_ROUNDS,
    env_float,
    env_int,
    env_str,
    load_local_env_file,
)
from playlist_smoother.enricher import enrich_tracks
from playlist_smoother.models import Track
from playlist_smoother.playlist_writer import create_smoothed_playlist, reorder_existing_playlist
from playlist_smoother.scoring import transition_scores
from playlist_smoother.smoother import smooth_playlist
from playlist_smoother.spotify_service import extract_playlist_id


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reorder a Spotify playlist for smoother transitions")
    parser.add_argument("playlist", help="Playlist URL, spotify:playlist: URI or id")
    parser.add_argument(
        "--save",
        choices=("none", "reorder", "create"),
        default="none",
        help="Write the result back: reorder the playlist in place or create a '(Smoothed)' copy",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=env_int("TWO_OPT_MAX_ROUNDS", TWO_OPT_MAX_ROUNDS),
        help="Consecutive idle 2-opt passes before stopping (defaults to TWO_OPT_MAX_ROUNDS env or 50)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=env_int("BPM_MAX_CONCURRENT", BPM_MAX_CONCURRENT),
        help="Concurrent GetSongBPM lookups per batch (defaults to BPM_MAX_CONCURRENT env or 3)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=env_float("BPM_REQUEST_DELAY", BPM_REQUEST_DELAY_SECONDS),
        help="Seconds to wait between lookup batches (defaults to BPM_REQUEST_DELAY env or 0.2)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def resolve_playlist_id(args: argparse.Namespace) -> str:
    playlist_id = extract_playlist_id(args.playlist)
    if not playlist_id:
        raise ValueError(
            f"Invalid playlist URL or ID: {args.playlist!r}. "
            "Paste a link like https://open.spotify.com/playlist/<id> or the bare id."
        )
    return playlist_id


def format_route(title: str, tracks: Sequence[Track], total_cost: float) -> list[str]:
    lines = [f"{title} (cost {total_cost:.2f})"]
    for position, (track, score) in enumerate(zip(tracks, transition_scores(tracks)), start=1):
        key = track.camelot_code or "?"
        bpm = f"{track.bpm:g}" if track.bpm is not None else "?"
        energy = f"{track.energy:g}" if track.energy is not None else "?"
        lines.append(
            f"{position:>3}. {track.name} - {track.artist} "
            f"[key {key}, {bpm} bpm, energy {energy}] +{score:.2f}"
        )
    return lines


def main(argv: Sequence[str] | None = None) -> None:
    load_local_env_file()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    from playlist_smoother.spotify_service import SpotifyService

    playlist_id = resolve_playlist_id(args)
    service = SpotifyService()
    playlist = service.get_playlist(playlist_id)
    items = service.get_playlist_tracks(playlist_id)

    api_key = env_str("GETSONGBPM_API_KEY")
    client = BpmClient(api_key) if api_key else None
    if client is None:
        print("GETSONGBPM_API_KEY not set: smoothing on artist order only.")

    def _progress(done: int, total: int) -> None:
        print(f"\rResolving track attributes {done}/{total}", end="", flush=True)

    tracks = enrich_tracks(items, client, on_progress=_progress, concurrency=args.concurrency, delay=args.delay)
    print()

    result = smooth_playlist(tracks, max_rounds=args.max_rounds)

    print("\n".join(format_route("Original order", tracks, result.original_cost)))
    print()
    print("\n".join(format_route("Smoothed order", result.sorted_tracks, result.optimized_cost)))
    print()
    print(f"{result.improvement_percent}% smoother")

    if args.save == "reorder":
        user = service.current_user()
        if (playlist.get("owner") or {}).get("id") != user.get("id"):
            raise ValueError("Only the playlist owner can reorder it; use --save create instead.")
        reorder_existing_playlist(service, playlist_id, result.sorted_tracks)
        print("Playlist reordered successfully! Open Spotify to see the changes.")
    elif args.save == "create":
        user = service.current_user()
        new_id = create_smoothed_playlist(service, user["id"], playlist.get("name", ""), result.sorted_tracks)
        print(f"New playlist created: {new_id}")


if __name__ == "__main__":
    main()
