from __future__ import annotations

import os
from pathlib import Path

# Transition cost weights; they sum to 1.0 so a pairwise cost stays in [0, 1].
WEIGHT_KEY = 0.40
WEIGHT_BPM = 0.30
WEIGHT_ENERGY = 0.20
WEIGHT_ARTIST = 0.10

# Score used for any sub-distance where one side is unknown.
NEUTRAL_SCORE = 0.5

# BPM difference at which the tempo distance saturates at 1.0.
BPM_DISTANCE_SCALE = 20.0

TWO_OPT_MAX_ROUNDS = 50

GETSONGBPM_API_BASE = "https://api.getsong.co"
BPM_MAX_CONCURRENT = 3
BPM_REQUEST_DELAY_SECONDS = 0.2
BPM_REQUEST_TIMEOUT_SECONDS = 10.0

SPOTIFY_SCOPES = " ".join(
    [
        "playlist-read-private",
        "playlist-modify-private",
        "playlist-modify-public",
    ]
)

# Spotify accepts at most 100 items per playlist page or write request.
TRACKS_PER_PAGE = 100


def load_local_env_file(env_path: str = ".env") -> None:
    """Load key=value pairs from a local .env file into process env.

    Existing environment variables are preserved and not overwritten.
    """

    path = Path(env_path)
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")

        if key and key not in os.environ:
            os.environ[key] = value


def env_str(name: str, fallback: str = "") -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    return raw.strip()


def env_int(name: str, fallback: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def env_float(name: str, fallback: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return float(raw)
    except ValueError:
        return fallback
