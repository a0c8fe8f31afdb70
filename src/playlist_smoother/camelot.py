"""Camelot wheel helpers: key-code parsing, harmonic distance and notation mapping."""
from __future__ import annotations

import re

from playlist_smoother.config import NEUTRAL_SCORE
from playlist_smoother.models import SongDetails

_CAMELOT_RE = re.compile(r"^(\d{1,2})([AB])$")

_WHEEL_SIZE = 12

# Full key names -> Camelot code.
KEY_TO_CAMELOT: dict[str, str] = {
    "Ab minor": "1A", "B major": "1B",
    "Eb minor": "2A", "Gb major": "2B", "F# major": "2B",
    "Bb minor": "3A", "Db major": "3B",
    "F minor": "4A", "Ab major": "4B",
    "C minor": "5A", "Eb major": "5B",
    "G minor": "6A", "Bb major": "6B",
    "D minor": "7A", "F major": "7B",
    "A minor": "8A", "C major": "8B",
    "E minor": "9A", "G major": "9B",
    "B minor": "10A", "D major": "10B",
    "F# minor": "11A", "A major": "11B", "Gb minor": "11A",
    "Db minor": "12A", "C# minor": "12A", "E major": "12B",
}

# Short key names as reported in GetSongBPM's ``key_of`` field ("Em", "C").
SHORT_KEY_TO_CAMELOT: dict[str, str] = {
    "Abm": "1A", "G#m": "1A", "B": "1B",
    "Ebm": "2A", "D#m": "2A", "Gb": "2B", "F#": "2B",
    "Bbm": "3A", "A#m": "3A", "Db": "3B", "C#": "3B",
    "Fm": "4A", "Ab": "4B", "G#": "4B",
    "Cm": "5A", "Eb": "5B", "D#": "5B",
    "Gm": "6A", "Bb": "6B", "A#": "6B",
    "Dm": "7A", "F": "7B",
    "Am": "8A", "C": "8B",
    "Em": "9A", "G": "9B",
    "Bm": "10A", "D": "10B",
    "F#m": "11A", "Gbm": "11A", "A": "11B",
    "C#m": "12A", "Dbm": "12A", "E": "12B",
}

# Open Key notation ("8m", "8d"): m = minor (A), d = major (B).
OPEN_KEY_TO_CAMELOT: dict[str, str] = {
    f"{number}{mode}": f"{number}{letter}"
    for number in range(1, _WHEEL_SIZE + 1)
    for mode, letter in (("m", "A"), ("d", "B"))
}


def parse_camelot_code(code: str | None) -> tuple[int, str] | None:
    """Split a code like ``"8A"`` into ``(8, "A")``; ``None`` when it is not a wheel code."""
    if code is None:
        return None
    match = _CAMELOT_RE.match(code)
    if not match:
        return None
    number = int(match.group(1))
    if number < 1 or number > _WHEEL_SIZE:
        return None
    return number, match.group(2)


def circular_distance(a: int, b: int) -> int:
    diff = abs(a - b)
    return min(diff, _WHEEL_SIZE - diff)


def camelot_distance(code_a: str | None, code_b: str | None) -> float:
    """Harmonic distance between two Camelot codes, normalised to [0, 1].

    Compatibility tiers:
      - same code                               0.0
      - adjacent number, same letter            1/6
      - same number, other letter               1/6
      - adjacent number and other letter        2/6
      - anything else                           1.0

    Missing or unparseable codes score ``NEUTRAL_SCORE`` so unknown keys
    neither attract nor repel a pairing.
    """
    a = parse_camelot_code(code_a)
    b = parse_camelot_code(code_b)
    if a is None or b is None:
        return NEUTRAL_SCORE

    number_dist = circular_distance(a[0], b[0])
    same_letter = a[1] == b[1]

    if number_dist == 0 and same_letter:
        return 0.0
    if number_dist == 1 and same_letter:
        return 1 / 6
    if number_dist == 0 and not same_letter:
        return 1 / 6
    if number_dist == 1 and not same_letter:
        return 2 / 6
    return 1.0


def key_name_to_camelot(name: str | None) -> str | None:
    if not name:
        return None
    name = name.strip()
    return KEY_TO_CAMELOT.get(name) or SHORT_KEY_TO_CAMELOT.get(name)


def to_camelot_code(details: SongDetails) -> str | None:
    """Map a lookup result to a Camelot code, preferring Open Key over the key name.

    Key names may be short ("Am", "F#") or long ("A minor").
    """
    if details.open_key:
        from_open_key = OPEN_KEY_TO_CAMELOT.get(details.open_key.strip())
        if from_open_key:
            return from_open_key

    return key_name_to_camelot(details.key_of)
