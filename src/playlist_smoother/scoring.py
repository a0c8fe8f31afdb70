from __future__ import annotations

from typing import Sequence

from playlist_smoother.camelot import camelot_distance
from playlist_smoother.config import (
    BPM_DISTANCE_SCALE,
    NEUTRAL_SCORE,
    WEIGHT_ARTIST,
    WEIGHT_BPM,
    WEIGHT_ENERGY,
    WEIGHT_KEY,
)
from playlist_smoother.models import Track


def bpm_distance(bpm_a: float | None, bpm_b: float | None) -> float:
    """Tempo distance in [0, 1], treating half-time and double-time as close."""
    if bpm_a is None or bpm_b is None:
        return NEUTRAL_SCORE

    diff = min(
        abs(bpm_a - bpm_b),
        abs(bpm_a - bpm_b * 2),
        abs(bpm_a * 2 - bpm_b),
    )
    return min(diff / BPM_DISTANCE_SCALE, 1.0)


def energy_distance(energy_a: float | None, energy_b: float | None) -> float:
    # Energy is on a 0-100 scale.
    if energy_a is None or energy_b is None:
        return NEUTRAL_SCORE
    return abs(energy_a - energy_b) / 100


def artist_penalty(artist_a: str, artist_b: str) -> float:
    return 1.0 if artist_a == artist_b else 0.0


def transition_cost(a: Track, b: Track) -> float:
    """Weighted cost of playing ``b`` right after ``a``; in [0, 1] and symmetric."""
    return (
        WEIGHT_KEY * camelot_distance(a.camelot_code, b.camelot_code)
        + WEIGHT_BPM * bpm_distance(a.bpm, b.bpm)
        + WEIGHT_ENERGY * energy_distance(a.energy, b.energy)
        + WEIGHT_ARTIST * artist_penalty(a.artist, b.artist)
    )


def total_route_cost(tracks: Sequence[Track]) -> float:
    cost = 0.0
    for i in range(len(tracks) - 1):
        cost += transition_cost(tracks[i], tracks[i + 1])
    return cost


def transition_scores(tracks: Sequence[Track]) -> list[float]:
    """Cost of arriving at each position; the first track has nothing before it."""
    return [0.0 if i == 0 else transition_cost(tracks[i - 1], track) for i, track in enumerate(tracks)]


def cost_matrix(tracks: Sequence[Track]) -> list[list[float]]:
    """All pairwise transition costs, indexed by position in ``tracks``."""
    n = len(tracks)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            cost = transition_cost(tracks[i], tracks[j])
            matrix[i][j] = cost
            matrix[j][i] = cost
    return matrix


def order_cost(matrix: list[list[float]], order: Sequence[int]) -> float:
    """Route cost of an index ordering; sums in the same order as ``total_route_cost``."""
    cost = 0.0
    for i in range(len(order) - 1):
        cost += matrix[order[i]][order[i + 1]]
    return cost
