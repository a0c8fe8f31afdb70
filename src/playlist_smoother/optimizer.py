"""Route construction and refinement over a precomputed transition cost matrix.

Routes are handled internally as lists of positions into the input track
list, so duplicate tracks stay distinct and every transformation produces a
new list. The public functions accept and return ``Track`` lists.
"""
from __future__ import annotations

import math
from typing import Sequence

from playlist_smoother.config import TWO_OPT_MAX_ROUNDS
from playlist_smoother.models import Track
from playlist_smoother.scoring import cost_matrix, order_cost

# Far above float rounding in a route sum, far below any real cost difference.
_DELTA_TOLERANCE = 1e-9


def build_order(matrix: list[list[float]], start: int) -> list[int]:
    """Nearest-neighbour ordering from ``start``; the lowest index wins cost ties."""
    n = len(matrix)
    visited = [False] * n
    order = [start]
    visited[start] = True

    for _ in range(1, n):
        row = matrix[order[-1]]
        best_idx = -1
        best_cost = math.inf
        for j in range(n):
            if visited[j]:
                continue
            if row[j] < best_cost:
                best_cost = row[j]
                best_idx = j
        visited[best_idx] = True
        order.append(best_idx)

    return order


def nearest_neighbor_order(matrix: list[list[float]]) -> list[int]:
    """Try every start and keep the strictly cheapest greedy ordering.

    O(n^3); fine for playlists up to roughly 200 tracks.
    """
    n = len(matrix)
    if n <= 1:
        return list(range(n))

    best_order: list[int] = []
    best_cost = math.inf
    for start in range(n):
        order = build_order(matrix, start)
        cost = order_cost(matrix, order)
        if cost < best_cost:
            best_cost = cost
            best_order = order
    return best_order


def reverse_segment(route: Sequence, i: int, j: int) -> list:
    """Copy of ``route`` with the inclusive slice ``[i..j]`` reversed."""
    result = list(route)
    result[i : j + 1] = result[i : j + 1][::-1]
    return result


def two_opt_order(
    matrix: list[list[float]],
    order: Sequence[int],
    max_rounds: int = TWO_OPT_MAX_ROUNDS,
) -> list[int]:
    """First-improvement 2-opt over an index ordering.

    Each pass scans ``i < j`` segment reversals in order and accepts the first
    one whose total cost is strictly lower, then restarts the scan. A pass
    with no improving reversal counts as one idle round; the search stops
    after ``max_rounds`` consecutive idle rounds.
    """
    route = list(order)
    n = len(route)
    if n < 4:
        return route

    current_cost = order_cost(matrix, route)
    idle_rounds = 0

    while idle_rounds < max_rounds:
        improved = False

        for i in range(n - 2):
            for j in range(i + 2, n):
                # Only the two boundary edges change in exact arithmetic. Reversals
                # that are clearly worse are skipped; near-ties still get the full
                # recomputed cost, which can differ in the last bits.
                delta = 0.0
                if i > 0:
                    delta += matrix[route[i - 1]][route[j]] - matrix[route[i - 1]][route[i]]
                if j < n - 1:
                    delta += matrix[route[i]][route[j + 1]] - matrix[route[j]][route[j + 1]]
                if delta > _DELTA_TOLERANCE:
                    continue

                candidate = reverse_segment(route, i, j)
                candidate_cost = order_cost(matrix, candidate)
                if candidate_cost < current_cost:
                    route = candidate
                    current_cost = candidate_cost
                    improved = True
                    break
            if improved:
                break

        if improved:
            idle_rounds = 0
        else:
            idle_rounds += 1

    return route


def nearest_neighbor_route(tracks: Sequence[Track]) -> list[Track]:
    if len(tracks) <= 1:
        return list(tracks)
    order = nearest_neighbor_order(cost_matrix(tracks))
    return [tracks[i] for i in order]


def two_opt(tracks: Sequence[Track], max_rounds: int = TWO_OPT_MAX_ROUNDS) -> list[Track]:
    if len(tracks) < 4:
        return list(tracks)
    order = two_opt_order(cost_matrix(tracks), range(len(tracks)), max_rounds=max_rounds)
    return [tracks[i] for i in order]
