from __future__ import annotations

import logging
from typing import Callable, Sequence

from playlist_smoother.config import TWO_OPT_MAX_ROUNDS
from playlist_smoother.models import SmoothResult, Track
from playlist_smoother.optimizer import nearest_neighbor_order, two_opt_order
from playlist_smoother.scoring import cost_matrix, order_cost, total_route_cost

logger = logging.getLogger(__name__)

PhaseCallback = Callable[[str], None]


def smooth_playlist(
    tracks: Sequence[Track],
    max_rounds: int = TWO_OPT_MAX_ROUNDS,
    on_phase: PhaseCallback | None = None,
) -> SmoothResult:
    """Reorder ``tracks`` for smoother transitions.

    Builds the cheapest nearest-neighbour route, refines it with 2-opt and
    reports the cost of the input order next to the optimised one. Inputs
    with fewer than three tracks are returned in their original order.

    ``on_phase`` is called with ``"greedy"``, ``"refine"`` and ``"done"`` so a
    caller can report progress between the phases.
    """
    tracks = list(tracks)
    original_cost = total_route_cost(tracks)

    if len(tracks) < 3:
        if on_phase:
            on_phase("done")
        return SmoothResult(
            sorted_tracks=tracks,
            original_cost=original_cost,
            optimized_cost=original_cost,
        )

    matrix = cost_matrix(tracks)

    if on_phase:
        on_phase("greedy")
    greedy = nearest_neighbor_order(matrix)
    logger.debug("Greedy route cost %.4f (original %.4f)", order_cost(matrix, greedy), original_cost)

    if on_phase:
        on_phase("refine")
    refined = two_opt_order(matrix, greedy, max_rounds=max_rounds)

    sorted_tracks = [tracks[i] for i in refined]
    optimized_cost = total_route_cost(sorted_tracks)
    logger.debug("Refined route cost %.4f over %d tracks", optimized_cost, len(sorted_tracks))

    if on_phase:
        on_phase("done")
    return SmoothResult(
        sorted_tracks=sorted_tracks,
        original_cost=original_cost,
        optimized_cost=optimized_cost,
    )
