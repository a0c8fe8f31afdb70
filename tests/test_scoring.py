import unittest

from playlist_smoother.models import Track
from playlist_smoother.scoring import (
    artist_penalty,
    bpm_distance,
    cost_matrix,
    energy_distance,
    order_cost,
    total_route_cost,
    transition_cost,
    transition_scores,
)


def _track(track_id: str, artist: str = "", bpm: float | None = None,
           key: str | None = None, energy: float | None = None) -> Track:
    return Track(
        track_id=track_id,
        uri=f"spotify:track:{track_id}",
        name=track_id.upper(),
        artist=artist or f"Artist {track_id}",
        bpm=bpm,
        camelot_code=key,
        energy=energy,
    )


class BpmDistanceTests(unittest.TestCase):
    def test_half_and_double_time_are_compatible(self) -> None:
        self.assertEqual(bpm_distance(85, 170), 0.0)
        self.assertEqual(bpm_distance(170, 85), 0.0)

    def test_identical_tempo(self) -> None:
        self.assertEqual(bpm_distance(120, 120), 0.0)

    def test_scaled_and_clamped(self) -> None:
        self.assertAlmostEqual(bpm_distance(120, 125), 0.25)
        self.assertEqual(bpm_distance(100, 150), 1.0)

    def test_unknown_is_neutral(self) -> None:
        self.assertEqual(bpm_distance(None, 120), 0.5)
        self.assertEqual(bpm_distance(120, None), 0.5)


class EnergyDistanceTests(unittest.TestCase):
    def test_scaled_difference(self) -> None:
        self.assertAlmostEqual(energy_distance(50, 75), 0.25)
        self.assertEqual(energy_distance(0, 100), 1.0)

    def test_unknown_is_neutral(self) -> None:
        self.assertEqual(energy_distance(None, 10), 0.5)


class ArtistPenaltyTests(unittest.TestCase):
    def test_exact_match_only(self) -> None:
        self.assertEqual(artist_penalty("Daft Punk", "Daft Punk"), 1.0)
        self.assertEqual(artist_penalty("Daft Punk", "daft punk"), 0.0)


class TransitionCostTests(unittest.TestCase):
    def test_fully_unknown_tracks(self) -> None:
        self.assertAlmostEqual(transition_cost(_track("a"), _track("b")), 0.45)
        self.assertAlmostEqual(transition_cost(_track("a", artist="X"), _track("b", artist="X")), 0.55)

    def test_perfect_match_costs_nothing(self) -> None:
        a = _track("a", bpm=120, key="8A", energy=50)
        b = _track("b", bpm=120, key="8A", energy=50)
        self.assertEqual(transition_cost(a, b), 0.0)

    def test_weighted_combination(self) -> None:
        a = _track("a", bpm=120, key="8A", energy=50)
        b = _track("b", bpm=122, key="9A", energy=55)
        expected = 0.40 * (1 / 6) + 0.30 * 0.1 + 0.20 * 0.05
        self.assertAlmostEqual(transition_cost(a, b), expected)

    def test_symmetric_and_bounded(self) -> None:
        tracks = [
            _track("a", bpm=120, key="8A", energy=50),
            _track("b", bpm=60, key="12B", energy=0),
            _track("c", artist="Artist a", bpm=None, key="3A", energy=100),
            _track("d", bpm=174, key=None, energy=None),
            _track("e", artist="Artist a"),
        ]
        for a in tracks:
            for b in tracks:
                cost = transition_cost(a, b)
                self.assertEqual(cost, transition_cost(b, a))
                self.assertGreaterEqual(cost, 0.0)
                self.assertLessEqual(cost, 1.0)


class RouteCostTests(unittest.TestCase):
    def test_empty_and_single_routes_cost_nothing(self) -> None:
        self.assertEqual(total_route_cost([]), 0.0)
        self.assertEqual(total_route_cost([_track("a")]), 0.0)

    def test_sums_adjacent_pairs(self) -> None:
        tracks = [_track("a"), _track("b"), _track("c")]
        self.assertAlmostEqual(total_route_cost(tracks), 0.9)

    def test_transition_scores_start_at_zero(self) -> None:
        tracks = [_track("a"), _track("b"), _track("c")]
        scores = transition_scores(tracks)
        self.assertEqual(len(scores), 3)
        self.assertEqual(scores[0], 0.0)
        self.assertAlmostEqual(scores[1], 0.45)

    def test_matrix_cost_matches_track_cost(self) -> None:
        tracks = [
            _track("a", bpm=120, key="8A", energy=50),
            _track("b", bpm=90, key="3A", energy=20),
            _track("c", bpm=121, key="8B", energy=52),
            _track("d"),
        ]
        matrix = cost_matrix(tracks)
        self.assertEqual(order_cost(matrix, [0, 1, 2, 3]), total_route_cost(tracks))
        self.assertEqual(matrix[1][2], matrix[2][1])
        self.assertEqual(matrix[0][0], 0.0)


if __name__ == "__main__":
    unittest.main()
