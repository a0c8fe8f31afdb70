import unittest

from playlist_smoother.camelot import (
    camelot_distance,
    circular_distance,
    key_name_to_camelot,
    parse_camelot_code,
    to_camelot_code,
)
from playlist_smoother.models import SongDetails

_ALL_CODES = [f"{n}{letter}" for n in range(1, 13) for letter in ("A", "B")]


class ParseCamelotCodeTests(unittest.TestCase):
    def test_parses_valid_codes(self) -> None:
        self.assertEqual(parse_camelot_code("8A"), (8, "A"))
        self.assertEqual(parse_camelot_code("12B"), (12, "B"))

    def test_rejects_out_of_range_and_malformed(self) -> None:
        for code in ("0A", "13B", "8C", "8a", "A8", "", "100A", " 8A"):
            self.assertIsNone(parse_camelot_code(code), code)

    def test_none_is_unknown(self) -> None:
        self.assertIsNone(parse_camelot_code(None))


class CircularDistanceTests(unittest.TestCase):
    def test_wraps_around_the_wheel(self) -> None:
        self.assertEqual(circular_distance(12, 1), 1)
        self.assertEqual(circular_distance(1, 7), 6)
        self.assertEqual(circular_distance(3, 3), 0)


class CamelotDistanceTests(unittest.TestCase):
    def test_tiers(self) -> None:
        self.assertEqual(camelot_distance("8A", "8A"), 0.0)
        self.assertAlmostEqual(camelot_distance("8A", "9A"), 1 / 6)
        self.assertAlmostEqual(camelot_distance("8A", "8B"), 1 / 6)
        self.assertAlmostEqual(camelot_distance("8A", "9B"), 2 / 6)
        self.assertEqual(camelot_distance("8A", "3A"), 1.0)

    def test_wheel_wraps_between_12_and_1(self) -> None:
        self.assertAlmostEqual(camelot_distance("12A", "1A"), 1 / 6)
        self.assertAlmostEqual(camelot_distance("1B", "12A"), 2 / 6)

    def test_unknown_or_unparseable_is_neutral(self) -> None:
        self.assertEqual(camelot_distance(None, "8A"), 0.5)
        self.assertEqual(camelot_distance("8A", None), 0.5)
        self.assertEqual(camelot_distance(None, None), 0.5)
        self.assertEqual(camelot_distance("Am", "8A"), 0.5)
        self.assertEqual(camelot_distance("13A", "8A"), 0.5)

    def test_symmetric_for_every_pair(self) -> None:
        for a in _ALL_CODES:
            for b in _ALL_CODES:
                self.assertEqual(camelot_distance(a, b), camelot_distance(b, a), (a, b))

    def test_values_stay_in_unit_interval(self) -> None:
        for a in _ALL_CODES:
            for b in _ALL_CODES:
                self.assertTrue(0.0 <= camelot_distance(a, b) <= 1.0)


class KeyNotationTests(unittest.TestCase):
    def test_open_key_preferred(self) -> None:
        details = SongDetails(open_key="8d", key_of="Am")
        self.assertEqual(to_camelot_code(details), "8B")

    def test_falls_back_to_short_key_name(self) -> None:
        self.assertEqual(to_camelot_code(SongDetails(open_key="??", key_of="Em")), "9A")
        self.assertEqual(to_camelot_code(SongDetails(key_of="F#")), "2B")

    def test_unmapped_notation_is_unknown(self) -> None:
        self.assertIsNone(to_camelot_code(SongDetails(open_key="", key_of="H")))
        self.assertIsNone(to_camelot_code(SongDetails()))

    def test_long_key_names(self) -> None:
        self.assertEqual(key_name_to_camelot("A minor"), "8A")
        self.assertEqual(key_name_to_camelot("C"), "8B")
        self.assertIsNone(key_name_to_camelot("X major"))
        self.assertIsNone(key_name_to_camelot(None))

    def test_lookup_result_with_long_key_name(self) -> None:
        self.assertEqual(to_camelot_code(SongDetails(key_of="A minor")), "8A")
        self.assertEqual(to_camelot_code(SongDetails(open_key="??", key_of=" C major ")), "8B")


if __name__ == "__main__":
    unittest.main()
