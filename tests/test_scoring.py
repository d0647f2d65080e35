import unittest

from server.scoring import EXACT_MATCH_SCORE, score


class ScoringTest(unittest.TestCase):
    def test_band_edges(self) -> None:
        expected = {
            0: 100,
            1: 50,
            10: 50,
            11: 45,
            20: 45,
            21: 40,
            30: 40,
            31: 35,
            40: 35,
            41: 30,
            50: 30,
            51: 25,
            60: 25,
            61: 20,
            70: 20,
            71: 15,
            80: 15,
            81: 10,
            90: 10,
            91: 5,
            10_000: 5,
        }
        for diff, points in expected.items():
            with self.subTest(diff=diff):
                self.assertEqual(score(50 + diff, 50), points)

    def test_depends_only_on_distance(self) -> None:
        for diff in range(0, 120):
            with self.subTest(diff=diff):
                self.assertEqual(score(50 + diff, 50), score(50 - diff, 50))
                self.assertEqual(score(-7 - diff, -7), score(1000 + diff, 1000))

    def test_non_increasing_with_distance(self) -> None:
        previous = score(0, 0)
        for diff in range(1, 200):
            current = score(diff, 0)
            self.assertLessEqual(current, previous, f"diff={diff}")
            previous = current

    def test_exact_match_only_when_equal(self) -> None:
        self.assertEqual(score(42, 42), EXACT_MATCH_SCORE)
        for guess in range(-150, 250):
            if guess != 42:
                self.assertLess(score(guess, 42), EXACT_MATCH_SCORE)


if __name__ == "__main__":
    unittest.main()
