from typing import List, Tuple

EXACT_MATCH_SCORE = 100
FAR_OFF_SCORE = 5

# (largest distance in the band, score) in increasing distance order
SCORE_BANDS: List[Tuple[int, int]] = [
    (0, EXACT_MATCH_SCORE),
    (10, 50),
    (20, 45),
    (30, 40),
    (40, 35),
    (50, 30),
    (60, 25),
    (70, 20),
    (80, 15),
    (90, 10),
]


def score(guess: int, secret: int) -> int:
    """
    Score a guess by its distance from the secret.

    An exact match is worth 100, any distance above 90 is worth 5.
    """
    diff = abs(guess - secret)
    for max_diff, points in SCORE_BANDS:
        if diff <= max_diff:
            return points
    return FAR_OFF_SCORE


def is_exact_match(points: int) -> bool:
    return points == EXACT_MATCH_SCORE
