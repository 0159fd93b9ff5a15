"""Percentage to letter grade."""

# (minimum percent, letter), highest first
LETTER_BANDS: list[tuple[float, str]] = [
    (93.0, "A"),
    (90.0, "A-"),
    (87.0, "B+"),
    (83.0, "B"),
    (80.0, "B-"),
    (77.0, "C+"),
    (73.0, "C"),
    (70.0, "C-"),
    (67.0, "D+"),
    (63.0, "D"),
    (60.0, "D-"),
]


def letter_from_percent(percent: float) -> str:
    for floor, letter in LETTER_BANDS:
        if percent >= floor:
            return letter
    return "F"
