from typing import Tuple


MAX_DIMENSION_SCORE = 25
MAX_OVERALL_SCORE = 100

DIMENSION_NAMES: Tuple[str, ...] = (
    "Narrative Clarity & Vision",
    "Traction & Metrics",
    "Market & Timing",
    "Team & Execution Readiness",
)

# (lowest score in band, label), highest band first.
SCORE_BANDS: Tuple[Tuple[int, str], ...] = (
    (85, "Investor Ready"),
    (70, "Almost There"),
    (50, "Needs Work"),
    (30, "Early Stage"),
    (0, "Too Early"),
)
SCORE_LABELS: Tuple[str, ...] = tuple(label for _, label in SCORE_BANDS)


def label_for_score(score: int) -> str:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"Score must be an integer, got {score!r}.")
    if not (0 <= score <= MAX_OVERALL_SCORE):
        raise ValueError(f"Score must be between 0 and {MAX_OVERALL_SCORE}, got {score}.")
    for floor, label in SCORE_BANDS:
        if score >= floor:
            return label
    raise AssertionError("score bands must cover 0")
