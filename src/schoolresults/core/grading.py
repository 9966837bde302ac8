from __future__ import annotations

from dataclasses import dataclass


GRADE_BANDS: list[tuple[float, str, float]] = [
    (80, "A+", 5.0),
    (70, "A", 4.0),
    (60, "A-", 3.5),
    (50, "B", 3.0),
    (40, "C", 2.0),
    (33, "D", 1.0),
]

FAIL_GRADE: tuple[str, float] = ("F", 0.0)

ENGLISH_PAPERS = frozenset({"English 1st Paper", "English 2nd Paper"})

SCIENCE_SUBJECTS = frozenset(
    {
        "Higher Math / Agriculture",
        "Higher Math",
        "Physics",
        "Chemistry",
        "Biology",
    }
)


@dataclass(frozen=True)
class MarkingScheme:
    written: int
    mcq: int
    practical: int
    total: int = 100


WRITTEN_ONLY = MarkingScheme(written=100, mcq=0, practical=0)
SCIENCE_SCHEME = MarkingScheme(written=50, mcq=25, practical=25)
DEFAULT_SCHEME = MarkingScheme(written=70, mcq=30, practical=0)


def grade_of(percentage: float) -> tuple[str, float]:
    """Lower bound of each band is inclusive; anything below 33 is F."""
    for low, letter, point in GRADE_BANDS:
        if percentage >= low:
            return letter, point
    return FAIL_GRADE


def letter_for_gpa(gpa: float) -> str:
    """Overall letter: the first band whose grade point the GPA reaches."""
    for _, letter, point in GRADE_BANDS:
        if gpa >= point:
            return letter
    return FAIL_GRADE[0]


def grading_scale() -> list[tuple[str, str, float]]:
    """(letter, mark range, grade point) for every band, highest first."""
    scale: list[tuple[str, str, float]] = []
    upper = 100
    for low, letter, point in GRADE_BANDS:
        scale.append((letter, f"{low:g}-{upper:g}", point))
        upper = low - 1
    scale.append((FAIL_GRADE[0], f"0-{upper:g}", FAIL_GRADE[1]))
    return scale


def marking_scheme_of(subject: str) -> MarkingScheme:
    if subject in ENGLISH_PAPERS:
        return WRITTEN_ONLY
    if subject in SCIENCE_SUBJECTS:
        return SCIENCE_SCHEME
    return DEFAULT_SCHEME


def validate_components(subject: str, theory: int, mcq: int, practical: int) -> list[str]:
    scheme = marking_scheme_of(subject)
    problems: list[str] = []
    for label, value, maximum in (
        ("Written", theory, scheme.written),
        ("MCQ", mcq, scheme.mcq),
        ("Practical", practical, scheme.practical),
    ):
        if value < 0:
            problems.append(f"{label} marks ({value}) cannot be negative")
        elif value > maximum:
            problems.append(f"{label} marks ({value}) exceed maximum ({maximum})")
    return problems


def evaluate(subject: str, theory: int, mcq: int, practical: int) -> tuple[int, str, float]:
    scheme = marking_scheme_of(subject)
    total = theory + mcq + practical
    letter, point = grade_of((total / scheme.total) * 100)
    return total, letter, point
