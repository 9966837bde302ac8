from __future__ import annotations

from schoolresults.core.models import Group


JUNIOR_CLASSES = range(6, 9)
SECONDARY_CLASSES = range(9, 11)

JUNIOR_SUBJECTS: tuple[str, ...] = (
    "Bangla 1st Paper",
    "Bangla 2nd Paper",
    "English 1st Paper",
    "English 2nd Paper",
    "Mathematics",
    "Science & Technology",
    "Bangladesh & Global Studies",
    "Digital Technology (ICT)",
    "Religion & Moral Education",
    "Health & Physical Ed.",
    "Agriculture",
    "Arts & Culture / Work & Arts",
)

SECONDARY_COMMON_SUBJECTS: tuple[str, ...] = (
    "Bangla 1st Paper",
    "Bangla 2nd Paper",
    "English 1st Paper",
    "English 2nd Paper",
    "Mathematics",
    "Digital Technology (ICT)",
    "Religion & Moral Education",
)

GROUP_SUBJECTS: dict[Group, tuple[str, ...]] = {
    Group.SCIENCE: (
        "Physics",
        "Chemistry",
        "Biology",
        "Bangladesh & Global Science",
        "Higher Math / Agriculture",
    ),
    Group.BUSINESS_STUDIES: (
        "Accounting",
        "Finance",
        "Business Entrepreneurship",
    ),
    Group.HUMANITIES: (
        "History",
        "Geography",
        "Civics",
        "Science",
    ),
}


def _as_group(group: Group | str | None) -> Group | None:
    if group is None or isinstance(group, Group):
        return group
    try:
        return Group(group)
    except ValueError:
        return None


def is_grouped_class(class_number: int) -> bool:
    return class_number in SECONDARY_CLASSES


def subjects_for(class_number: int, group: Group | str | None = None) -> list[str]:
    """
    Ordered subject list for a class. Classes 9-10 without a recognised group
    get the common subjects only; classes outside 6-10 get nothing.
    """
    if class_number in JUNIOR_CLASSES:
        return list(JUNIOR_SUBJECTS)
    if class_number in SECONDARY_CLASSES:
        resolved = _as_group(group)
        return list(SECONDARY_COMMON_SUBJECTS) + list(GROUP_SUBJECTS.get(resolved, ()))
    return []


def groups_for(class_number: int) -> list[Group]:
    if is_grouped_class(class_number):
        return list(Group)
    return []
