from dataclasses import dataclass
from typing import Optional


@dataclass
class SelectionState:
    """Last exam/class/section picked, shared by the mark entry and marksheet screens."""

    exam: Optional[str] = None
    class_number: Optional[int] = None
    section: Optional[str] = None
    group: Optional[str] = None
