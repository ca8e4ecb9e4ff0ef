"""
Value objects for the task domain.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import List

from taskhub.domain.models.base import ValueObject
from taskhub.domain.models.exceptions import InvalidPriorityError


MIN_PRIORITY = 1
MAX_PRIORITY = 10

_DESCRIPTIONS = {
    1: "Lowest priority - Can be done when time permits",
    2: "Low priority - Should be addressed eventually",
    3: "Below normal priority - Address after higher priority items",
    4: "Normal priority - Standard work item",
    5: "Medium priority - Should be done in reasonable timeframe",
    6: "Above normal priority - Should be prioritized",
    7: "High priority - Needs attention soon",
    8: "Very high priority - Important and time-sensitive",
    9: "Critical priority - Urgent, needs immediate attention",
    10: "Highest priority - Drop everything else",
}


@total_ordering
@dataclass(frozen=True)
class PriorityBucket(ValueObject):
    """
    Priority level on a 1-10 scale.

    Bands: 1-3 Low, 4-6 Medium, 7-8 High, 9-10 Critical.
    Ordered by level.
    """

    level: int

    def validate(self) -> None:
        if not self.is_valid(self.level):
            raise InvalidPriorityError()

    @staticmethod
    def is_valid(level: object) -> bool:
        # bool is an int subclass but never a priority
        if isinstance(level, bool) or not isinstance(level, int):
            return False
        return MIN_PRIORITY <= level <= MAX_PRIORITY

    @classmethod
    def all(cls) -> List["PriorityBucket"]:
        """Every priority bucket from lowest to highest."""
        return [cls(level) for level in range(MIN_PRIORITY, MAX_PRIORITY + 1)]

    @property
    def label(self) -> str:
        if self.level <= 3:
            return "Low"
        if self.level <= 6:
            return "Medium"
        if self.level <= 8:
            return "High"
        return "Critical"

    @property
    def color(self) -> str:
        if self.level <= 3:
            return "#6B7280"
        if self.level <= 6:
            return "#2563EB"
        if self.level <= 8:
            return "#EA580C"
        return "#DC2626"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self.level]

    def is_higher_than(self, other: "PriorityBucket") -> bool:
        return self.level > other.level

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PriorityBucket):
            return NotImplemented
        return self.level < other.level

    def __int__(self) -> int:
        return self.level

    def __str__(self) -> str:
        return f"Priority {self.level} ({self.label})"

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "label": self.label,
            "color": self.color,
            "description": self.description,
        }
