"""Enums for model fields."""

from enum import Enum


class BottleStatus(str, Enum):
    """Lifecycle states of a bottle in the cellar."""

    IN_CELLAR = "in_cellar"
    CONSUMED = "consumed"
    ARCHIVED = "archived"

    def can_transition_to(self, target: "BottleStatus") -> bool:
        """Check whether an explicit status change is allowed."""
        return self == target or target in BOTTLE_TRANSITIONS[self]


BOTTLE_TRANSITIONS: dict[BottleStatus, set[BottleStatus]] = {
    BottleStatus.IN_CELLAR: {BottleStatus.CONSUMED, BottleStatus.ARCHIVED},
    BottleStatus.CONSUMED: {BottleStatus.IN_CELLAR, BottleStatus.ARCHIVED},
    BottleStatus.ARCHIVED: {BottleStatus.IN_CELLAR},
}


class BeverageType(str, Enum):
    """Kinds of drink a user catalogues."""

    WINE = "wine"
    BEER = "beer"


class ScoringMode(str, Enum):
    """How a user scores tasting entries."""

    DETAILED = "detailed"
    CASUAL = "casual"

