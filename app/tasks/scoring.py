"""
Difficulty -> points table.
"""
import enum


class Difficulty(str, enum.Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Exact label lookup; anything unrecognized (or missing) is Medium."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.medium


DIFFICULTY_POINTS = {
    Difficulty.easy: 5,
    Difficulty.medium: 10,
    Difficulty.hard: 20,
}


def points(difficulty) -> int:
    return DIFFICULTY_POINTS[Difficulty.parse(difficulty)]
