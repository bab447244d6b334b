import enum


class Side(str, enum.Enum):
    """Court half seen from a team: the left or right service court."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"

    def invert(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class MatchStatus(str, enum.Enum):
    ONGOING = "ONGOING"
    FINISHED = "FINISHED"
    FORFEITED = "FORFEITED"
