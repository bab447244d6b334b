from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import MatchStatus, Side
from app.models.team import Team
from datetime import date
import uuid


class MatchSet(Base):
    __tablename__ = "match_sets"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    match_id = Column(String, ForeignKey("matches.id"), nullable=False)

    number = Column(Integer, nullable=False)  # 1..3
    points_a = Column(Integer, nullable=False, default=0)
    points_b = Column(Integer, nullable=False, default=0)


class Match(Base):
    __tablename__ = "matches"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    match_date = Column(Date, nullable=False, default=date.today)

    team_a_id = Column(String, ForeignKey("teams.id"), nullable=True)
    team_b_id = Column(String, ForeignKey("teams.id"), nullable=True)
    serving_team_id = Column(String, ForeignKey("teams.id"), nullable=True)
    winning_team_id = Column(String, ForeignKey("teams.id"), nullable=True)

    serve_side = Column(Enum(Side, native_enum=False, length=8), nullable=True)
    status = Column(
        Enum(MatchStatus, native_enum=False, length=16),
        nullable=False,
        default=MatchStatus.ONGOING,
    )

    team_a = relationship(Team, foreign_keys=[team_a_id])
    team_b = relationship(Team, foreign_keys=[team_b_id])
    serving_team = relationship(Team, foreign_keys=[serving_team_id])
    winning_team = relationship(Team, foreign_keys=[winning_team_id])

    # No order_by: the current set is the one with the highest number
    sets = relationship(MatchSet, cascade="all, delete-orphan")

    @property
    def teams(self):
        """Teams present on the match, team A first."""
        return [t for t in (self.team_a, self.team_b) if t is not None]
