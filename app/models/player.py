from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String
from app.database import Base
from app.models.enums import Side
import uuid

class Player(Base):
    __tablename__ = "players"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)

    # Court side inside the team, flipped by the match engine
    position = Column(Enum(Side, native_enum=False, length=8), nullable=True)
    # True while the player is committed to an ongoing match
    busy = Column(Boolean, nullable=False, default=False)

    team_id = Column(String, ForeignKey("teams.id"), nullable=True)
    slot = Column(Integer, nullable=True)  # 0 or 1 within the team
