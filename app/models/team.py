from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.player import Player
import uuid

class Team(Base):
    __tablename__ = "teams"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=True)

    # Exactly two players, slot 0 first
    players = relationship(
        Player,
        order_by=Player.slot,
        cascade="all, delete-orphan",
    )

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return " / ".join(p.name for p in self.players)
