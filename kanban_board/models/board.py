from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow


class Board(Base):
    """Root of the containment hierarchy"""

    __tablename__ = "boards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    lists = relationship(
        "BoardList",
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
