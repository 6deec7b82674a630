from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Index
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow

DEFAULT_LIST_COLOR = "#6b7280"


class BoardList(Base):
    """A column of cards on a board, ordered by ``position`` within the board"""

    __tablename__ = "lists"

    id = Column(Integer, primary_key=True, index=True)
    board_id = Column(Integer, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    color = Column(String(32), nullable=False, default=DEFAULT_LIST_COLOR)
    position = Column(Float, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    board = relationship("Board", back_populates="lists")

    cards = relationship(
        "Card",
        back_populates="board_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_lists_board_position", "board_id", "position"),
    )
