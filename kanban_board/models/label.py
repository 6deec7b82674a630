from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow


# Many-to-many association between cards and labels, one row per pair
card_labels = Table(
    "card_labels",
    Base.metadata,
    Column("card_id", Integer, ForeignKey("cards.id", ondelete="CASCADE"), primary_key=True, index=True),
    Column("label_id", Integer, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Label(Base):
    """Globally named tag that can be attached to any card"""

    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)
    color = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    cards = relationship("Card", secondary=card_labels, back_populates="labels", passive_deletes=True)
