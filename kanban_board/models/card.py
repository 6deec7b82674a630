from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Text, Boolean, Index
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow
from kanban_board.models.label import Label, card_labels


class Card(Base):
    """A task inside a list, ordered by ``position`` within the list"""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(32), nullable=True)
    due_date = Column(DateTime, nullable=True)
    position = Column(Float, nullable=False)
    # Archival keeps the position so the card can return to its slot
    archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    board_list = relationship("BoardList", back_populates="cards")

    comments = relationship(
        "Comment",
        back_populates="card",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Comment.created_at.desc(), Comment.id.desc()],
    )

    labels = relationship(
        "Label",
        secondary=card_labels,
        back_populates="cards",
        passive_deletes=True,
        order_by=lambda: [Label.name, Label.id],
    )

    __table_args__ = (
        Index("idx_cards_list_position", "list_id", "position"),
        Index("idx_cards_archived", "archived"),
    )


class Comment(Base):
    """Immutable note attached to a card"""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    card = relationship("Card", back_populates="comments")
