from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from kanban_board.core.exceptions import NotFoundError, PersistenceError, persistence_error, require_text
from kanban_board.models.label import Label, card_labels
from kanban_board.services.card_service import CardService
from kanban_board.logs import debug_logger


class LabelService:
    """Labels and their card associations"""

    @staticmethod
    async def create(
        db: AsyncSession,
        name: str,
        color: str
    ) -> Label:
        """Create a label with a unique name"""
        label = Label(
            name=require_text(name, "name"),
            color=require_text(color, "color")
        )

        db.add(label)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise PersistenceError(f"Label '{label.name}' already exists") from e
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error("create label", e) from e
        await db.refresh(label)
        return label

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        label_id: int
    ) -> Label:
        """Get label by ID"""
        query = select(Label).where(Label.id == label_id).execution_options(populate_existing=True)
        result = await db.execute(query)
        label = result.scalars().first()
        if label is None:
            raise NotFoundError(f"Label {label_id} not found")
        return label

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Label]:
        """Get all labels ordered by name"""
        query = select(Label).order_by(Label.name, Label.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update(
        db: AsyncSession,
        label_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None
    ) -> Label:
        """Update a label"""
        await LabelService.get_by_id(db, label_id)

        update_data = {}
        if name is not None:
            update_data["name"] = require_text(name, "name")
        if color is not None:
            update_data["color"] = require_text(color, "color")

        if not update_data:
            return await LabelService.get_by_id(db, label_id)

        try:
            stmt = update(Label).where(Label.id == label_id).values(**update_data)
            await db.execute(stmt)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise PersistenceError(f"Label '{update_data.get('name')}' already exists") from e
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"update label {label_id}", e) from e

        return await LabelService.get_by_id(db, label_id)

    @staticmethod
    async def delete(
        db: AsyncSession,
        label_id: int
    ) -> None:
        """Delete a label; cards keep existing, only their associations go"""
        await LabelService.get_by_id(db, label_id)
        try:
            await db.execute(delete(card_labels).where(card_labels.c.label_id == label_id))
            await db.execute(delete(Label).where(Label.id == label_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"delete label {label_id}", e) from e
        debug_logger.info(f"Deleted label {label_id}")

    @staticmethod
    async def is_assigned(
        db: AsyncSession,
        card_id: int,
        label_id: int
    ) -> bool:
        query = select(card_labels.c.card_id).where(
            card_labels.c.card_id == card_id,
            card_labels.c.label_id == label_id
        )
        result = await db.execute(query)
        return result.first() is not None

    @staticmethod
    async def assign_to_card(
        db: AsyncSession,
        card_id: int,
        label_id: int
    ) -> None:
        """Attach a label to a card; assigning twice is a no-op"""
        await CardService.get_by_id(db, card_id)
        await LabelService.get_by_id(db, label_id)

        if await LabelService.is_assigned(db, card_id, label_id):
            return

        stmt = insert(card_labels).values(
            card_id=card_id,
            label_id=label_id
        )
        try:
            await db.execute(stmt)
            await db.commit()
        except IntegrityError:
            # A concurrent request inserted the same pair first
            await db.rollback()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"assign label {label_id} to card {card_id}", e) from e

    @staticmethod
    async def remove_from_card(
        db: AsyncSession,
        card_id: int,
        label_id: int
    ) -> None:
        """Detach a label from a card"""
        stmt = delete(card_labels).where(
            card_labels.c.card_id == card_id,
            card_labels.c.label_id == label_id
        )
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise persistence_error(f"remove label {label_id} from card {card_id}", e) from e

        if result.rowcount == 0:
            raise NotFoundError(f"Label {label_id} is not assigned to card {card_id}")

    @staticmethod
    async def get_card_labels(
        db: AsyncSession,
        card_id: int
    ) -> List[Label]:
        """Get all labels of a card ordered by name"""
        await CardService.get_by_id(db, card_id)

        query = select(Label).join(
            card_labels, Label.id == card_labels.c.label_id
        ).where(card_labels.c.card_id == card_id).order_by(Label.name, Label.id)

        result = await db.execute(query)
        return list(result.scalars().all())
