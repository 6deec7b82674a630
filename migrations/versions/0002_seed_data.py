"""seed default board and labels

Revision ID: 0002_seed_data
Revises: 0001_initial_schema
Create Date: 2026-10-19

"""
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa

revision = "0002_seed_data"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None

BOARD_NAME = "Main Board"

DEFAULT_LISTS = [
    ("Backlog", 1.0, "#9ca3af"),
    ("To Do", 2.0, "#60a5fa"),
    ("In Progress", 3.0, "#fbbf24"),
    ("Review", 4.0, "#c084fc"),
    ("Done", 5.0, "#10b981"),
]

DEFAULT_LABELS = [
    ("Bug", "#ef4444"),
    ("Feature", "#3b82f6"),
    ("Enhancement", "#8b5cf6"),
    ("Documentation", "#06b6d4"),
    ("High Priority", "#f97316"),
    ("Low Priority", "#6b7280"),
]

boards = sa.table(
    "boards",
    sa.column("id", sa.Integer),
    sa.column("name", sa.String),
    sa.column("description", sa.Text),
    sa.column("created_at", sa.DateTime),
    sa.column("updated_at", sa.DateTime),
)

lists = sa.table(
    "lists",
    sa.column("board_id", sa.Integer),
    sa.column("name", sa.String),
    sa.column("color", sa.String),
    sa.column("position", sa.Float),
    sa.column("created_at", sa.DateTime),
    sa.column("updated_at", sa.DateTime),
)

labels = sa.table(
    "labels",
    sa.column("name", sa.String),
    sa.column("color", sa.String),
    sa.column("created_at", sa.DateTime),
)


def upgrade() -> None:
    bind = op.get_bind()
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    board_id = bind.execute(sa.select(boards.c.id).where(boards.c.name == BOARD_NAME)).scalar()
    if board_id is None:
        bind.execute(boards.insert().values(
            name=BOARD_NAME,
            description="Default kanban board",
            created_at=now,
            updated_at=now,
        ))
        board_id = bind.execute(sa.select(boards.c.id).where(boards.c.name == BOARD_NAME)).scalar()

        op.bulk_insert(lists, [
            {
                "board_id": board_id,
                "name": name,
                "position": position,
                "color": color,
                "created_at": now,
                "updated_at": now,
            }
            for name, position, color in DEFAULT_LISTS
        ])

    existing = set(bind.execute(sa.select(labels.c.name)).scalars().all())
    missing = [(name, color) for name, color in DEFAULT_LABELS if name not in existing]
    if missing:
        op.bulk_insert(labels, [
            {"name": name, "color": color, "created_at": now}
            for name, color in missing
        ])


def downgrade() -> None:
    op.execute(labels.delete().where(labels.c.name.in_([name for name, _ in DEFAULT_LABELS])))
    board_ids = sa.select(boards.c.id).where(boards.c.name == BOARD_NAME)
    op.execute(lists.delete().where(lists.c.board_id.in_(board_ids)))
    op.execute(boards.delete().where(boards.c.name == BOARD_NAME))
