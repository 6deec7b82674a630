# Import all models here for Alembic to discover them
from kanban_board.db.base import Base
from kanban_board.models.board import Board
from kanban_board.models.board_list import BoardList
from kanban_board.models.card import Card, Comment
from kanban_board.models.label import Label, card_labels
