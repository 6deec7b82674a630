from unittest.mock import patch

import pytest
import pytest_asyncio

from kanban_board.core.exceptions import NotFoundError, ValidationError
from kanban_board.models.board_list import DEFAULT_LIST_COLOR
from kanban_board.services.board_service import BoardService
from kanban_board.services.list_service import ListService
from kanban_board.services.ordering_service import OrderingService


@pytest_asyncio.fixture
async def board(db):
    return await BoardService.create(db, name="Sprint", description="Current sprint")


async def list_names(db, board_id):
    return [board_list.name for board_list in await ListService.get_by_board_id(db, board_id)]


class TestBoardService:

    @pytest.mark.asyncio
    async def test_create_and_get(self, db):
        board = await BoardService.create(db, name="  Roadmap  ")
        assert board.id is not None
        assert board.name == "Roadmap"

        fetched = await BoardService.get_by_id(db, board.id)
        assert fetched.id == board.id

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            await BoardService.create(db, name="   ")

    @pytest.mark.asyncio
    async def test_missing_board(self, db):
        with pytest.raises(NotFoundError):
            await BoardService.get_by_id(db, 999)

    @pytest.mark.asyncio
    async def test_get_all_newest_first(self, db):
        first = await BoardService.create(db, name="First")
        second = await BoardService.create(db, name="Second")

        boards = await BoardService.get_all(db)
        assert [b.id for b in boards] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_get_all_empty(self, db):
        assert await BoardService.get_all(db) == []

    @pytest.mark.asyncio
    async def test_update(self, db):
        board = await BoardService.create(db, name="Old")
        updated = await BoardService.update(db, board.id, name="New", description="Renamed")
        assert updated.name == "New"
        assert updated.description == "Renamed"


class TestListService:

    @pytest.mark.asyncio
    async def test_create_appends_after_last(self, db, board):
        first = await ListService.create(db, board_id=board.id, name="Backlog")
        second = await ListService.create(db, board_id=board.id, name="Doing")

        assert first.position == 1.0
        assert second.position == 2.0
        assert first.color == DEFAULT_LIST_COLOR

    @pytest.mark.asyncio
    async def test_explicit_position_kept_verbatim(self, db, board):
        board_list = await ListService.create(db, board_id=board.id, name="Done", position=5.0)
        assert board_list.position == 5.0

    @pytest.mark.asyncio
    async def test_create_on_missing_board(self, db):
        with pytest.raises(NotFoundError):
            await ListService.create(db, board_id=42, name="Orphan")

    @pytest.mark.asyncio
    async def test_lists_ordered_by_position(self, db, board):
        await ListService.create(db, board_id=board.id, name="C", position=3.0)
        await ListService.create(db, board_id=board.id, name="A", position=1.0)
        await ListService.create(db, board_id=board.id, name="B", position=2.0)

        assert await list_names(db, board.id) == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_empty_board_has_no_lists(self, db, board):
        assert await ListService.get_by_board_id(db, board.id) == []

    @pytest.mark.asyncio
    async def test_update(self, db, board):
        board_list = await ListService.create(db, board_id=board.id, name="Todo")
        updated = await ListService.update(db, board_list.id, name="To Do", color="#60a5fa")

        assert updated.name == "To Do"
        assert updated.color == "#60a5fa"
        assert updated.position == board_list.position

    @pytest.mark.asyncio
    async def test_update_missing_list(self, db):
        with pytest.raises(NotFoundError):
            await ListService.update(db, 404, name="Nope")

    @pytest.mark.asyncio
    async def test_non_finite_position_rejected(self, db, board):
        with pytest.raises(ValidationError):
            await ListService.create(db, board_id=board.id, name="Far", position=float("-inf"))

        board_list = await ListService.create(db, board_id=board.id, name="Near")
        with pytest.raises(ValidationError):
            await ListService.update(db, board_list.id, position=float("nan"))

        assert await list_names(db, board.id) == ["Near"]
        assert (await ListService.get_by_id(db, board_list.id)).position == 1.0


class TestMoveList:

    @pytest.mark.asyncio
    async def test_move_between_backlog_and_done(self, db, board):
        backlog = await ListService.create(db, board_id=board.id, name="Backlog", position=1.0)
        done = await ListService.create(db, board_id=board.id, name="Done", position=5.0)
        doing = await ListService.create(db, board_id=board.id, name="Doing")
        assert doing.position == 6.0

        moved = await OrderingService.move_list(db, doing.id, target_position=3.0)

        assert moved.position == 3.0
        assert backlog.position < moved.position < done.position
        assert await list_names(db, board.id) == ["Backlog", "Doing", "Done"]

    @pytest.mark.asyncio
    async def test_move_to_head(self, db, board):
        await ListService.create(db, board_id=board.id, name="A", position=2.0)
        b = await ListService.create(db, board_id=board.id, name="B", position=4.0)

        moved = await OrderingService.move_list(db, b.id, target_position=0.5)

        # No list below the target: lower neighbour counts as 0
        assert moved.position == 1.0
        assert await list_names(db, board.id) == ["B", "A"]

    @pytest.mark.asyncio
    async def test_move_to_tail(self, db, board):
        a = await ListService.create(db, board_id=board.id, name="A", position=1.0)
        await ListService.create(db, board_id=board.id, name="B", position=2.0)

        moved = await OrderingService.move_list(db, a.id, target_position=10.0)

        # No list above the target: upper neighbour is prev + 2
        assert moved.position == 3.0
        assert await list_names(db, board.id) == ["B", "A"]

    @pytest.mark.asyncio
    async def test_move_ignores_the_list_itself(self, db, board):
        only = await ListService.create(db, board_id=board.id, name="Only")

        moved = await OrderingService.move_list(db, only.id, target_position=1.0)

        assert moved.position == 1.0

    @pytest.mark.asyncio
    async def test_move_missing_list(self, db):
        with pytest.raises(NotFoundError):
            await OrderingService.move_list(db, 404, target_position=1.0)

    @pytest.mark.asyncio
    async def test_exhausted_gap_triggers_respace(self, db, board):
        await ListService.create(db, board_id=board.id, name="A", position=1.0)
        await ListService.create(db, board_id=board.id, name="B", position=1.0 + 5e-10)
        c = await ListService.create(db, board_id=board.id, name="C", position=3.0)

        await OrderingService.move_list(db, c.id, target_position=1.0 + 2.5e-10)

        lists = await ListService.get_by_board_id(db, board.id)
        assert [board_list.name for board_list in lists] == ["A", "C", "B"]
        assert [board_list.position for board_list in lists] == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_respace_lists(self, db, board):
        await ListService.create(db, board_id=board.id, name="A", position=0.25)
        await ListService.create(db, board_id=board.id, name="B", position=0.5)
        await ListService.create(db, board_id=board.id, name="C", position=7.0)

        lists = await OrderingService.respace_lists(db, board.id)

        assert [board_list.name for board_list in lists] == ["A", "B", "C"]
        assert [board_list.position for board_list in lists] == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_respace_skips_list_of_another_board(self, db, board):
        stay = await ListService.create(db, board_id=board.id, name="Stay", position=4.0)
        other = await BoardService.create(db, name="Other")
        foreign = await ListService.create(db, board_id=other.id, name="Foreign", position=7.0)

        with patch.object(ListService, "get_ordered_ids", return_value=[foreign.id, stay.id]):
            await OrderingService.respace_lists(db, board.id)

        foreign = await ListService.get_by_id(db, foreign.id)
        assert (foreign.board_id, foreign.position) == (other.id, 7.0)
        assert (await ListService.get_by_id(db, stay.id)).position == 2.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [float("inf"), float("nan")])
    async def test_non_finite_target_rejected(self, db, board, target):
        a = await ListService.create(db, board_id=board.id, name="A")

        with pytest.raises(ValidationError):
            await OrderingService.move_list(db, a.id, target_position=target)

        assert (await ListService.get_by_id(db, a.id)).position == 1.0
