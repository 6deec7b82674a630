import asyncio
from datetime import datetime
from unittest.mock import patch

import pytest
import pytest_asyncio

from kanban_board.core.exceptions import InvalidReferenceError, NotFoundError, ValidationError
from kanban_board.core.locks import ContainerLocks
from kanban_board.services.board_service import BoardService
from kanban_board.services.card_service import CardService
from kanban_board.services.lifecycle_service import LifecycleService
from kanban_board.services.list_service import ListService
from kanban_board.services.ordering_service import OrderingService


@pytest_asyncio.fixture
async def board(db):
    return await BoardService.create(db, name="Main Board")


@pytest_asyncio.fixture
async def todo(db, board):
    return await ListService.create(db, board_id=board.id, name="Backlog")


@pytest_asyncio.fixture
async def done(db, board):
    return await ListService.create(db, board_id=board.id, name="Done")


async def card_titles(db, list_id, include_archived=False):
    cards = await CardService.get_by_list_id(db, list_id, include_archived=include_archived)
    return [card.title for card in cards]


class TestCreateCard:

    @pytest.mark.asyncio
    async def test_sequential_appends(self, db, todo):
        a = await CardService.create(db, list_id=todo.id, title="Task A")
        b = await CardService.create(db, list_id=todo.id, title="Task B")

        assert a.position == 1.0
        assert b.position == 2.0
        assert a.archived is False

    @pytest.mark.asyncio
    async def test_explicit_position(self, db, todo):
        card = await CardService.create(db, list_id=todo.id, title="Pinned", position=0.5)
        assert card.position == 0.5

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, db, todo):
        with pytest.raises(ValidationError):
            await CardService.create(db, list_id=todo.id, title="  ")

    @pytest.mark.asyncio
    async def test_non_finite_position_rejected(self, db, todo):
        with pytest.raises(ValidationError):
            await CardService.create(db, list_id=todo.id, title="Far", position=float("inf"))
        with pytest.raises(ValidationError):
            await CardService.create(db, list_id=todo.id, title="Lost", position=float("nan"))

        assert await card_titles(db, todo.id) == []

    @pytest.mark.asyncio
    async def test_missing_list(self, db):
        with pytest.raises(NotFoundError):
            await CardService.create(db, list_id=999, title="Lost")

    @pytest.mark.asyncio
    async def test_concurrent_appends_get_distinct_positions(self, session_factory, todo):
        async def append(title):
            async with session_factory() as session:
                card = await CardService.create(session, list_id=todo.id, title=title)
                return card.position

        positions = await asyncio.gather(append("One"), append("Two"), append("Three"))

        assert sorted(positions) == [1.0, 2.0, 3.0]


class TestReadAndUpdateCard:

    @pytest.mark.asyncio
    async def test_get_with_relations(self, db, todo):
        card = await CardService.create(db, list_id=todo.id, title="Details")

        fetched = await CardService.get_by_id(db, card.id, load_relations=True)

        assert fetched.title == "Details"
        assert fetched.comments == []
        assert fetched.labels == []

    @pytest.mark.asyncio
    async def test_missing_card(self, db):
        with pytest.raises(NotFoundError):
            await CardService.get_by_id(db, 12345)

    @pytest.mark.asyncio
    async def test_empty_list_has_no_cards(self, db, todo):
        assert await CardService.get_by_list_id(db, todo.id) == []

    @pytest.mark.asyncio
    async def test_update_keeps_position(self, db, todo):
        card = await CardService.create(db, list_id=todo.id, title="Draft")
        due = datetime(2030, 1, 31, 17, 0)

        updated = await CardService.update(
            db, card.id, title="Final", description="Ready", color="#ef4444", due_date=due
        )

        assert updated.title == "Final"
        assert updated.description == "Ready"
        assert updated.color == "#ef4444"
        assert updated.due_date == due
        assert updated.position == card.position

    @pytest.mark.asyncio
    async def test_update_missing_card(self, db):
        with pytest.raises(NotFoundError):
            await CardService.update(db, 404, title="Ghost")


class TestMoveCard:

    @pytest.mark.asyncio
    async def test_move_within_list(self, db, todo):
        a = await CardService.create(db, list_id=todo.id, title="Task A")
        b = await CardService.create(db, list_id=todo.id, title="Task B")

        moved = await OrderingService.move_card(db, a.id, target_list_id=todo.id, position=1.5)
        b = await CardService.get_by_id(db, b.id)

        assert moved.position == 1.5
        assert b.position == 2.0
        assert await card_titles(db, todo.id) == ["Task A", "Task B"]

    @pytest.mark.asyncio
    async def test_move_to_other_list(self, db, todo, done):
        card = await CardService.create(db, list_id=todo.id, title="Ship it")

        moved = await OrderingService.move_card(db, card.id, target_list_id=done.id, position=1.0)

        assert moved.list_id == done.id
        assert moved.position == 1.0
        assert await card_titles(db, todo.id) == []
        assert await card_titles(db, done.id) == ["Ship it"]

    @pytest.mark.asyncio
    async def test_move_to_missing_list_changes_nothing(self, db, todo):
        card = await CardService.create(db, list_id=todo.id, title="Stay")

        with pytest.raises(InvalidReferenceError) as exc_info:
            await OrderingService.move_card(db, card.id, target_list_id=999, position=3.0)

        assert isinstance(exc_info.value, NotFoundError)
        unchanged = await CardService.get_by_id(db, card.id)
        assert unchanged.list_id == todo.id
        assert unchanged.position == 1.0

    @pytest.mark.asyncio
    async def test_move_missing_card(self, db, todo):
        with pytest.raises(NotFoundError) as exc_info:
            await OrderingService.move_card(db, 999, target_list_id=todo.id, position=1.0)

        assert not isinstance(exc_info.value, InvalidReferenceError)

    @pytest.mark.asyncio
    async def test_tie_with_sibling_is_stored_verbatim(self, db, todo):
        await CardService.create(db, list_id=todo.id, title="A", position=1.0)
        await CardService.create(db, list_id=todo.id, title="B", position=2.0)
        c = await CardService.create(db, list_id=todo.id, title="C", position=10.0)

        moved = await OrderingService.move_card(db, c.id, target_list_id=todo.id, position=2.0)

        assert moved.position == 2.0
        cards = await CardService.get_by_list_id(db, todo.id)
        assert [(card.title, card.position) for card in cards] == [("A", 1.0), ("B", 2.0), ("C", 2.0)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("position", [float("inf"), float("-inf"), float("nan")])
    async def test_non_finite_position_rejected(self, db, todo, done, position):
        card = await CardService.create(db, list_id=todo.id, title="A")

        with pytest.raises(ValidationError):
            await OrderingService.move_card(db, card.id, target_list_id=done.id, position=position)

        unchanged = await CardService.get_by_id(db, card.id)
        assert (unchanged.list_id, unchanged.position) == (todo.id, 1.0)

    @pytest.mark.asyncio
    async def test_exhausted_gap_respaces_list(self, db, todo):
        await CardService.create(db, list_id=todo.id, title="A", position=1.0)
        await CardService.create(db, list_id=todo.id, title="B", position=1.0 + 5e-10)
        c = await CardService.create(db, list_id=todo.id, title="C", position=3.0)

        await OrderingService.move_card(db, c.id, target_list_id=todo.id, position=1.0 + 2.5e-10)

        cards = await CardService.get_by_list_id(db, todo.id)
        assert [card.title for card in cards] == ["A", "C", "B"]
        assert [card.position for card in cards] == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_respace_cards_includes_archived(self, db, todo):
        a = await CardService.create(db, list_id=todo.id, title="A", position=0.1)
        await CardService.create(db, list_id=todo.id, title="B", position=0.2)
        await LifecycleService.archive(db, a.id)

        cards = await OrderingService.respace_cards(db, todo.id)

        assert [(card.title, card.position) for card in cards] == [("A", 1.0), ("B", 2.0)]

    @pytest.mark.asyncio
    async def test_respace_skips_card_that_left_the_list(self, db, todo, done):
        stay = await CardService.create(db, list_id=todo.id, title="Stay", position=4.0)
        gone = await CardService.create(db, list_id=done.id, title="Gone", position=5.0)

        # Ids read before "Gone" was moved to another list
        with patch.object(CardService, "get_ordered_ids", return_value=[gone.id, stay.id]):
            await OrderingService.respace_cards(db, todo.id)

        gone = await CardService.get_by_id(db, gone.id)
        assert (gone.list_id, gone.position) == (done.id, 5.0)
        assert (await CardService.get_by_id(db, stay.id)).position == 2.0


class TestQuickCreate:

    @pytest.mark.asyncio
    async def test_defaults_to_main_board_backlog(self, db, board, todo, done):
        card = await CardService.quick_create(db, title="From bot")

        assert card.list_id == todo.id
        assert card.position == 1.0

    @pytest.mark.asyncio
    async def test_named_list(self, db, board, todo, done):
        card = await CardService.quick_create(db, title="Finished", board_name="Main Board", list_name="Done")
        assert card.list_id == done.id

    @pytest.mark.asyncio
    async def test_unknown_names_fall_back_to_first_list(self, db, board, todo, done):
        card = await CardService.quick_create(db, title="Somewhere", board_name="Nope", list_name="Nope")
        assert card.list_id == todo.id

    @pytest.mark.asyncio
    async def test_no_boards(self, db):
        with pytest.raises(NotFoundError):
            await CardService.quick_create(db, title="Nowhere")

    @pytest.mark.asyncio
    async def test_board_without_lists(self, db, board):
        with pytest.raises(NotFoundError):
            await CardService.quick_create(db, title="Nowhere")


class TestContainerLocks:

    @pytest.mark.asyncio
    async def test_lock_is_dropped_when_idle(self):
        locks = ContainerLocks()

        async with locks.hold("list", 1):
            assert locks.is_held("list", 1)
            assert not locks.is_held("list", 2)

        assert not locks.is_held("list", 1)
        assert locks._locks == {}

    @pytest.mark.asyncio
    async def test_same_container_is_serialized(self):
        locks = ContainerLocks()
        events = []

        async def worker(name):
            async with locks.hold("board", 7):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a-in", "a-out", "b-in", "b-out"]
