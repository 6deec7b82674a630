from kanban_board.db.database import init_db, get_async_session, async_session_factory, engine
