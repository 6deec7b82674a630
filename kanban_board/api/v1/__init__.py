from fastapi import APIRouter
from kanban_board.api.v1.boards import router as boards_router
from kanban_board.api.v1.lists import router as lists_router
from kanban_board.api.v1.cards import router as cards_router, search_router
from kanban_board.api.v1.comments import router as comments_router
from kanban_board.api.v1.labels import router as labels_router, card_labels_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")


@api_router.get("/health", tags=["health"])
async def health():
    """Liveness check"""
    return {"status": "healthy"}


# Include routers
api_router.include_router(boards_router)
api_router.include_router(lists_router)
api_router.include_router(cards_router)
api_router.include_router(search_router)
api_router.include_router(comments_router)
api_router.include_router(labels_router)
api_router.include_router(card_labels_router)
