"""Task board and board section repositories"""
from typing import List

from supabase import Client  # type: ignore

from app.models.board import (
    Board,
    BoardCreate,
    BoardSection,
    BoardSectionCreate,
    BoardSectionUpdate,
    BoardUpdate,
)

from .base import BaseRepository


class BoardRepository(BaseRepository[Board, BoardCreate, BoardUpdate]):
    """Repository for task board operations"""

    def __init__(self, client: Client):
        super().__init__(client, "task_boards", Board)

    async def find_by_user(self, user_id: str) -> List[Board]:
        """Find a user's boards, in display order, newest first among equals"""
        response = (
            self._client.table(self._table_name)
            .select("*")
            .eq("user_id", user_id)
            .order("display_order", desc=False)
            .order("created_at", desc=True)
            .execute()
        )
        return self._to_models(response.data)

    async def has_boards(self, user_id: str) -> bool:
        """Whether the user owns at least one board"""
        response = self._client.table(self._table_name).select("id").eq("user_id", user_id).limit(1).execute()
        return bool(response.data)


class BoardSectionRepository(BaseRepository[BoardSection, BoardSectionCreate, BoardSectionUpdate]):
    """Repository for board sections (kanban columns)"""

    def __init__(self, client: Client):
        super().__init__(client, "task_board_sections", BoardSection)

    async def find_by_board(self, board_id: str) -> List[BoardSection]:
        """Find a board's sections in display order"""
        return await self.find_by_filters({"board_id": board_id}, order_by="display_order")

    async def create_many(self, sections: List[BoardSectionCreate]) -> List[BoardSection]:
        """Insert several sections in one request"""
        if not sections:
            return []
        rows = [section.model_dump(mode='json') for section in sections]
        response = self._client.table(self._table_name).insert(rows).execute()
        return self._to_models(response.data)
