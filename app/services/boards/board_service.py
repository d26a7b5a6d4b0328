"""
Board Service

Handles business logic for task boards including:
- CRUD operations scoped to the owning user
- Default sections for new boards
- Starter boards for users who have none yet
"""

import logging
from typing import List

from app.infra.supabase.repositories import RepositoryFactory
from app.models.board import (
    Board,
    BoardCreate,
    BoardSection,
    BoardSectionCreate,
    BoardType,
    BoardUpdate,
    TemplateType,
    infer_template_type,
)
from app.services.timer.errors import NotFoundError

logger = logging.getLogger(__name__)


DEFAULT_SECTIONS = ["To Do", "In Progress", "Done"]

STARTER_BOARDS = [
    {
        "name": "Job Applications",
        "description": "Track your job search and application progress",
        "icon": "Briefcase",
        "color": "#3b82f6",
        "board_type": BoardType.JOB_TRACKER,
        "template_type": TemplateType.JOB_TRACKER,
        "field_config": {"starter": True},
    },
    {
        "name": "Recipe Collection",
        "description": "Save and organize your favorite recipes",
        "icon": "ChefHat",
        "color": "#f59e0b",
        "board_type": BoardType.LIST,
        "template_type": TemplateType.RECIPE,
        "field_config": {"starter": True},
    },
]


class BoardService:
    """Service for managing task boards"""

    def __init__(self, repos: RepositoryFactory):
        self.board_repo = repos.boards
        self.section_repo = repos.sections

    async def list_boards(self, user_id: str) -> List[Board]:
        """List a user's boards in display order"""
        return await self.board_repo.find_by_user(user_id)

    async def get_board(self, board_id: str, user_id: str) -> Board:
        """
        Get a board owned by the user.

        Raises:
            NotFoundError: the board does not exist or belongs to someone else
        """
        board = await self.board_repo.find_by_id(board_id)
        if board is None or board.user_id != user_id:
            raise NotFoundError(f"Board {board_id} not found")
        return board

    async def list_sections(self, board_id: str, user_id: str) -> List[BoardSection]:
        await self.get_board(board_id, user_id)
        return await self.section_repo.find_by_board(board_id)

    async def create_board(self, user_id: str, **fields) -> Board:
        """
        Create a board at the end of the user's list, with To Do / In Progress / Done sections.

        Args:
            user_id: Owner of the new board
            **fields: BoardBase fields (name is required)

        Returns:
            The created board
        """
        board_type = fields.get("board_type") or BoardType.KANBAN
        fields["board_type"] = board_type
        fields["template_type"] = infer_template_type(board_type, fields.get("template_type"))
        display_order = await self.board_repo.next_display_order({"user_id": user_id})

        board = await self.board_repo.create(
            BoardCreate(user_id=user_id, display_order=display_order, **fields)
        )

        await self.section_repo.create_many([
            BoardSectionCreate(board_id=board.id, name=name, display_order=index)
            for index, name in enumerate(DEFAULT_SECTIONS)
        ])

        logger.info(f"Created board {board.id} ({board.template_type}) for user {user_id}")
        return board

    async def update_board(self, board_id: str, user_id: str, data: BoardUpdate) -> Board:
        await self.get_board(board_id, user_id)

        board = await self.board_repo.update(board_id, data)
        if board is None:
            raise NotFoundError(f"Board {board_id} not found")

        logger.info(f"Updated board {board_id}")
        return board

    async def delete_board(self, board_id: str, user_id: str) -> bool:
        """Delete a board; its sections and tasks go with it (ON DELETE CASCADE)"""
        await self.get_board(board_id, user_id)

        success = await self.board_repo.delete(board_id)
        if success:
            logger.info(f"Deleted board {board_id}")
        return success

    async def reorder_boards(self, user_id: str, board_ids: List[str]) -> None:
        """Store board_ids' order as the user's board order"""
        owned = {board.id for board in await self.board_repo.find_by_user(user_id)}
        unknown = [board_id for board_id in board_ids if board_id not in owned]
        if unknown:
            raise NotFoundError(f"Boards not found: {', '.join(unknown)}")

        await self.board_repo.reorder(board_ids)

    async def ensure_starter_boards(self, user_id: str) -> List[Board]:
        """
        Give a new user the starter boards.

        Does nothing for users that already have at least one board.

        Returns:
            The boards created by this call (empty when none were needed)
        """
        if await self.board_repo.has_boards(user_id):
            return []

        created: List[Board] = []
        for starter in STARTER_BOARDS:
            created.append(await self.create_board(user_id, **dict(starter)))

        logger.info(f"Created {len(created)} starter boards for user {user_id}")
        return created
