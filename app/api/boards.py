from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.errors import service_errors
from app.infra.supabase.client import get_repositories
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.models.board import Board, BoardSection, BoardType, BoardUpdate, TemplateType
from app.services.boards import BoardService

router = APIRouter(prefix="/api/boards", tags=["boards"])


class CreateBoardRequest(BaseModel):
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    board_type: Optional[BoardType] = None
    template_type: Optional[TemplateType] = None
    field_config: Optional[Dict[str, Any]] = None


class ReorderBoardsRequest(BaseModel):
    board_ids: List[str]


class BoardResponse(BaseModel):
    board: Board


class BoardListResponse(BaseModel):
    boards: List[Board]
    count: int


class SectionListResponse(BaseModel):
    sections: List[BoardSection]


class DeleteResponse(BaseModel):
    success: bool
    message: str


@router.get("", response_model=BoardListResponse)
async def list_boards(
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("list boards"):
        boards = await BoardService(repos).list_boards(current_user_id)

    return {"boards": boards, "count": len(boards)}


@router.post("", response_model=BoardResponse)
async def create_board(
    request: CreateBoardRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Create a board with To Do / In Progress / Done sections"""
    with service_errors("create board"):
        board = await BoardService(repos).create_board(
            current_user_id, **request.model_dump(exclude_none=True)
        )

    return {"board": board}


@router.post("/starter", response_model=BoardListResponse)
async def ensure_starter_boards(
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Create the starter boards for a user without boards, then list all boards"""
    with service_errors("create starter boards"):
        service = BoardService(repos)
        await service.ensure_starter_boards(current_user_id)
        boards = await service.list_boards(current_user_id)

    return {"boards": boards, "count": len(boards)}


@router.post("/reorder", response_model=DeleteResponse)
async def reorder_boards(
    request: ReorderBoardsRequest,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("reorder boards"):
        await BoardService(repos).reorder_boards(current_user_id, request.board_ids)

    return {"success": True, "message": "Boards reordered"}


@router.get("/{board_id}", response_model=BoardResponse)
async def get_board(
    board_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("get board"):
        board = await BoardService(repos).get_board(board_id, current_user_id)

    return {"board": board}


@router.get("/{board_id}/sections", response_model=SectionListResponse)
async def list_board_sections(
    board_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("list board sections"):
        sections = await BoardService(repos).list_sections(board_id, current_user_id)

    return {"sections": sections}


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: str,
    request: BoardUpdate,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    with service_errors("update board"):
        board = await BoardService(repos).update_board(board_id, current_user_id, request)

    return {"board": board}


@router.delete("/{board_id}", response_model=DeleteResponse)
async def delete_board(
    board_id: str,
    current_user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Delete a board together with its sections and tasks"""
    with service_errors("delete board"):
        await BoardService(repos).delete_board(board_id, current_user_id)

    return {"success": True, "message": "Board deleted successfully"}
