"""Task board and board section models"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class BoardType(str, Enum):
    """How a board lays out its tasks"""
    KANBAN = "kanban"
    LIST = "list"
    JOB_TRACKER = "job_tracker"


class TemplateType(str, Enum):
    """Specialized template a board renders with"""
    JOB_TRACKER = "job_tracker"
    MARKDOWN = "markdown"
    RECIPE = "recipe"
    KANBAN = "kanban"
    GROCERY = "grocery"
    CUSTOM = "custom"


DEFAULT_BOARD_COLOR = "#9333ea"


def infer_template_type(
    board_type: Optional[BoardType],
    explicit_template_type: Optional[TemplateType] = None,
) -> TemplateType:
    """Explicit template wins; otherwise list boards are markdown and everything else kanban"""
    if explicit_template_type:
        return explicit_template_type
    if board_type == BoardType.JOB_TRACKER:
        return TemplateType.JOB_TRACKER
    return TemplateType.MARKDOWN if board_type == BoardType.LIST else TemplateType.KANBAN


class BoardBase(BaseModel):
    """Base board fields"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(DEFAULT_BOARD_COLOR, max_length=50)
    board_type: BoardType = BoardType.KANBAN
    template_type: Optional[TemplateType] = None
    field_config: Optional[Dict[str, Any]] = None


class BoardCreate(BoardBase):
    """Board creation model"""
    user_id: str
    display_order: int = 0


class BoardUpdate(BaseModel):
    """Board update model - all fields optional"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    template_type: Optional[TemplateType] = None
    field_config: Optional[Dict[str, Any]] = None
    display_order: Optional[int] = Field(None, ge=0)


class Board(BoardBase):
    """Complete board model from database"""
    id: str
    user_id: str
    display_order: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BoardSectionCreate(BaseModel):
    """Board section creation model"""
    board_id: str
    name: str = Field(..., min_length=1, max_length=200)
    display_order: int = 0


class BoardSectionUpdate(BaseModel):
    """Board section update model"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    display_order: Optional[int] = Field(None, ge=0)


class BoardSection(BoardSectionCreate):
    """Complete board section model from database"""
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
