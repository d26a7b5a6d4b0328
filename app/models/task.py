"""Task domain model"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from app.config import MAX_TIMER_SECONDS


class TaskStatus(str, Enum):
    """Task status"""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ARCHIVED = "archived"


class TaskPriority(str, Enum):
    """Task priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"  # set by timer escalation


MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 5000
MAX_TAGS = 20
MAX_TAG_LENGTH = 50


def _check_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return tags
    if len(tags) > MAX_TAGS:
        raise ValueError("Too many tags")
    for tag in tags:
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag too long: {tag[:20]}...")
    return tags


class TaskBase(BaseModel):
    """Base task fields for creation"""
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    status: TaskStatus = TaskStatus.TODO
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    board_id: Optional[str] = None
    section_id: Optional[str] = None
    item_type: Optional[str] = Field(None, max_length=50)
    item_data: Optional[Dict[str, Any]] = None
    is_favorite: bool = False
    # Timer fields (duration is always whole seconds)
    timer_duration_seconds: Optional[int] = Field(None, gt=0, le=MAX_TIMER_SECONDS)
    is_urgent_after_timer: Optional[bool] = False

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _check_tags(tags)


class TaskCreate(TaskBase):
    """Task creation model"""
    user_id: str   # UUID as string
    display_order: int = 0


class TaskUpdate(BaseModel):
    """Task update model - all fields optional"""
    title: Optional[str] = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    board_id: Optional[str] = None
    section_id: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)
    item_type: Optional[str] = Field(None, max_length=50)
    item_data: Optional[Dict[str, Any]] = None
    is_favorite: Optional[bool] = None
    timer_duration_seconds: Optional[int] = Field(None, gt=0, le=MAX_TIMER_SECONDS)
    is_urgent_after_timer: Optional[bool] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _check_tags(tags)


class Task(TaskBase):
    """Complete task model from database"""
    id: str
    user_id: str
    display_order: Optional[int] = None
    timer_started_at: Optional[datetime] = None
    timer_completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
