"""Domain models for the application"""
from .task import Task, TaskCreate, TaskUpdate, TaskStatus, TaskPriority
from .board import (
    Board, BoardCreate, BoardUpdate, BoardType, TemplateType,
    BoardSection, BoardSectionCreate, BoardSectionUpdate,
)

__all__ = [
    'Task', 'TaskCreate', 'TaskUpdate', 'TaskStatus', 'TaskPriority',
    'Board', 'BoardCreate', 'BoardUpdate', 'BoardType', 'TemplateType',
    'BoardSection', 'BoardSectionCreate', 'BoardSectionUpdate',
]
