"""Repository factory and exports"""
from supabase import Client
from .tasks import TaskRepository
from .boards import BoardRepository, BoardSectionRepository


class RepositoryFactory:
    """Factory for creating repository instances"""

    def __init__(self, client: Client):
        self._client = client
        self._tasks: TaskRepository = None
        self._boards: BoardRepository = None
        self._sections: BoardSectionRepository = None

    @property
    def tasks(self) -> TaskRepository:
        """Get task repository"""
        if self._tasks is None:
            self._tasks = TaskRepository(self._client)
        return self._tasks

    @property
    def boards(self) -> BoardRepository:
        """Get boards repository"""
        if self._boards is None:
            self._boards = BoardRepository(self._client)
        return self._boards

    @property
    def sections(self) -> BoardSectionRepository:
        """Get board sections repository"""
        if self._sections is None:
            self._sections = BoardSectionRepository(self._client)
        return self._sections


__all__ = [
    'RepositoryFactory',
    'TaskRepository',
    'BoardRepository',
    'BoardSectionRepository',
]
