from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..config import Settings
from .file_ops_types import DirectoryContents, ExistenceInfo, FileContent, FileOperationResult
from .file_system_ops import FileSystemOperations
from .repositories import RepositoryNotConfigured, RepositoryResolver
from .tree_builder import build_directory_contents, build_tree


@dataclass(frozen=True)
class RootSelection:
    """Which root a FileOperations instance works on: the mock tree or a repository."""

    use_mock: bool
    mock_root: Optional[str] = None
    repository_id: Optional[str] = None

    @classmethod
    def mock(cls, mock_root: str, repository_id: Optional[str] = None) -> RootSelection:
        return cls(use_mock=True, mock_root=mock_root, repository_id=repository_id)

    @classmethod
    def repository(cls, repository_id: Optional[str]) -> RootSelection:
        return cls(use_mock=False, repository_id=repository_id)


def resolve_root(selection: RootSelection, resolver: Optional[RepositoryResolver] = None) -> str:
    if selection.use_mock:
        if not selection.mock_root:
            raise ValueError('Mock root directory is not set')
        return selection.mock_root

    if not selection.repository_id:
        raise RepositoryNotConfigured(None, [])
    if resolver is None:
        raise ValueError('A repository resolver is required outside mock mode')
    return resolver.resolve(selection.repository_id)


class FileOperations:
    """Entry point used by the route handlers.

    The root is resolved once at construction; an unknown or missing
    repository id raises :class:`RepositoryNotConfigured` here rather than on
    the first operation. Every operation returns a
    :class:`FileOperationResult` and never raises.
    """

    def __init__(self, selection: RootSelection, resolver: Optional[RepositoryResolver] = None):
        self.repository_id = selection.repository_id
        self.root_dir = resolve_root(selection, resolver)
        self._fs = FileSystemOperations(self.root_dir)

    @classmethod
    def from_settings(
        cls,
        repository_id: Optional[str],
        settings: Settings,
        resolver: Optional[RepositoryResolver] = None,
    ) -> FileOperations:
        if settings.use_mock_api:
            return cls(RootSelection.mock(settings.mock_root_dir, repository_id))
        return cls(RootSelection.repository(repository_id), resolver)

    def read_file(self, rel: str) -> FileOperationResult[FileContent]:
        return self._fs.read_file(rel)

    def write_file(self, rel: str, content: Optional[str]) -> FileOperationResult[None]:
        return self._fs.write_file(rel, content)

    def delete_file(self, rel: str) -> FileOperationResult[None]:
        return self._fs.delete_file(rel)

    def exists(self, rel: str) -> FileOperationResult[ExistenceInfo]:
        return self._fs.exists(rel)

    def create_directory(self, rel: str) -> FileOperationResult[None]:
        return self._fs.create_directory(rel)

    def move_file(self, source_rel: str, destination_rel: str) -> FileOperationResult[None]:
        return self._fs.move_file(source_rel, destination_rel)

    def rename_file(self, source_rel: str, new_name: Any) -> FileOperationResult[None]:
        return self._fs.rename_file(source_rel, new_name)

    def get_file_tree(self) -> FileOperationResult[dict[str, Any]]:
        return build_tree(self.root_dir)

    def get_directory_contents(self, rel: str) -> FileOperationResult[DirectoryContents]:
        return build_directory_contents(self.root_dir, rel)
