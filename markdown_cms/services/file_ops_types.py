from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Literal, Optional, TypeVar

T = TypeVar('T')

NodeType = Literal['file', 'directory']


def iso_timestamp(epoch_seconds: float) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. ``2024-01-31T12:00:00.000Z``."""
    moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


@dataclass(frozen=True)
class FileOperationResult(Generic[T]):
    """Envelope returned by every file operation.

    ``data`` is only populated on success and ``error`` only on failure.
    ``status_code`` follows HTTP semantics (200, 400, 404, 500).
    """

    success: bool
    status_code: int
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> FileOperationResult[T]:
        return cls(success=True, status_code=200, data=data)

    @classmethod
    def fail(cls, error: str, status_code: int) -> FileOperationResult[T]:
        return cls(success=False, status_code=status_code, error=error)


@dataclass(frozen=True)
class FileContent:
    path: str
    content: str
    last_modified: str

    def to_dict(self) -> dict[str, Any]:
        return {'path': self.path, 'content': self.content, 'last_modified': self.last_modified}


@dataclass(frozen=True)
class ExistenceInfo:
    exists: bool
    is_directory: bool

    def to_dict(self) -> dict[str, Any]:
        return {'exists': self.exists, 'is_directory': self.is_directory}


@dataclass(frozen=True)
class ModifiedTime:
    """Outcome of stat-ing one tree entry: a timestamp or the reason there is none."""

    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


@dataclass
class FileNode:
    name: str
    path: str
    type: NodeType
    modified: ModifiedTime = field(default_factory=ModifiedTime)
    children: Optional[list[FileNode]] = None

    @property
    def is_directory(self) -> bool:
        return self.type == 'directory'

    @property
    def last_modified(self) -> Optional[str]:
        return self.modified.value if self.modified.ok else None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {'name': self.name, 'path': self.path, 'type': self.type}
        if self.children is not None:
            out['children'] = [child.to_dict() for child in self.children]
        if self.last_modified is not None:
            out['last_modified'] = self.last_modified
        return out


@dataclass(frozen=True)
class DirectoryContents:
    current_path: str
    items: list[FileNode]
    has_parent: bool
    parent_path: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            'current_path': self.current_path,
            'items': [item.to_dict() for item in self.items],
            'has_parent': self.has_parent,
            'parent_path': self.parent_path,
        }
