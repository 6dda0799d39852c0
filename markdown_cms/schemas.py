from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class WriteFileRequest(BaseModel):
    path: str
    content: Optional[str] = None


class PathRequest(BaseModel):
    path: str


class MkdirRequest(BaseModel):
    path: str = ''
    name: str = Field(min_length=1, max_length=255)


class MoveFileRequest(BaseModel):
    source_path: str
    destination_path: str
    type: Optional[Literal['file', 'directory']] = None


class RenameFileRequest(BaseModel):
    source_path: str
    new_name: Optional[str] = None
    type: Optional[Literal['file', 'directory']] = None


class CommitRequest(BaseModel):
    message: str = ''


class SwitchBranchRequest(BaseModel):
    branch_name: str = ''


class RepositoryOut(BaseModel):
    id: str
    label: str
    path: str


class ApiResponse(BaseModel):
    ok: bool
    message: str
    data: Optional[Any] = None
