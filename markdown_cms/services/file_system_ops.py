from __future__ import annotations

from typing import Any, Optional

from .file_ops_types import ExistenceInfo, FileContent, FileOperationResult
from .management_ops import ManagementOps
from .read_write_ops import ReadWriteOps


class FileSystemOperations:
    def __init__(self, root: str):
        self._read_write = ReadWriteOps(root)
        self._management = ManagementOps(root)

    def read_file(self, rel: str) -> FileOperationResult[FileContent]:
        return self._read_write.read_file(rel)

    def write_file(self, rel: str, content: Optional[str]) -> FileOperationResult[None]:
        return self._read_write.write_file(rel, content)

    def exists(self, rel: str) -> FileOperationResult[ExistenceInfo]:
        return self._read_write.exists(rel)

    def create_directory(self, rel: str) -> FileOperationResult[None]:
        return self._read_write.create_directory(rel)

    def delete_file(self, rel: str) -> FileOperationResult[None]:
        return self._management.delete_file(rel)

    def move_file(self, source_rel: str, destination_rel: str) -> FileOperationResult[None]:
        return self._management.move_file(source_rel, destination_rel)

    def rename_file(self, source_rel: str, new_name: Any) -> FileOperationResult[None]:
        return self._management.rename_file(source_rel, new_name)
