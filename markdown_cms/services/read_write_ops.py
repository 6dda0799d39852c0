from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .file_ops_types import ExistenceInfo, FileContent, FileOperationResult, iso_timestamp
from .path_validator import validate_path

logger = logging.getLogger(__name__)


class ReadWriteOps:
    """Single-file reads and writes under one root directory."""

    def __init__(self, root: str):
        self.root = root

    def full_path(self, rel: str) -> Path:
        return Path(self.root) / rel

    def read_file(self, rel: str) -> FileOperationResult[FileContent]:
        check = validate_path(rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        try:
            target = self.full_path(rel)
            if not target.exists():
                return FileOperationResult.fail('File not found', 404)

            stat = target.stat()
            if target.is_dir():
                return FileOperationResult.fail('Path is a directory, not a file', 400)

            content = target.read_text(encoding='utf-8')
            return FileOperationResult.ok(
                FileContent(path=rel, content=content, last_modified=iso_timestamp(stat.st_mtime))
            )
        except Exception:
            logger.exception('Error reading file %s', rel)
            return FileOperationResult.fail('Failed to read file', 500)

    def write_file(self, rel: str, content: Optional[str]) -> FileOperationResult[None]:
        check = validate_path(rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        if content is None:
            return FileOperationResult.fail('Content is required', 400)

        try:
            target = self.full_path(rel)
            target.parent.mkdir(parents=True, exist_ok=True)

            if target.is_dir():
                return FileOperationResult.fail('Cannot write to directory', 400)

            with target.open('w', encoding='utf-8', newline='') as handle:
                handle.write(content)
            return FileOperationResult.ok()
        except Exception:
            logger.exception('Error writing file %s', rel)
            return FileOperationResult.fail('Failed to write file', 500)

    def exists(self, rel: str) -> FileOperationResult[ExistenceInfo]:
        check = validate_path(rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        try:
            target = self.full_path(rel)
            if not target.exists():
                return FileOperationResult.ok(ExistenceInfo(exists=False, is_directory=False))
            return FileOperationResult.ok(ExistenceInfo(exists=True, is_directory=target.is_dir()))
        except Exception:
            logger.exception('Error checking existence of %s', rel)
            return FileOperationResult.fail('Failed to check file existence', 500)

    def create_directory(self, rel: str) -> FileOperationResult[None]:
        check = validate_path(rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        try:
            target = self.full_path(rel)
            if target.exists() and not target.is_dir():
                return FileOperationResult.fail('Path exists and is a file', 400)
            target.mkdir(parents=True, exist_ok=True)
            return FileOperationResult.ok()
        except Exception:
            logger.exception('Error creating directory %s', rel)
            return FileOperationResult.fail('Failed to create directory', 500)
