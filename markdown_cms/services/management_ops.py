from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Any

from .file_ops_types import FileOperationResult
from .path_validator import validate_path
from .transaction import TransactionRunner, TransactionStep

logger = logging.getLogger(__name__)


class MoveVerificationError(OSError):
    pass


class ManagementOps:
    """Delete, move and rename under one root directory.

    Move and rename overwrite whatever already sits at the target, the same
    as a plain ``os.replace``.
    """

    def __init__(self, root: str):
        self.root = root

    def full_path(self, rel: str) -> Path:
        return Path(self.root) / rel

    def delete_file(self, rel: str) -> FileOperationResult[None]:
        check = validate_path(rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        try:
            target = self.full_path(rel)
            if not target.exists() and not target.is_symlink():
                return FileOperationResult.fail('File not found', 404)

            if target.is_dir() and not target.is_symlink():
                _force_rmtree(target)
            else:
                target.unlink()
            return FileOperationResult.ok()
        except Exception:
            logger.exception('Error deleting %s', rel)
            return FileOperationResult.fail('Failed to delete file', 500)

    def move_file(self, source_rel: str, destination_rel: str) -> FileOperationResult[None]:
        source_check = validate_path(source_rel)
        if not source_check.is_valid:
            return FileOperationResult.fail(f'Invalid source path: {source_check.error}', 400)

        dest_check = validate_path(destination_rel)
        if not dest_check.is_valid:
            return FileOperationResult.fail(f'Invalid destination path: {dest_check.error}', 400)

        try:
            source = self.full_path(source_rel)
            dest_dir = self.full_path(destination_rel)
            if not source.exists():
                return FileOperationResult.fail('Source file not found', 404)

            target = dest_dir / source.name
            created = _missing_ancestors(dest_dir)

            runner = TransactionRunner()
            runner.add_step(
                TransactionStep(
                    'create-destination',
                    lambda: dest_dir.mkdir(parents=True, exist_ok=True),
                    rollback=lambda: _remove_created_dirs(created),
                )
            )
            runner.add_step(TransactionStep('rename', lambda: os.replace(source, target)))
            runner.add_step(TransactionStep('verify', lambda: _verify_moved(source, target)))
            runner.execute()
            return FileOperationResult.ok()
        except Exception:
            logger.exception('Error moving %s to %s', source_rel, destination_rel)
            return FileOperationResult.fail('Failed to move file', 500)

    def rename_file(self, source_rel: str, new_name: Any) -> FileOperationResult[None]:
        check = validate_path(source_rel)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

        if not new_name or not isinstance(new_name, str) or not new_name.strip():
            return FileOperationResult.fail('New name is required', 400)

        name = new_name.strip()
        name_check = validate_path(name)
        if not name_check.is_valid:
            return FileOperationResult.fail(name_check.error, 400)
        # a bare name only: the entry stays in its own parent directory
        if name == '.' or '/' in name or '\\' in name:
            return FileOperationResult.fail('Invalid file name', 400)

        try:
            source = self.full_path(source_rel)
            if not source.exists():
                return FileOperationResult.fail('Source file not found', 404)

            os.replace(source, source.parent / name)
            return FileOperationResult.ok()
        except Exception:
            logger.exception('Error renaming %s to %r', source_rel, new_name)
            return FileOperationResult.fail('Failed to rename file', 500)


def _force_rmtree(directory: Path) -> None:
    # children removed concurrently are fine, anything else is not
    def _on_exc(func, path, exc):
        if isinstance(exc, FileNotFoundError):
            return
        raise exc

    if sys.version_info >= (3, 12):
        shutil.rmtree(directory, onexc=_on_exc)
    else:
        shutil.rmtree(directory, onerror=lambda func, path, exc_info: _on_exc(func, path, exc_info[1]))


def _missing_ancestors(directory: Path) -> list[Path]:
    """Directories ``mkdir(parents=True)`` would create, deepest first."""
    missing: list[Path] = []
    current = directory
    while not current.exists() and current != current.parent:
        missing.append(current)
        current = current.parent
    return missing


def _remove_created_dirs(created: list[Path]) -> None:
    for directory in created:
        try:
            directory.rmdir()
        except FileNotFoundError:
            continue


def _verify_moved(source: Path, target: Path) -> None:
    if not os.path.lexists(target):
        raise MoveVerificationError(f'{target} missing after rename')
    if os.path.lexists(source) and not os.path.samefile(source, target):
        raise MoveVerificationError(f'{source} still present after rename')
