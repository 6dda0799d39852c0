from __future__ import annotations

import locale
import logging
import os
import posixpath
from pathlib import Path
from typing import Any, Optional

from .file_ops_types import DirectoryContents, FileNode, FileOperationResult, ModifiedTime, iso_timestamp
from .path_validator import validate_path

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = '.md'


def _visible(entry: os.DirEntry, is_dir: bool) -> bool:
    if entry.name.startswith('.'):
        return False
    # exact, case-sensitive suffix: .MD, .markdown and .mdx are left out
    if not is_dir and not entry.name.endswith(MARKDOWN_SUFFIX):
        return False
    return True


def _modified_time(entry: os.DirEntry) -> ModifiedTime:
    try:
        return ModifiedTime(value=iso_timestamp(entry.stat().st_mtime))
    except OSError as exc:
        logger.warning('Failed to get modification time for %s: %s', entry.path, exc)
        return ModifiedTime(error=str(exc) or exc.__class__.__name__)


def _sort_key(node: FileNode) -> tuple[int, str, str]:
    return (0 if node.is_directory else 1, locale.strxfrm(node.name.casefold()), node.name)


def sort_nodes(nodes: list[FileNode]) -> list[FileNode]:
    """Directories first, then by name within each group."""
    return sorted(nodes, key=_sort_key)


def _scan(directory: str, rel_dir: str, recursive: bool) -> list[FileNode]:
    nodes: list[FileNode] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            is_dir = entry.is_dir()
            if not _visible(entry, is_dir):
                continue

            rel = posixpath.join(rel_dir, entry.name) if rel_dir else entry.name
            node = FileNode(
                name=entry.name,
                path=rel,
                type='directory' if is_dir else 'file',
                modified=_modified_time(entry),
            )
            if is_dir and recursive:
                node.children = _scan(entry.path, rel, recursive=True)
            nodes.append(node)
    return sort_nodes(nodes)


def build_tree(root_dir: str) -> FileOperationResult[dict[str, Any]]:
    try:
        root = Path(root_dir)
        if not root.exists():
            root.mkdir(parents=True, exist_ok=True)
        return FileOperationResult.ok({'files': _scan(str(root), '', recursive=True)})
    except Exception:
        logger.exception('Error reading file tree under %s', root_dir)
        return FileOperationResult.fail('Failed to read file tree', 500)


def _parent_of(directory_path: str) -> Optional[str]:
    if not directory_path:
        return None
    parent = posixpath.dirname(directory_path.rstrip('/'))
    return '' if parent in ('', '.') else parent


def build_directory_contents(root_dir: str, directory_path: str) -> FileOperationResult[DirectoryContents]:
    """One level of the tree, for interactive browsing."""
    directory_path = directory_path or ''
    if directory_path:
        check = validate_path(directory_path)
        if not check.is_valid:
            return FileOperationResult.fail(check.error, 400)

    try:
        target = Path(root_dir) / directory_path
        if not target.exists():
            return FileOperationResult.fail(f'Directory not found: {directory_path}', 404)
        if not target.is_dir():
            return FileOperationResult.fail(f'Path is not a directory: {directory_path}', 400)

        items = _scan(str(target), directory_path.rstrip('/'), recursive=False)
        return FileOperationResult.ok(
            DirectoryContents(
                current_path=directory_path,
                items=items,
                has_parent=directory_path != '',
                parent_path=_parent_of(directory_path),
            )
        )
    except Exception:
        logger.exception('Error reading directory contents of %s', directory_path)
        return FileOperationResult.fail('Failed to read directory contents', 500)
