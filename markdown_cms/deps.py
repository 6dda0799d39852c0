from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Query, status

from .config import settings
from .services.file_ops import FileOperations
from .services.git_repo import GitRepository, NotAGitRepository
from .services.repositories import RepositoryNotConfigured, StaticRepositoryResolver, resolver_from_settings

MISSING_REPO_DETAIL = 'Repository ID is required. Please provide a "repo" query parameter.'


def get_resolver() -> StaticRepositoryResolver:
    # re-read on every request so newly exported repositories show up without a restart
    return resolver_from_settings(settings)


def require_repo_id(repo: Optional[str] = Query(default=None)) -> str:
    if not repo:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_REPO_DETAIL)
    return repo


def _resolve_root(repo_id: str, resolver: StaticRepositoryResolver) -> FileOperations:
    try:
        return FileOperations.from_settings(repo_id, settings, resolver)
    except RepositoryNotConfigured:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Invalid repository ID '{repo_id}'.")


def get_file_operations(
    repo_id: str = Depends(require_repo_id),
    resolver: StaticRepositoryResolver = Depends(get_resolver),
) -> FileOperations:
    return _resolve_root(repo_id, resolver)


async def get_git_repository(
    repo_id: str = Depends(require_repo_id),
    resolver: StaticRepositoryResolver = Depends(get_resolver),
) -> GitRepository:
    ops = _resolve_root(repo_id, resolver)
    repo = GitRepository(ops.root_dir, timeout=settings.command_timeout_sec)
    try:
        await repo.ensure_repo()
    except NotAGitRepository:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Not a git repository')
    return repo
