from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_git_repository
from ..schemas import ApiResponse, CommitRequest, SwitchBranchRequest
from ..services.git_repo import GitCommandError, GitRepository, PendingChangesError
from ..services.path_validator import validate_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/git', tags=['git'])


def _internal(message: str, exc: Exception) -> HTTPException:
    logger.error('%s: %s', message, exc)
    return HTTPException(status_code=500, detail=message)


@router.get('/status')
async def git_status(repo: GitRepository = Depends(get_git_repository)):
    try:
        status = await repo.status()
    except GitCommandError as exc:
        raise _internal('Failed to get git status', exc)
    return ApiResponse(
        ok=True,
        message='Status loaded',
        data={'modified_files': status.modified_files, 'is_clean': status.is_clean},
    )


@router.post('/stage')
async def stage(repo: GitRepository = Depends(get_git_repository)):
    try:
        await repo.add('.')
    except GitCommandError as exc:
        raise _internal('Failed to stage changes', exc)
    return ApiResponse(ok=True, message='Changes staged')


@router.post('/commit')
async def commit(payload: CommitRequest, repo: GitRepository = Depends(get_git_repository)):
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail='Commit message is required')
    try:
        await repo.add('.')
        summary = await repo.commit(payload.message)
    except GitCommandError as exc:
        raise _internal('Failed to commit changes', exc)
    return ApiResponse(ok=True, message='Changes committed', data=summary.to_dict())


@router.post('/revert')
async def revert(repo: GitRepository = Depends(get_git_repository)):
    try:
        await repo.revert_all()
    except GitCommandError as exc:
        raise _internal('Failed to revert changes', exc)
    return ApiResponse(ok=True, message='Changes reverted successfully')


@router.get('/branches')
async def branches(repo: GitRepository = Depends(get_git_repository)):
    try:
        rows = await repo.branches()
    except GitCommandError as exc:
        raise _internal('Failed to get git branches', exc)
    return ApiResponse(
        ok=True,
        message='Branches loaded',
        data=[{'name': row.name, 'is_current': row.is_current} for row in rows],
    )


@router.post('/switch-branch')
async def switch_branch(payload: SwitchBranchRequest, repo: GitRepository = Depends(get_git_repository)):
    branch = payload.branch_name.strip()
    if not branch:
        raise HTTPException(status_code=400, detail='Branch name is required')
    if branch.startswith('-'):
        raise HTTPException(status_code=400, detail='Invalid branch name')
    try:
        await repo.switch_branch(branch)
    except PendingChangesError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except GitCommandError as exc:
        raise _internal('Failed to switch branch', exc)
    return ApiResponse(ok=True, message=f'Switched to branch {branch}')


@router.get('/history')
async def history(file_path: str = Query(default=''), repo: GitRepository = Depends(get_git_repository)):
    if not file_path:
        raise HTTPException(status_code=400, detail='file_path parameter is required')
    check = validate_path(file_path)
    if not check.is_valid:
        raise HTTPException(status_code=400, detail=check.error)
    try:
        commits = await repo.file_history(file_path)
    except GitCommandError as exc:
        raise _internal('Failed to fetch git history', exc)
    return ApiResponse(ok=True, message='History loaded', data=commits)
