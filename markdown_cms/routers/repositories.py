from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_resolver
from ..schemas import ApiResponse, RepositoryOut
from ..services.repositories import StaticRepositoryResolver

router = APIRouter(prefix='/api/repositories', tags=['repositories'])


@router.get('')
def list_repositories(resolver: StaticRepositoryResolver = Depends(get_resolver)):
    data = [RepositoryOut(**repo.to_dict()) for repo in resolver.repositories]
    return ApiResponse(ok=True, message='Repositories loaded', data=data)
