from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_file_operations
from ..schemas import ApiResponse, MkdirRequest, MoveFileRequest, PathRequest, RenameFileRequest, WriteFileRequest
from ..services.file_ops import FileOperations
from ..services.file_ops_types import FileOperationResult

router = APIRouter(prefix='/api/files', tags=['files'])


def _raise_for(result: FileOperationResult) -> None:
    if not result.success:
        raise HTTPException(status_code=result.status_code, detail=result.error)


def _kind(node_type: str | None) -> str:
    return 'Folder' if node_type == 'directory' else 'File'


@router.get('')
def read_file(path: str = Query(...), ops: FileOperations = Depends(get_file_operations)):
    result = ops.read_file(path)
    _raise_for(result)
    return ApiResponse(ok=True, message='File loaded', data=result.data.to_dict())


@router.post('')
def write_file(payload: WriteFileRequest, ops: FileOperations = Depends(get_file_operations)):
    result = ops.write_file(payload.path, payload.content)
    _raise_for(result)
    return ApiResponse(ok=True, message='File saved')


@router.delete('')
def delete_file(payload: PathRequest, ops: FileOperations = Depends(get_file_operations)):
    result = ops.delete_file(payload.path)
    _raise_for(result)
    return ApiResponse(ok=True, message='Deleted')


@router.get('/exists')
def exists(path: str = Query(...), ops: FileOperations = Depends(get_file_operations)):
    result = ops.exists(path)
    _raise_for(result)
    return ApiResponse(ok=True, message='Checked', data=result.data.to_dict())


@router.post('/mkdir')
def mkdir(payload: MkdirRequest, ops: FileOperations = Depends(get_file_operations)):
    parent = payload.path.strip().rstrip('/')
    folder = f'{parent}/{payload.name}' if parent else payload.name
    result = ops.create_directory(folder)
    _raise_for(result)
    return ApiResponse(ok=True, message='Folder created')


@router.post('/move')
def move(payload: MoveFileRequest, ops: FileOperations = Depends(get_file_operations)):
    if not payload.source_path:
        raise HTTPException(status_code=400, detail='Source path is required')
    if not payload.destination_path:
        raise HTTPException(status_code=400, detail='Destination path is required')

    result = ops.move_file(payload.source_path, payload.destination_path)
    _raise_for(result)
    return ApiResponse(ok=True, message=f'{_kind(payload.type)} moved')


@router.post('/rename')
def rename(payload: RenameFileRequest, ops: FileOperations = Depends(get_file_operations)):
    if not payload.source_path:
        raise HTTPException(status_code=400, detail='Source path is required')

    result = ops.rename_file(payload.source_path, payload.new_name)
    _raise_for(result)
    return ApiResponse(ok=True, message=f'{_kind(payload.type)} renamed')


@router.get('/tree')
def tree(ops: FileOperations = Depends(get_file_operations)):
    result = ops.get_file_tree()
    _raise_for(result)
    return ApiResponse(ok=True, message='Tree loaded', data={'files': [node.to_dict() for node in result.data['files']]})


@router.get('/directory')
def directory(path: str = Query(default=''), ops: FileOperations = Depends(get_file_operations)):
    result = ops.get_directory_contents(path)
    _raise_for(result)
    return ApiResponse(ok=True, message='Directory loaded', data=result.data.to_dict())
