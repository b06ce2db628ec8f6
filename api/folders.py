from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session

from db import get_session
from models.operations import (
    NotFoundError, db_create_folder, db_delete_folder, db_find_folder, db_read_folders, db_update_folder
)
from models.schemas import FolderCreate, FolderRead, FolderUpdate

router = APIRouter(tags=["Folders"], prefix="/folders")

@router.get(
    path="/",
    response_model=List[FolderRead],
    summary="Folder list"
)
def read_folders(session: Session = Depends(get_session)):
    return db_read_folders(session)

@router.get(
    path="/{folder_id}",
    response_model=FolderRead,
    summary="Folder details"
)
def read_folder(folder_id: str, session: Session = Depends(get_session)):
    try:
        return db_find_folder(folder_id, session)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Folder not found")

@router.post(
    path="/",
    response_model=FolderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Folder create"
)
def create_folder(payload: FolderCreate, session: Session = Depends(get_session)):
    return db_create_folder(payload, session)

@router.patch(
    path="/{folder_id}",
    response_model=FolderRead,
    summary="Folder update"
)
def update_folder(folder_id: str, payload: FolderUpdate, session: Session = Depends(get_session)):
    folder = db_update_folder(folder_id, payload, session)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder

@router.delete(
    path="/{folder_id}",
    response_model=None,
    summary="Folder delete"
)
def delete_folder(folder_id: str, session: Session = Depends(get_session)):
    """
        Delete a folder by ID.

        Songs of the folder are not deleted, they just no longer belong to any folder.

        Raises
        ------
        `HTTPException` (404)
            If no folder with the specified ID is found.
    """
    if not db_delete_folder(folder_id, session):
        raise HTTPException(status_code=404, detail="Folder not found")
    return Response(status_code=204)
