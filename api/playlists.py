from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Session

from db import get_session
from models.operations import (
    NotFoundError, db_add_song_to_playlist, db_create_playlist, db_delete_playlist, db_find_playlist,
    db_read_playlists, db_remove_song_from_playlist, db_update_playlist
)
from models.schemas import PlaylistCreate, PlaylistRead, PlaylistSongAdd, PlaylistUpdate

router = APIRouter(tags=["Playlists"], prefix="/playlists")

@router.get(
    path="/",
    response_model=List[PlaylistRead],
    summary="Playlist list"
)
def read_playlists(session: Session = Depends(get_session)):
    return db_read_playlists(session)

@router.get(
    path="/{playlist_id}",
    response_model=PlaylistRead,
    summary="Playlist details"
)
def read_playlist(playlist_id: str, session: Session = Depends(get_session)):
    try:
        return db_find_playlist(playlist_id, session)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Playlist not found")

@router.post(
    path="/",
    response_model=PlaylistRead,
    status_code=status.HTTP_201_CREATED,
    summary="Playlist create"
)
def create_playlist(payload: PlaylistCreate, session: Session = Depends(get_session)):
    """
        Create a playlist. Repeated song IDs are kept once.

        Raises
        ------
        `HTTPException` (404)
            If any of the songs does not exist.
    """
    try:
        return db_create_playlist(payload, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

@router.patch(
    path="/{playlist_id}",
    response_model=PlaylistRead,
    summary="Playlist update"
)
def update_playlist(playlist_id: str, payload: PlaylistUpdate, session: Session = Depends(get_session)):
    try:
        playlist = db_update_playlist(playlist_id, payload, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist

@router.delete(
    path="/{playlist_id}",
    response_model=None,
    summary="Playlist delete"
)
def delete_playlist(playlist_id: str, session: Session = Depends(get_session)):
    """
        Delete a playlist by ID. Its songs are not touched.
    """
    if not db_delete_playlist(playlist_id, session):
        raise HTTPException(status_code=404, detail="Playlist not found")
    return Response(status_code=204)

@router.post(
    path="/{playlist_id}/songs",
    response_model=PlaylistRead,
    summary="Add song to playlist"
)
def add_song(playlist_id: str, payload: PlaylistSongAdd, session: Session = Depends(get_session)):
    """
        Add a song to a playlist.

        A song can be in a playlist only once, adding it again returns the playlist unchanged.

        Raises
        ------
        `HTTPException` (404)
            If the playlist or the song does not exist.
    """
    try:
        playlist = db_add_song_to_playlist(playlist_id, payload.song_id, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist

@router.delete(
    path="/{playlist_id}/songs/{song_id}",
    response_model=PlaylistRead,
    summary="Remove song from playlist"
)
def remove_song(playlist_id: str, song_id: str, session: Session = Depends(get_session)):
    playlist = db_remove_song_from_playlist(playlist_id, song_id, session)
    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist
