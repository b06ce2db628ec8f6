from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from data_processing import convert_songs_to_pdf
from db import get_session
from models.operations import (
    NotFoundError, SongDisplayMode, choose_proper_display, db_create_song, db_delete_song,
    db_find_all_songs, db_find_song, db_find_songs_by_id, db_read_song, db_read_songs,
    db_update_chart, db_update_song, song_to_chart
)
from models.schemas import (
    NotationRequest, OriginalKeyRequest, PagesRead, SongCreate, SongIdsRequest, SongRead,
    SongUpdate, TransposeRequest
)
from pagination import choose_columns
from transposition import change_original_key, convert_notation, transpose_song
from utils.pdf_utils import create_pdf_base

router = APIRouter(tags=["Songs"], prefix="/songs")

@router.get(
    path="/",
    response_model=None,
    summary="Song list"
)
def read_songs(
        folder_id: Optional[str] = None,
        display: SongDisplayMode = Query(default=SongDisplayMode.full),
        session: Session = Depends(get_session)
):
    """
        Retrieve all songs.

        Parameters
        ----------
        `folder_id`: `str`, `optional`
            Only return songs of this folder.\n
        `display` : `SongDisplayMode`, `optional`
            `full` returns the section tree, `for_display` returns rendered lyrics.\n
        `session`: `Session`
            Database session dependency.

        Returns
        -------
        `Union[List[SongRead], List[SongReadForDisplay]]`
            List of songs.
    """
    return db_read_songs(session=session, folder_id=folder_id, display=display)

@router.get(
    path="/{song_id}",
    response_model=None,
    summary="Song details"
)
def read_song(
        song_id: str,
        display: SongDisplayMode = Query(default=SongDisplayMode.full),
        session: Session = Depends(get_session)
):
    """
        Retrieve a single song by its ID.

        Parameters
        ----------
        `song_id` : `str`
            Unique identifier of the song to retrieve.\n
        `display` : `SongDisplayMode`, `optional`
            Controls which fields are included in the response.\n
        `session` : `Session`
            Database session dependency.

        Raises
        ------
        `HTTPException`
            If no song with the given ID is found (`404 Not Found`).
    """
    try:
        return db_read_song(song_id, session, display)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")

@router.post(
    path="/",
    response_model=SongRead,
    status_code=status.HTTP_201_CREATED,
    summary="Song create"
)
def create_song(song_in: SongCreate, session: Session = Depends(get_session)):
    """
        Create a new song.

        The current key starts equal to the original key unless it is given.

        Raises
        ------
        `HTTPException` (404)
            If `folder_id` refers to a folder that does not exist.
    """
    try:
        song = db_create_song(song_in, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return choose_proper_display(SongDisplayMode.full, song)

@router.patch(
    path="/{song_id}",
    response_model=SongRead,
    summary="Song update"
)
def update_song(song_id: str, song_data: SongUpdate, session: Session = Depends(get_session)):
    """
        Update an existing song. Only the provided fields are changed.

        Sections, when given, replace the whole section list. A new `original_key`
        moves the chords and the current key with it, like `PUT /{song_id}/original_key`.
    """
    try:
        song = db_update_song(song_id, song_data, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    if song is None:
        raise HTTPException(status_code=404, detail="Song not found")
    return choose_proper_display(SongDisplayMode.full, song)

@router.delete(
    path="/{song_id}",
    response_model=None,
    summary="Song delete"
)
def delete_song(song_id: str, session: Session = Depends(get_session)):
    """
        Delete a song by ID. The song is also removed from every playlist.

        Returns
        -------
        `Response`
            A response with HTTP 204 No Content if deletion was successful.
    """
    if not db_delete_song(song_id, session):
        raise HTTPException(status_code=404, detail="Song not found")
    return Response(status_code=204)

@router.post(
    path="/{song_id}/transpose",
    response_model=SongRead,
    summary="Transpose song"
)
def transpose(song_id: str, request: TransposeRequest, session: Session = Depends(get_session)):
    """
        Move every chord and the current key by `semitones`.

        Chord positions stay where they are. `prefer_flats` picks the spelling of accidentals.
    """
    try:
        song = db_update_chart(
            song_id,
            lambda chart: transpose_song(chart, request.semitones, request.prefer_flats),
            session
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    return choose_proper_display(SongDisplayMode.full, song)

@router.post(
    path="/{song_id}/notation",
    response_model=SongRead,
    summary="Convert sharps/flats"
)
def change_notation(song_id: str, request: NotationRequest, session: Session = Depends(get_session)):
    """
        Re-spell chords and current key with sharps or flats, without changing pitch.
    """
    try:
        song = db_update_chart(song_id, lambda chart: convert_notation(chart, request.prefer_flats), session)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    return choose_proper_display(SongDisplayMode.full, song)

@router.put(
    path="/{song_id}/original_key",
    response_model=SongRead,
    summary="Change original key"
)
def update_original_key(song_id: str, request: OriginalKeyRequest, session: Session = Depends(get_session)):
    """
        Correct the key the song was written in.

        Chords and current key are moved by the distance between the old and the new
        original key, so an existing transposition is kept.
    """
    try:
        song = db_update_chart(
            song_id,
            lambda chart: change_original_key(chart, request.original_key, request.prefer_flats),
            session
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    return choose_proper_display(SongDisplayMode.full, song)

@router.get(
    path="/{song_id}/pages",
    response_model=PagesRead,
    summary="Read-mode pages"
)
def read_pages(
        song_id: str,
        viewport_height: int = Query(ge=0),
        viewport_width: Optional[int] = Query(default=None, ge=0),
        columns: Optional[int] = Query(default=None, ge=1, le=2),
        session: Session = Depends(get_session)
):
    """
        Split the song's sections into read-mode pages for a viewport.

        Parameters
        ----------
        `viewport_height` : `int`
            Height available to the page in pixels.\n
        `viewport_width` : `int`, `optional`
            Used to pick one or two columns when `columns` is not given.\n
        `columns` : `int`, `optional`
            Force one or two columns.

        Returns
        -------
        `PagesRead`
            Section indices per page. A song without sections has one empty page.
    """
    try:
        song = db_find_song(song_id, session)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    if columns is None:
        columns = choose_columns(viewport_width) if viewport_width is not None else 1
    return PagesRead.plan(len(song.sections or []), viewport_height, columns)

@router.post(
    path="/to_pdf",
    response_model=None,
    summary="Export songs to PDF"
)
def export_to_pdf(request: Optional[SongIdsRequest] = None, session: Session = Depends(get_session)):
    """
        Export selected songs to a PDF.

        Parameters
        ----------
        `request` : `SongIdsRequest`, 'optional'
            Object containing list of song IDs. If not provided - returns `all` songs\n
        `session` : `Session`
            Database session.

        Returns
        -------
        `StreamingResponse`
            PDF document with selected songs.
    """
    try:
        songs = db_find_songs_by_id(request, session) if request else db_find_all_songs(session)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")

    pdf = create_pdf_base()
    pdf_bytes = convert_songs_to_pdf(pdf, [song_to_chart(song) for song in songs])

    return StreamingResponse(
        pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "inline; filename=streamed.pdf"}
    )
