from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from db import get_session
from models.operations import NotFoundError, SongDisplayMode, choose_proper_display, db_update_chart
from models.schemas import ChordRowUpdate, SectionCreate, SectionMove, SectionUpdate, SongRead
from sections import add_section, copy_section, delete_section, move_section, set_line_chords, update_section

router = APIRouter(tags=["Sections"], prefix="/songs/{song_id}/sections")

def _edit_song(song_id: str, transform, session: Session) -> SongRead:
    try:
        song = db_update_chart(song_id, transform, session)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return choose_proper_display(SongDisplayMode.full, song)

@router.post(
    path="/",
    response_model=SongRead,
    summary="Section add"
)
def create_section(song_id: str, payload: SectionCreate, session: Session = Depends(get_session)):
    """
        Append a new section with one empty line to the end of the song.

        Returns
        -------
        `SongRead`
            The whole song including the new section.
    """
    return _edit_song(song_id, lambda chart: add_section(chart, payload.type, payload.label), session)

@router.patch(
    path="/{section_id}",
    response_model=SongRead,
    summary="Section update"
)
def edit_section(song_id: str, section_id: str, payload: SectionUpdate, session: Session = Depends(get_session)):
    """
        Change the type, label or lines of a section. The section ID never changes.
    """
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("type") is None:
        changes.pop("type", None)
    if "lines" in changes:
        changes["lines"] = payload.lines or []
    return _edit_song(song_id, lambda chart: update_section(chart, section_id, **changes), session)

@router.delete(
    path="/{section_id}",
    response_model=SongRead,
    summary="Section delete"
)
def remove_section(song_id: str, section_id: str, session: Session = Depends(get_session)):
    return _edit_song(song_id, lambda chart: delete_section(chart, section_id), session)

@router.post(
    path="/{section_id}/copy",
    response_model=SongRead,
    summary="Section copy"
)
def duplicate_section(song_id: str, section_id: str, session: Session = Depends(get_session)):
    """
        Insert a copy of the section right after it. The copy gets a new ID.
    """
    return _edit_song(song_id, lambda chart: copy_section(chart, section_id), session)

@router.post(
    path="/{section_id}/move",
    response_model=SongRead,
    summary="Section move"
)
def reorder_section(song_id: str, section_id: str, payload: SectionMove, session: Session = Depends(get_session)):
    """
        Move the section one place `up` or `down`. Moving past either end does nothing.
    """
    return _edit_song(song_id, lambda chart: move_section(chart, section_id, payload.direction), session)

@router.put(
    path="/{section_id}/lines/{line_index}/chords",
    response_model=SongRead,
    summary="Line chords from chord row"
)
def edit_line_chords(
        song_id: str,
        section_id: str,
        line_index: int,
        payload: ChordRowUpdate,
        session: Session = Depends(get_session)
):
    """
        Replace the chords of a line with the ones typed in a chord row.

        Parameters
        ----------
        `payload` : `ChordRowUpdate`
            `chord_row` with chords placed by blanks, e.g. `"G     C   Am    D"`.
    """
    return _edit_song(
        song_id,
        lambda chart: set_line_chords(chart, section_id, line_index, payload.chord_row),
        session
    )
