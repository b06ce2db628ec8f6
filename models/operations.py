import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from sqlmodel import Session, select

from models.charts import SongChart
from models.db_models import Song, Folder, Playlist
from models.schemas import (
    SongCreate, SongRead, SongReadForDisplay, SongUpdate, SongIdsRequest,
    FolderCreate, FolderUpdate, PlaylistCreate, PlaylistUpdate
)
from transposition import change_original_key

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class SongDisplayMode(str, Enum):
    full = "full"
    for_display = "for_display"

DISPLAY_MODES = {
    SongDisplayMode.full: SongRead,
    SongDisplayMode.for_display: SongReadForDisplay,
}

NULLABLE_SONG_FIELDS = {"time_signature", "folder_id"}

def song_to_chart(song: Song) -> SongChart:
    """Build an immutable chart snapshot from a stored song."""
    return SongChart.model_validate({
        "id": song.id,
        "title": song.title,
        "artist": song.artist,
        "original_key": song.original_key,
        "current_key": song.current_key,
        "time_signature": song.time_signature,
        "folder_id": song.folder_id,
        "sections": song.sections or [],
    })

def apply_chart(song: Song, chart: SongChart) -> Song:
    """Copy the editable parts of a chart back onto the stored song."""
    song.title = chart.title
    song.artist = chart.artist
    song.original_key = chart.original_key
    song.current_key = chart.current_key
    song.time_signature = chart.time_signature
    song.sections = [section.model_dump(mode="json") for section in chart.sections]
    return song

def choose_proper_display(display: SongDisplayMode, song: Song) -> Union[SongRead, SongReadForDisplay]:
    """
        Returns a song model formatted according to the specified display mode.

        Stored sections are validated through `SongChart` on the way out.
    """
    chart = song_to_chart(song)
    song_out = DISPLAY_MODES[display].model_validate(chart.model_dump())
    if display == SongDisplayMode.for_display:
        song_out._sections = list(chart.sections)  # manually assign hidden data
    return song_out

# Songs

def db_get_song(song_id: str, session: Session) -> Optional[Song]:
    return session.get(Song, song_id)

def db_find_song(song_id: str, session: Session) -> Song:
    """
        Retrieve a single song by ID or raise NotFoundError.
    """
    song = db_get_song(song_id, session)
    if song is None:
        raise NotFoundError(message="Song with ID {} not found".format(song_id))
    return song

def db_find_songs_by_id(request: SongIdsRequest, session: Session) -> List[Song]:
    """
    Retrieve multiple songs by their IDs or raise NotFoundError if none found.
    """
    statement = select(Song).where(Song.id.in_(request.song_ids or []))
    songs = session.exec(statement).all()
    if not songs:
        raise NotFoundError(message="Songs with such IDs were not found")
    return list(songs)

def db_find_all_songs(session: Session, folder_id: Optional[str] = None) -> Sequence[Song]:
    """
    Return all songs from the database, optionally only those of one folder.
    """
    statement = select(Song)
    if folder_id is not None:
        statement = statement.where(Song.folder_id == folder_id)
    return session.exec(statement).all()

def db_read_song(song_id: str, session: Session, display: SongDisplayMode = SongDisplayMode.full):
    song = db_find_song(song_id, session)
    return choose_proper_display(display, song)

def db_read_songs(session: Session, folder_id: Optional[str] = None, display: SongDisplayMode = SongDisplayMode.full):
    return [choose_proper_display(display, song) for song in db_find_all_songs(session, folder_id)]

def _check_folder(folder_id: Optional[str], session: Session) -> None:
    if folder_id is not None and db_get_folder(folder_id, session) is None:
        raise NotFoundError(message="Folder with ID {} not found".format(folder_id))

def db_create_song(song_in: SongCreate, session: Session) -> Song:
    """
    Create a new song. The current key starts equal to the original key
    unless given explicitly.
    """
    _check_folder(song_in.folder_id, session)
    song = Song(
        title=song_in.title,
        artist=song_in.artist,
        original_key=song_in.original_key,
        current_key=song_in.current_key or song_in.original_key,
        time_signature=song_in.time_signature,
        folder_id=song_in.folder_id,
        sections=[section.model_dump(mode="json") for section in song_in.sections],
    )
    session.add(song)
    session.commit()
    session.refresh(song)
    logger.info("Created song %s '%s'", song.id, song.title)
    return song

def db_update_song(song_id: str, song_data: SongUpdate, session: Session) -> Optional[Song]:
    """
    Merge only the provided fields into a song. Returns None if the song does not exist.

    A new `original_key` is applied last through `change_original_key`, so the
    chords and the current key move with it.
    """
    song = db_get_song(song_id, session)
    if song is None:
        return None
    update_data = song_data.model_dump(exclude_unset=True, mode="json")
    if "folder_id" in update_data:
        _check_folder(update_data["folder_id"], session)
    new_original_key = update_data.pop("original_key", None)
    for field, value in update_data.items():
        if value is None and field not in NULLABLE_SONG_FIELDS:
            continue
        setattr(song, field, value)
    if new_original_key is not None and new_original_key != song.original_key:
        apply_chart(song, change_original_key(song_to_chart(song), new_original_key, prefer_flats=False))
        logger.info("Moved song %s to original key %s", song.id, new_original_key)
    session.commit()
    session.refresh(song)
    return song

def db_update_chart(song_id: str, transform: Callable[[SongChart], SongChart], session: Session) -> Song:
    """
    Load a song as a chart, apply `transform` and store the resulting snapshot.
    Raises NotFoundError if the song does not exist.
    """
    song = db_find_song(song_id, session)
    chart = transform(song_to_chart(song))
    apply_chart(song, chart)
    session.commit()
    session.refresh(song)
    return song

def db_delete_song(song_id: str, session: Session) -> bool:
    """
    Delete a song and drop its ID from every playlist.
    """
    song = db_get_song(song_id, session)
    if song is None:
        return False
    for playlist in session.exec(select(Playlist)).all():
        if song_id in playlist.song_ids:
            playlist.song_ids = [id_ for id_ in playlist.song_ids if id_ != song_id]
            session.add(playlist)
    session.delete(song)
    session.commit()
    logger.info("Deleted song %s", song_id)
    return True

# Folders

def db_get_folder(folder_id: str, session: Session) -> Optional[Folder]:
    return session.get(Folder, folder_id)

def db_find_folder(folder_id: str, session: Session) -> Folder:
    """Retrieve a single folder by ID or raise NotFoundError if not found."""
    folder = db_get_folder(folder_id, session)
    if folder is None:
        raise NotFoundError(message="Folder with ID {} not found".format(folder_id))
    return folder

def db_read_folders(session: Session) -> Sequence[Folder]:
    return session.exec(select(Folder)).all()

def db_create_folder(payload: FolderCreate, session: Session) -> Folder:
    """Create and persist a new folder from the given payload."""
    folder = Folder(name=payload.name)
    session.add(folder)
    session.commit()
    session.refresh(folder)
    return folder

def db_update_folder(folder_id: str, payload: FolderUpdate, session: Session) -> Optional[Folder]:
    folder = db_get_folder(folder_id, session)
    if folder is None:
        return None
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(folder, field, value)
    session.commit()
    session.refresh(folder)
    return folder

def db_delete_folder(folder_id: str, session: Session) -> bool:
    """Delete a folder. Its songs are kept and moved out of the folder."""
    folder = db_get_folder(folder_id, session)
    if folder is None:
        return False
    for song in db_find_all_songs(session, folder_id):
        song.folder_id = None
        session.add(song)
    session.delete(folder)
    session.commit()
    logger.info("Deleted folder %s", folder_id)
    return True

# Playlists

def db_get_playlist(playlist_id: str, session: Session) -> Optional[Playlist]:
    return session.get(Playlist, playlist_id)

def db_find_playlist(playlist_id: str, session: Session) -> Playlist:
    """Retrieve a single playlist by ID or raise NotFoundError if not found."""
    playlist = db_get_playlist(playlist_id, session)
    if playlist is None:
        raise NotFoundError(message="Playlist with ID {} not found".format(playlist_id))
    return playlist

def db_read_playlists(session: Session) -> Sequence[Playlist]:
    return session.exec(select(Playlist)).all()

def _check_songs(song_ids: Sequence[str], session: Session) -> None:
    if not song_ids:
        return
    found = set(session.exec(select(Song.id).where(Song.id.in_(song_ids))).all())
    for song_id in song_ids:
        if song_id not in found:
            raise NotFoundError(message="Song with ID {} not found".format(song_id))

def db_create_playlist(payload: PlaylistCreate, session: Session) -> Playlist:
    """Create a playlist. Raises NotFoundError if any song ID is unknown."""
    _check_songs(payload.song_ids, session)
    # keep first occurrence of every song ID
    playlist = Playlist(name=payload.name, song_ids=list(dict.fromkeys(payload.song_ids)))
    session.add(playlist)
    session.commit()
    session.refresh(playlist)
    return playlist

def db_update_playlist(playlist_id: str, payload: PlaylistUpdate, session: Session) -> Optional[Playlist]:
    playlist = db_get_playlist(playlist_id, session)
    if playlist is None:
        return None
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("song_ids") is not None:
        _check_songs(update_data["song_ids"], session)
        update_data["song_ids"] = list(dict.fromkeys(update_data["song_ids"]))
    for field, value in update_data.items():
        if value is not None:
            setattr(playlist, field, value)
    session.commit()
    session.refresh(playlist)
    return playlist

def db_delete_playlist(playlist_id: str, session: Session) -> bool:
    playlist = db_get_playlist(playlist_id, session)
    if playlist is None:
        return False
    session.delete(playlist)
    session.commit()
    return True

def db_add_song_to_playlist(playlist_id: str, song_id: str, session: Session) -> Optional[Playlist]:
    """
    Add a song ID to a playlist. Adding an ID that is already there changes nothing.
    Returns None if the playlist does not exist, raises NotFoundError if the song does not.
    """
    playlist = db_get_playlist(playlist_id, session)
    if playlist is None:
        return None
    _check_songs([song_id], session)
    if song_id not in playlist.song_ids:
        playlist.song_ids = playlist.song_ids + [song_id]
        session.add(playlist)
        session.commit()
        session.refresh(playlist)
    return playlist

def db_remove_song_from_playlist(playlist_id: str, song_id: str, session: Session) -> Optional[Playlist]:
    playlist = db_get_playlist(playlist_id, session)
    if playlist is None:
        return None
    playlist.song_ids = [id_ for id_ in playlist.song_ids if id_ != song_id]
    session.add(playlist)
    session.commit()
    session.refresh(playlist)
    return playlist
