import pytest
from pydantic import ValidationError

from models.charts import Section, SectionType
from models.operations import (
    NotFoundError, SongDisplayMode, DISPLAY_MODES, apply_chart, db_add_song_to_playlist, db_create_folder,
    db_create_playlist, db_create_song, db_delete_folder, db_delete_playlist, db_delete_song,
    db_find_all_songs, db_find_song, db_find_songs_by_id, db_get_folder, db_get_playlist, db_get_song,
    db_read_song, db_remove_song_from_playlist, db_update_chart, db_update_folder, db_update_playlist,
    db_update_song, song_to_chart
)
from models.schemas import (
    FolderCreate, FolderUpdate, PlaylistCreate, PlaylistUpdate, SongCreate, SongIdsRequest, SongUpdate
)
from transposition import transpose_song
from tests.utils import populate_test_db


def test_db_find_song(test_session):
    songs = populate_test_db(test_session, num_songs=3)

    song = db_find_song(song_id=songs[0].id, session=test_session)
    assert song.title == songs[0].title
    assert song.artist == songs[0].artist
    assert len(song.sections) == len(songs[0].sections)

def test_db_find_song_not_found(test_session):
    with pytest.raises(NotFoundError) as exc_info:
        db_find_song(song_id="999", session=test_session)
    assert exc_info.value.message == "Song with ID 999 not found"

def test_db_get_song_absent(test_session):
    assert db_get_song("999", test_session) is None

def test_db_find_songs_by_id_partially_found(test_session):
    songs = populate_test_db(test_session, num_songs=2)
    found = db_find_songs_by_id(SongIdsRequest(song_ids=[songs[0].id, "999"]), test_session)
    assert [song.id for song in found] == [songs[0].id]

def test_db_find_songs_by_id_not_found(test_session):
    with pytest.raises(NotFoundError) as exc_info:
        db_find_songs_by_id(SongIdsRequest(song_ids=["666", "999"]), test_session)
    assert exc_info.value.message == "Songs with such IDs were not found"

def test_db_find_all_songs(test_session):
    songs = populate_test_db(test_session, num_songs=3)
    found = db_find_all_songs(session=test_session)
    assert sorted(song.id for song in found) == sorted(song.id for song in songs)

@pytest.mark.parametrize(
    "display",
    [SongDisplayMode.full, SongDisplayMode.for_display],
    ids=["full", "for_display"]
)
def test_db_read_song(display: SongDisplayMode, test_session):
    songs = populate_test_db(test_session, num_songs=1)
    song = db_read_song(song_id=songs[0].id, session=test_session, display=display)
    assert song.id == songs[0].id
    assert isinstance(song, DISPLAY_MODES[display])
    if display == SongDisplayMode.full:
        assert len(song.sections) == 2
        assert song.sections[0].lines[0].chords[1].position == 6
    else:
        assert song.lyrics.startswith("[Verse]\nC     Dm\nSunshine in the morning\n")
        assert "[Chorus]\nG     Am\n" in song.lyrics

def test_song_to_chart_and_back(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    chart = song_to_chart(songs[0])
    assert chart.id == songs[0].id
    assert chart.sections[1].type == SectionType.chorus

    apply_chart(songs[0], transpose_song(chart, 2, False))
    assert songs[0].current_key == "D"
    assert songs[0].sections[0]["lines"][0]["chords"][0] == {"position": 0, "name": "D"}
    assert songs[0].sections[0]["id"] == chart.sections[0].id

def test_db_create_song(test_session):
    song_in = SongCreate(
        title="Song Title",
        artist="Some Band",
        original_key="G",
        sections=[Section(type=SectionType.intro, lines=[{"text": "", "chords": [{"position": 0, "name": "G"}]}])],
    )
    song = db_create_song(song_in, test_session)
    created_song = db_find_song(song_id=song.id, session=test_session)
    assert created_song.title == "Song Title"
    assert created_song.original_key == "G"
    assert created_song.current_key == "G"
    assert created_song.time_signature == "4/4"
    assert created_song.sections[0]["type"] == "intro"

def test_db_create_song_in_missing_folder(test_session):
    with pytest.raises(NotFoundError) as exc_info:
        db_create_song(SongCreate(title="Song", folder_id="999"), test_session)
    assert exc_info.value.message == "Folder with ID 999 not found"

def test_song_create_validation():
    with pytest.raises(ValidationError) as exc_info:
        SongCreate(title=" ", original_key="H")

    errors = exc_info.value.errors()
    assert len(errors) == 2
    assert {e["loc"] for e in errors} == {("title",), ("original_key",)}

def test_db_update_song_merges_fields(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    sections_before = songs[0].sections

    song = db_update_song(songs[0].id, SongUpdate(title="New title", time_signature="3/4"), test_session)

    assert song.title == "New title"
    assert song.time_signature == "3/4"
    assert song.artist == "The Luminaries"
    assert song.sections == sections_before

def test_db_update_song_not_found(test_session):
    assert db_update_song("999", SongUpdate(title="New title"), test_session) is None

def test_db_update_chart(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    song = db_update_chart(songs[0].id, lambda chart: transpose_song(chart, -1, True), test_session)
    assert song.current_key == "B"
    assert song_to_chart(db_find_song(songs[0].id, test_session)).sections[0].lines[0].chords[1].name == "Dbm"

def test_db_delete_song_cleans_playlists(test_session):
    songs = populate_test_db(test_session, num_songs=2)
    playlist = db_create_playlist(PlaylistCreate(name="Sunday", song_ids=[songs[0].id, songs[1].id]), test_session)

    assert db_delete_song(songs[0].id, test_session) is True

    assert db_get_song(songs[0].id, test_session) is None
    assert db_get_playlist(playlist.id, test_session).song_ids == [songs[1].id]

def test_db_delete_song_not_found(test_session):
    assert db_delete_song("999", test_session) is False

def test_db_delete_folder_keeps_songs(test_session):
    folder = db_create_folder(FolderCreate(name="Worship"), test_session)
    song = db_create_song(SongCreate(title="Song", folder_id=folder.id), test_session)

    assert db_delete_folder(folder.id, test_session) is True

    assert db_get_folder(folder.id, test_session) is None
    kept = db_find_song(song.id, test_session)
    assert kept.folder_id is None

def test_db_update_folder(test_session):
    folder = db_create_folder(FolderCreate(name="Worship"), test_session)
    assert db_update_folder(folder.id, FolderUpdate(name="Gigs"), test_session).name == "Gigs"
    assert db_update_folder("999", FolderUpdate(name="Gigs"), test_session) is None
    assert db_delete_folder("999", test_session) is False

def test_db_add_song_to_playlist_is_idempotent(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    playlist = db_create_playlist(PlaylistCreate(name="Sunday"), test_session)

    db_add_song_to_playlist(playlist.id, songs[0].id, test_session)
    playlist = db_add_song_to_playlist(playlist.id, songs[0].id, test_session)

    assert playlist.song_ids == [songs[0].id]

def test_db_remove_song_from_playlist(test_session):
    songs = populate_test_db(test_session, num_songs=2)
    playlist = db_create_playlist(PlaylistCreate(name="Sunday", song_ids=[songs[0].id, songs[1].id]), test_session)

    playlist = db_remove_song_from_playlist(playlist.id, songs[0].id, test_session)

    assert playlist.song_ids == [songs[1].id]
    assert db_remove_song_from_playlist("999", songs[0].id, test_session) is None

def test_db_playlist_membership_is_a_set(test_session):
    a, b, c = [song.id for song in populate_test_db(test_session, num_songs=3)]
    playlist = db_create_playlist(PlaylistCreate(name="Sunday", song_ids=[a, b, a]), test_session)
    assert playlist.song_ids == [a, b]
    playlist = db_update_playlist(playlist.id, PlaylistUpdate(song_ids=[c, c]), test_session)
    assert playlist.song_ids == [c]
    assert playlist.name == "Sunday"

def test_db_delete_playlist(test_session):
    playlist = db_create_playlist(PlaylistCreate(name="Sunday"), test_session)
    assert db_delete_playlist(playlist.id, test_session) is True
    assert db_delete_playlist(playlist.id, test_session) is False
    assert db_add_song_to_playlist(playlist.id, "a", test_session) is None

def test_db_create_playlist_with_unknown_song(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    with pytest.raises(NotFoundError) as exc_info:
        db_create_playlist(PlaylistCreate(name="Sunday", song_ids=[songs[0].id, "999"]), test_session)
    assert exc_info.value.message == "Song with ID 999 not found"

def test_db_update_playlist_with_unknown_song(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    playlist = db_create_playlist(PlaylistCreate(name="Sunday", song_ids=[songs[0].id]), test_session)
    with pytest.raises(NotFoundError):
        db_update_playlist(playlist.id, PlaylistUpdate(song_ids=["999"]), test_session)
    assert db_get_playlist(playlist.id, test_session).song_ids == [songs[0].id]

def test_db_add_unknown_song_to_playlist(test_session):
    playlist = db_create_playlist(PlaylistCreate(name="Sunday"), test_session)
    with pytest.raises(NotFoundError):
        db_add_song_to_playlist(playlist.id, "999", test_session)

def test_db_update_song_original_key_moves_chords(test_session):
    songs = populate_test_db(test_session, num_songs=1)

    song = db_update_song(songs[0].id, SongUpdate(original_key="D"), test_session)

    assert (song.original_key, song.current_key) == ("D", "D")
    chords = song_to_chart(song).sections[0].lines[0].chords
    assert [chord.name for chord in chords] == ["D", "Em"]

def test_db_update_song_same_original_key_keeps_chords(test_session):
    songs = populate_test_db(test_session, num_songs=1)
    sections_before = songs[0].sections

    song = db_update_song(songs[0].id, SongUpdate(original_key="C", current_key="E"), test_session)

    assert (song.original_key, song.current_key) == ("C", "E")
    assert song.sections == sections_before

def test_song_create_rejects_repeated_section_ids():
    with pytest.raises(ValidationError):
        SongCreate(title="Song", sections=[Section(id="dup"), Section(id="dup")])
    with pytest.raises(ValidationError):
        SongUpdate(sections=[Section(id="dup"), Section(id="dup")])
