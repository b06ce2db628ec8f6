import logging

from chords import key_distance, transpose_chord_name, transpose_note
from models.charts import Line, Section, SongChart

logger = logging.getLogger(__name__)


def transpose_line(line: Line, semitones: int, prefer_flats: bool) -> Line:
    chords = tuple(
        chord.model_copy(update={"name": transpose_chord_name(chord.name, semitones, prefer_flats)})
        for chord in line.chords
    )
    return line.model_copy(update={"chords": chords})

def transpose_section(section: Section, semitones: int, prefer_flats: bool) -> Section:
    lines = tuple(transpose_line(line, semitones, prefer_flats) for line in section.lines)
    return section.model_copy(update={"lines": lines})

def transpose_song(song: SongChart, semitones: int, prefer_flats: bool) -> SongChart:
    """
    Transpose every chord of a song and its current key.
    Chord positions and section ids are left as they are.
    :param song: SongChart object
    :param semitones: shift, may be negative
    :param prefer_flats: spell accidentals with flats instead of sharps
    :return: new SongChart object
    """
    logger.debug("Transposing song %s by %d semitones (flats=%s)", song.id, semitones, prefer_flats)
    return song.model_copy(update={
        "current_key": transpose_note(song.current_key, semitones, prefer_flats),
        "sections": tuple(transpose_section(section, semitones, prefer_flats) for section in song.sections),
    })

def convert_notation(song: SongChart, prefer_flats: bool) -> SongChart:
    """Re-spell chords and current key with sharps or flats without changing pitch."""
    return transpose_song(song, 0, prefer_flats)

def change_original_key(song: SongChart, new_original_key: str, prefer_flats: bool) -> SongChart:
    """
    Correct the key a chart was written in.
    Chords and current key move by the same interval, so the transposition
    between original and current key is kept.
    """
    distance = key_distance(song.original_key, new_original_key)
    transposed = transpose_song(song, distance, prefer_flats)
    return transposed.model_copy(update={"original_key": new_original_key})
