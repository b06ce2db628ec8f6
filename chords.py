import re
from typing import NamedTuple, Optional

NOTES_SHARP = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# every spelling accepted as a key, in the order a key picker lists them
KEYS = ["C", "C#", "Db", "D", "D#", "Eb", "E", "F", "F#", "Gb", "G", "G#", "Ab", "A", "A#", "Bb", "B"]

ROOT_PATTERN = r"[A-G][#b]?"
CHORD_NAME_REGEX = re.compile(rf"^({ROOT_PATTERN})(.*)$", re.DOTALL)
SLASH_BASS_REGEX = re.compile(rf"^(.*)/({ROOT_PATTERN})$", re.DOTALL)


class ParsedChord(NamedTuple):
    root: str
    suffix: str


def parse_chord_name(chord: str) -> Optional[ParsedChord]:
    """
    Split a chord name into its root note and the rest of the name.
    :param chord: chord name, e.g. "F#m7" or "Bb/D"
    :return: ParsedChord(root, suffix) or None if the name does not start with a root note
    """
    match = CHORD_NAME_REGEX.match(chord)
    if not match:
        return None
    return ParsedChord(root=match.group(1), suffix=match.group(2))

def transpose_note(note: str, semitones: int, prefer_flats: bool) -> str:
    """
    Move a note by a number of semitones and spell the result with sharps or flats.
    Unknown notes are returned unchanged.
    :param note: note name, e.g. "C#" or "Db"
    :param semitones: shift, may be negative
    :param prefer_flats: spell the result with flats instead of sharps
    :return: transposed note name
    """
    notes = NOTES_FLAT if prefer_flats else NOTES_SHARP
    alt_notes = NOTES_SHARP if prefer_flats else NOTES_FLAT
    if note in notes:
        index = notes.index(note)
    elif note in alt_notes:
        index = alt_notes.index(note)
    else:
        return note
    return notes[(index + semitones) % 12]

def transpose_chord_name(chord: str, semitones: int, prefer_flats: bool) -> str:
    """
    Transpose the root (and slash bass, if any) of a chord name.
    The chord quality is kept verbatim: "Am7/G" +2 -> "Bm7/A".
    Names without a recognizable root are returned unchanged.
    """
    parsed = parse_chord_name(chord)
    if parsed is None:
        return chord

    new_root = transpose_note(parsed.root, semitones, prefer_flats)

    slash_match = SLASH_BASS_REGEX.match(parsed.suffix)
    if slash_match:
        bass_part, bass_note = slash_match.groups()
        new_bass = transpose_note(bass_note, semitones, prefer_flats)
        return f"{new_root}{bass_part}/{new_bass}"

    return f"{new_root}{parsed.suffix}"

def key_distance(from_key: str, to_key: str) -> int:
    """
    Upward semitone distance between two keys, always in [0, 11].
    Returns 0 when either key is not a note name.
    """
    if from_key in NOTES_SHARP and to_key in NOTES_SHARP:
        return (NOTES_SHARP.index(to_key) - NOTES_SHARP.index(from_key) + 12) % 12
    if from_key in NOTES_FLAT and to_key in NOTES_FLAT:
        return (NOTES_FLAT.index(to_key) - NOTES_FLAT.index(from_key) + 12) % 12
    return 0
