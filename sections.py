from typing import Optional

from data_processing import decode_chord_row
from models.charts import Line, MoveDirection, Section, SectionType, SongChart, new_id
from models.operations import NotFoundError


class SectionNotFoundError(NotFoundError):
    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(message="Section with ID {} not found".format(section_id))


class LineNotFoundError(NotFoundError):
    def __init__(self, section_id: str, line_index: int):
        self.section_id = section_id
        self.line_index = line_index
        super().__init__(message="Line {} not found in section {}".format(line_index, section_id))


def find_section_index(song: SongChart, section_id: str) -> int:
    for index, section in enumerate(song.sections):
        if section.id == section_id:
            return index
    raise SectionNotFoundError(section_id)

def _replace_sections(song: SongChart, sections) -> SongChart:
    return song.model_copy(update={"sections": tuple(sections)})

def add_section(song: SongChart, type: SectionType = SectionType.verse, label: Optional[str] = None) -> SongChart:
    """Append a new section holding one empty line."""
    section = Section(type=type, label=label, lines=(Line(),))
    return _replace_sections(song, song.sections + (section,))

def update_section(song: SongChart, section_id: str, **changes) -> SongChart:
    """
    Replace the type, label or lines of one section.
    The section keeps its id whatever `changes` contains.
    """
    index = find_section_index(song, section_id)
    current = song.sections[index]
    changes.pop("id", None)
    updated = Section.model_validate({**current.model_dump(), **changes, "id": current.id})
    sections = list(song.sections)
    sections[index] = updated
    return _replace_sections(song, sections)

def delete_section(song: SongChart, section_id: str) -> SongChart:
    index = find_section_index(song, section_id)
    return _replace_sections(song, song.sections[:index] + song.sections[index + 1:])

def copy_section(song: SongChart, section_id: str) -> SongChart:
    """Insert a copy of a section right after it. The copy gets a new id."""
    index = find_section_index(song, section_id)
    copied = song.sections[index].model_copy(update={"id": new_id()})
    sections = list(song.sections)
    sections.insert(index + 1, copied)
    return _replace_sections(song, sections)

def move_section(song: SongChart, section_id: str, direction: MoveDirection) -> SongChart:
    """Swap a section with its neighbour. Moving past either end changes nothing."""
    index = find_section_index(song, section_id)
    target = index - 1 if direction == MoveDirection.up else index + 1
    if target < 0 or target >= len(song.sections):
        return song
    sections = list(song.sections)
    sections[index], sections[target] = sections[target], sections[index]
    return _replace_sections(song, sections)

def set_line_chords(song: SongChart, section_id: str, line_index: int, chord_row: str) -> SongChart:
    """
    Replace the chords of a line with the ones typed in a chord row,
    e.g. "G     C   Am    D".
    """
    index = find_section_index(song, section_id)
    section = song.sections[index]
    if not 0 <= line_index < len(section.lines):
        raise LineNotFoundError(section_id, line_index)
    lines = list(section.lines)
    lines[line_index] = lines[line_index].model_copy(update={"chords": decode_chord_row(chord_row)})
    return update_section(song, section_id, lines=lines)
