from enum import Enum
from typing import Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator


def new_id() -> str:
    return str(uuid4())


class SectionType(str, Enum):
    verse = "verse"
    chorus = "chorus"
    bridge = "bridge"
    pre_chorus = "pre-chorus"
    intro = "intro"
    outro = "outro"
    instrumental = "instrumental"

    @property
    def default_label(self) -> str:
        return SECTION_LABELS[self]

SECTION_LABELS = {
    SectionType.verse: "Verse",
    SectionType.chorus: "Chorus",
    SectionType.bridge: "Bridge",
    SectionType.pre_chorus: "Pre-Chorus",
    SectionType.intro: "Intro",
    SectionType.outro: "Outro",
    SectionType.instrumental: "Instrumental",
}


class MoveDirection(str, Enum):
    up = "up"
    down = "down"


class Chord(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: NonNegativeInt
    # a name is one blank-free token so it fits back into a chord row
    name: str = Field(pattern=r"^\S+$")


class Line(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    chords: Tuple[Chord, ...] = ()
    remarks: Optional[str] = None

    @field_validator("chords")
    def sorted_by_position(cls, chords: Tuple[Chord, ...]):
        positions = [chord.position for chord in chords]
        if len(set(positions)) != len(positions):
            raise ValueError("chords in a line must have distinct positions")
        return tuple(sorted(chords, key=lambda chord: chord.position))

    @property
    def has_remarks(self) -> bool:
        return bool(self.remarks and self.remarks.strip())


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    type: SectionType = SectionType.verse
    label: Optional[str] = None
    lines: Tuple[Line, ...] = ()

    @property
    def display_label(self) -> str:
        if self.label and self.label.strip():
            return self.label
        return self.type.default_label


def check_unique_section_ids(sections):
    ids = [section.id for section in sections]
    duplicates = sorted({id_ for id_ in ids if ids.count(id_) > 1})
    if duplicates:
        raise ValueError(f"section IDs must be unique, repeated: {', '.join(duplicates)}")
    return sections


class SongChart(BaseModel):
    """
    Immutable snapshot of a song with its full section/line/chord tree.
    Every editing and transposition function takes a chart and returns a new one.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    artist: str = ""
    original_key: str = "C"
    current_key: str = "C"
    time_signature: Optional[str] = "4/4"
    folder_id: Optional[str] = None
    sections: Tuple[Section, ...] = ()

    @field_validator("sections")
    def unique_ids(cls, sections: Tuple[Section, ...]):
        return check_unique_section_ids(sections)
