from typing import List, Literal, Optional

from pydantic import PrivateAttr, computed_field, BaseModel, field_validator
from sqlmodel import SQLModel

from chords import KEYS
from data_processing import convert_sections_into_formatted_lyrics
from models.charts import Line, MoveDirection, Section, SectionType, check_unique_section_ids
from pagination import plan_pages


def _known_key(value: Optional[str], info):
    if value is not None and value not in KEYS:
        raise ValueError(f"`{info.field_name}` must be one of {', '.join(KEYS)}, got '{value}'")
    return value


class FolderRead(SQLModel):
    id: str
    name: str


class FolderCreate(BaseModel):
    name: str

    @field_validator("name")
    def not_blank(cls, value: str, info):
        if not value.strip():
            raise ValueError(f"`{info.field_name}` must not be empty or blank")
        return value


class FolderUpdate(BaseModel):
    name: Optional[str] = None


class PlaylistRead(SQLModel):
    id: str
    name: str
    song_ids: List[str] = []


class PlaylistCreate(BaseModel):
    name: str
    song_ids: List[str] = []

    @field_validator("name")
    def not_blank(cls, value: str, info):
        if not value.strip():
            raise ValueError(f"`{info.field_name}` must not be empty or blank")
        return value


class PlaylistUpdate(BaseModel):
    name: Optional[str] = None
    song_ids: Optional[List[str]] = None


class PlaylistSongAdd(BaseModel):
    song_id: str


class SongRead(SQLModel):
    id: str
    title: str
    artist: str
    original_key: str
    current_key: str
    time_signature: Optional[str] = None
    folder_id: Optional[str] = None
    sections: List[Section] = []


class SongReadForDisplay(SQLModel):
    id: str
    title: str
    artist: str
    original_key: str
    current_key: str
    time_signature: Optional[str] = None
    folder_id: Optional[str] = None

    # Hide this from API schema and response
    _sections: List[Section] = PrivateAttr(default_factory=list)

    @computed_field
    def lyrics(self) -> str:
        return convert_sections_into_formatted_lyrics(self._sections)


class SongCreate(BaseModel):
    title: str
    artist: str = ""
    original_key: str = "C"
    current_key: Optional[str] = None
    time_signature: Optional[str] = "4/4"
    folder_id: Optional[str] = None
    sections: List[Section] = []

    @field_validator("title")
    def not_blank(cls, value: str, info):
        if not value.strip():
            raise ValueError(f"`{info.field_name}` must not be empty or blank")
        return value

    @field_validator("original_key", "current_key")
    def known_key(cls, value: Optional[str], info):
        return _known_key(value, info)

    @field_validator("sections")
    def unique_section_ids(cls, sections: Optional[List[Section]]):
        return sections if sections is None else check_unique_section_ids(sections)


class SongUpdate(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    original_key: Optional[str] = None
    current_key: Optional[str] = None
    time_signature: Optional[str] = None
    folder_id: Optional[str] = None
    sections: Optional[List[Section]] = None

    @field_validator("original_key", "current_key")
    def known_key(cls, value: Optional[str], info):
        return _known_key(value, info)

    @field_validator("sections")
    def unique_section_ids(cls, sections: Optional[List[Section]]):
        return sections if sections is None else check_unique_section_ids(sections)


class SongIdsRequest(BaseModel):
    song_ids: Optional[List[str]]


class TransposeRequest(BaseModel):
    semitones: int
    prefer_flats: bool = False


class NotationRequest(BaseModel):
    prefer_flats: bool


class OriginalKeyRequest(BaseModel):
    original_key: str
    prefer_flats: bool = False

    @field_validator("original_key")
    def known_key(cls, value: str, info):
        return _known_key(value, info)


class SectionCreate(BaseModel):
    type: SectionType = SectionType.verse
    label: Optional[str] = None


class SectionUpdate(BaseModel):
    type: Optional[SectionType] = None
    label: Optional[str] = None
    lines: Optional[List[Line]] = None


class SectionMove(BaseModel):
    direction: MoveDirection


class ChordRowUpdate(BaseModel):
    chord_row: str


class PagesRead(BaseModel):
    columns: Literal[1, 2]
    pages: List[List[int]]

    @classmethod
    def plan(cls, section_count: int, viewport_height: int, columns: int) -> "PagesRead":
        return cls(columns=columns, pages=plan_pages(section_count, viewport_height, columns))

    @computed_field
    def page_count(self) -> int:
        return len(self.pages)
