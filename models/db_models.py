from typing import Optional

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship

from models.charts import new_id


class Folder(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    songs: list["Song"] = Relationship(back_populates="folder")


class Song(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    artist: str = ""
    original_key: str = "C"
    current_key: str = "C"
    time_signature: Optional[str] = "4/4"
    folder_id: Optional[str] = Field(default=None, foreign_key="folder.id")
    folder: Optional[Folder] = Relationship(back_populates="songs")
    # nested section/line/chord structure, stored as plain JSON
    sections: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class Playlist(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    song_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
