from sqlmodel import Session

from models.charts import Chord, Line, Section, SectionType, SongChart
from models.db_models import Song


def make_chart(**overrides) -> SongChart:
    """
    Build a small chart with a verse and a chorus.

    Returns
    -------
    `SongChart`
        Chart in C with chords G, C, Am, D and a slash chord C/G.
    """
    data = {
        "id": "song-1",
        "title": "Morning Sunrise",
        "artist": "The Luminaries",
        "original_key": "C",
        "current_key": "C",
        "sections": (
            Section(
                id="verse-1",
                type=SectionType.verse,
                lines=(
                    Line(
                        text="Sunshine in the morning light",
                        chords=(Chord(position=0, name="G"), Chord(position=9, name="C/G")),
                    ),
                    Line(text="Dancing through the night", chords=(Chord(position=0, name="Am7"),), remarks="softly"),
                ),
            ),
            Section(
                id="chorus-1",
                type=SectionType.chorus,
                label="Big Chorus",
                lines=(Line(text="Hearts beat as one", chords=(Chord(position=7, name="D"),)),),
            ),
        ),
    }
    data.update(overrides)
    return SongChart(**data)


def populate_test_db(session: Session, num_songs: int = 1) -> list[Song]:
    """
    Populate the test database with mock songs, sections, lines, and chords.

    Parameters
    ----------
    `session` : `Session`
        Active SQLModel session to write data to.

    `num_songs` : `int`
        Number of songs to generate (default is 1).

    Returns
    -------
    `list[Song]`
        List of created `Song` objects.
    """
    songs = []

    titles_pool = [
        "Morning Sunrise",
        "Night Dance",
        "Whispered Calls",
        "Mountain Echoes",
        "Endless Rivers",
    ]

    artists_pool = [
        "The Luminaries",
        "Midnight Wanderers",
        "Echoes of Silence",
        "The Mountain Folk",
        "River Flow",
    ]

    lyrics_pool = [
        "Sunshine in the morning",
        "Dancing through the night",
        "Whispering winds call my name",
        "Mountains echo your voice",
        "Rivers flow endlessly",
        "Stars light the dark sky",
    ]

    chord_names = ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]
    section_types = [SectionType.verse, SectionType.chorus]

    for i in range(num_songs):
        sections = []
        for j, section_type in enumerate(section_types):  # 2 sections per song
            lines = []
            for k in range(2):  # 2 lines per section
                line_text = lyrics_pool[(i * 4 + j * 2 + k) % len(lyrics_pool)]
                chords = [
                    Chord(position=m * 6, name=chord_names[(i * 8 + j * 4 + k * 2 + m) % len(chord_names)])
                    for m in range(2)  # 2 chords per line
                ]
                lines.append(Line(text=line_text, chords=tuple(chords)))
            sections.append(Section(type=section_type, lines=tuple(lines)))

        song = Song(
            title=titles_pool[i % len(titles_pool)],
            artist=artists_pool[i % len(artists_pool)],
            original_key="C",
            current_key="C",
            sections=[section.model_dump(mode="json") for section in sections],
        )
        session.add(song)
        songs.append(song)

    session.commit()
    for song in songs:
        session.refresh(song)

    return songs
