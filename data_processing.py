import io
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from fpdf import FPDF

from models.charts import Chord, Line, Section, SongChart


def coerce_chord(entry) -> Optional[Chord]:
    """
    Turn a stored chord entry into a `Chord`, or reject it.
    Accepts `Chord` objects and mappings with a single-token string `name`
    and a non-negative integer `position`.
    :param entry: Chord object or raw mapping from stored data
    :return: Chord object, or None for a malformed entry
    """
    if isinstance(entry, Chord):
        return entry
    if not isinstance(entry, Mapping):
        return None
    name, position = entry.get("name"), entry.get("position")
    if not isinstance(name, str) or name.split() != [name]:
        return None
    if isinstance(position, bool) or not isinstance(position, int) or position < 0:
        return None
    return Chord(position=position, name=name)

def decode_chord_row(row: str) -> tuple[Chord, ...]:
    """
    Parse a typewriter-style chord row into positioned chords.
    Every run of non-blank characters is a chord placed at the column of its first character.
    :param row: chord row, e.g. "G     C   Am    D"
    :return: chords ordered by position
    """
    chords = []
    start = None
    for index, char in enumerate(row):
        if char.isspace():
            if start is not None:
                chords.append(Chord(position=start, name=row[start:index]))
                start = None
        elif start is None:
            start = index
    if start is not None:
        chords.append(Chord(position=start, name=row[start:]))
    return tuple(chords)

def encode_chord_row(chords: Iterable) -> str:
    """
    Render chords into a single row, padding with blanks up to each chord position.
    A chord whose position was already passed by the previous chord's name
    is appended right after it. Malformed entries are skipped.
    :param chords: Chord objects or raw chord mappings
    :return: string of chords with necessary blanks
    """
    valid = [chord for chord in map(coerce_chord, chords) if chord is not None]
    result = ""
    for chord in sorted(valid, key=lambda c: c.position):
        blanks = " " * (chord.position - len(result))
        result += blanks + chord.name
    return result

def convert_line_into_formatted_lyrics(line: Line) -> str:
    """Remarks, chord row and lyric of one line, skipping the empty parts."""
    result = ""
    if line.has_remarks:
        result += line.remarks + "\n"
    chords_line = encode_chord_row(line.chords)
    if chords_line:
        result += chords_line + "\n"
    if line.text or not chords_line:
        result += line.text + "\n"
    return result

def convert_sections_into_formatted_lyrics(sections: Sequence[Section]) -> str:
    """
    Convert structured sections into formatted lyrics with chords rendered above the words.
    Suitable for monospaced font rendering.
    :param sections: list of Section objects
    :return: formatted song lyrics, each section headed by its label in brackets
    """
    blocks = []
    for section in sections:
        block = f"[{section.display_label}]\n"
        for line in section.lines:
            block += convert_line_into_formatted_lyrics(line)
        blocks.append(block)
    return "\n".join(blocks)

def convert_songs_to_pdf(pdf: FPDF, songs: Sequence[SongChart]) -> io.BytesIO:
    """
    Render a list of `SongChart` objects into a structured PDF format using `FPDF`.
    :param pdf: FPDF object
    :param songs: list of SongChart objects
    :return: stream of generated PDF file
    """
    font = pdf.font_family or "Courier"
    for song in songs:
        pdf.add_page()
        # add title
        pdf.set_font(font, size=16, style="B")
        pdf.cell(w=0, h=10, text=song.title, new_x="LMARGIN", new_y="NEXT", align="C")
        # add artist
        pdf.set_font(font, size=12, style="I")
        pdf.cell(w=0, h=10, text=song.artist, new_x="LMARGIN", new_y="NEXT", align="R")
        key_line = f"Key: {song.current_key}"
        if song.current_key != song.original_key:
            key_line += f" (original {song.original_key})"
        if song.time_signature:
            key_line += f"   Time: {song.time_signature}"
        pdf.set_font(font, size=8)
        pdf.cell(w=0, h=6, text=key_line, new_x="LMARGIN", new_y="NEXT")
        # add sections
        cell_height = 3
        for section in song.sections:
            if pdf.get_y() + 3 * cell_height > pdf.h - pdf.b_margin:
                pdf.add_page()
            pdf.set_font(font, size=8, style="B")
            pdf.cell(w=0, h=2 * cell_height, text=section.display_label, new_x="LMARGIN", new_y="NEXT")
            pdf.set_font(font, size=8)
            for line in section.lines:
                rows = convert_line_into_formatted_lyrics(line).splitlines()
                if pdf.get_y() + len(rows) * cell_height > pdf.h - pdf.b_margin:
                    pdf.add_page()
                for row in rows:
                    if not row:  # empty line
                        pdf.cell(w=0, h=cell_height, new_x="LMARGIN", new_y="NEXT")
                    else:
                        pdf.cell(w=0, h=cell_height, text=row, new_x="LMARGIN", new_y="NEXT")

    pdf_bytes = io.BytesIO()
    pdf.output(pdf_bytes)
    pdf_bytes.seek(0)

    return pdf_bytes
