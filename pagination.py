from typing import List, Optional

from settings import Settings, get_settings


def choose_columns(viewport_width: int, settings: Optional[Settings] = None) -> int:
    """Two columns on wide viewports, one otherwise."""
    settings = settings or get_settings()
    return 2 if viewport_width >= settings.TWO_COLUMN_BREAKPOINT else 1

def sections_per_page(viewport_height: int, columns: int, settings: Optional[Settings] = None) -> int:
    """
    Estimate how many sections fit on one page.
    The estimate is generous per section so pages are rather under-filled than clipped.
    """
    settings = settings or get_settings()
    avg_section_height = settings.SECTION_HEIGHT_TWO_COLUMNS if columns == 2 else settings.SECTION_HEIGHT_ONE_COLUMN
    available_height = viewport_height - settings.PAGE_CHROME_HEIGHT
    base = available_height // avg_section_height
    return max(settings.MIN_SECTIONS_PER_PAGE, min(base, settings.MAX_SECTIONS_PER_PAGE))

def plan_pages(
        section_count: int,
        viewport_height: int,
        columns: int,
        settings: Optional[Settings] = None
) -> List[List[int]]:
    """
    Split section indices into consecutive pages for read mode.
    :param section_count: number of sections in the song
    :param viewport_height: available height in pixels
    :param columns: 1 or 2
    :param settings: Settings object [optional]
    :return: list of pages, each a list of section indices; never empty
    """
    if section_count <= 0:
        return [[]]
    per_page = sections_per_page(viewport_height, columns, settings)
    return [
        list(range(start, min(start + per_page, section_count)))
        for start in range(0, section_count, per_page)
    ]

def clamp_page(page: int, page_count: int) -> int:
    return max(1, min(page, max(page_count, 1)))

def next_page(page: int, page_count: int) -> int:
    return clamp_page(page + 1, page_count)

def previous_page(page: int, page_count: int) -> int:
    return clamp_page(page - 1, page_count)

def page_sections(pages: List[List[int]], page: int) -> List[int]:
    """Section indices shown on a 1-based page, empty if the page does not exist."""
    if 1 <= page <= len(pages):
        return pages[page - 1]
    return []
