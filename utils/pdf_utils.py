from pathlib import Path

from fpdf import FPDF

from settings import get_settings

FONT_DIR = Path(__file__).resolve().parent / "fonts"
FONT_FAMILY = "ChartMono"

def create_pdf_base() -> FPDF:
    pdf = FPDF()
    font_path = get_settings().PDF_FONT_PATH
    if font_path:
        # one monospaced TTF serves every style
        for style in ("", "B", "I"):
            pdf.add_font(FONT_FAMILY, style, font_path)
    else:
        pdf.add_font(FONT_FAMILY, "", str(FONT_DIR / "DejaVuSansMono.ttf"))
        pdf.add_font(FONT_FAMILY, "B", str(FONT_DIR / "DejaVuSansMono-Bold.ttf"))
        pdf.add_font(FONT_FAMILY, "I", str(FONT_DIR / "DejaVuSansMono.ttf"))
    pdf.set_font(FONT_FAMILY, size=8)
    return pdf
