import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from opencode_logo_font.build_font import build_fonts
from opencode_logo_font.glyphs import load_glyph_data, load_glyph_table


@pytest.fixture(scope="session")
def glyph_data():
    return load_glyph_data()


@pytest.fixture(scope="session")
def glyph_table():
    return load_glyph_table()


@pytest.fixture(scope="session")
def font_dir(tmp_path_factory, glyph_data):
    """Build the three font files once per test session."""
    output_dir = tmp_path_factory.mktemp("fonts")
    build_fonts(glyph_data, output_dir)
    return output_dir


@pytest.fixture(scope="session")
def font_paths(font_dir):
    return {ext: font_dir / f"OpenCodeLogo.{ext}" for ext in ("ttf", "woff", "woff2")}
