"""Blocky OpenCodeLogo pixel font: glyph table, SVG rendering and font build."""

from .blocky import Block, BlockLayout, blocky_text_to_svg, layout_text
from .convert_text import convert_text_to_svg, escape_xml
from .glyphs import Glyph, load_glyph_table, supported_characters

__all__ = [
    "Block",
    "BlockLayout",
    "Glyph",
    "blocky_text_to_svg",
    "convert_text_to_svg",
    "escape_xml",
    "layout_text",
    "load_glyph_table",
    "supported_characters",
]
