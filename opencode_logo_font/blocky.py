"""
Blocky pixel-art text rendering.

Lays characters out on a lattice of square blocks using the glyph table and
serializes the result as a standalone SVG document. Characters without a
glyph are dropped, so arbitrary user input always renders.
"""

import copy
import math
from dataclasses import dataclass
from functools import lru_cache

from .convert_text import escape_xml
from .glyphs import GRID_ROWS, load_glyph_data, load_glyph_table
from .grid_path import format_number, merge_cells, rectangles_to_path

DEFAULT_THEME = "dark"
DEFAULT_BLOCK_SIZE = 6
DEFAULT_CHAR_SPACING = 1


@dataclass(frozen=True)
class Block:
    x: float
    y: float
    width: float
    height: float
    fill: str
    column: int
    row: int


@dataclass(frozen=True)
class BlockLayout:
    blocks: tuple[Block, ...]
    width: float
    height: float
    text: str


@lru_cache(maxsize=1)
def _default_themes() -> dict[str, dict]:
    return load_glyph_data()["metadata"]["themes"]


def load_themes() -> dict[str, dict]:
    """Return {theme_name: {"primary", "secondary", "rows"}} from glyph metadata."""
    return copy.deepcopy(_default_themes())


def row_fills(theme: str) -> list[str]:
    """Resolve a theme's per-row band names into fill colors."""
    themes = load_themes()
    if theme not in themes:
        raise ValueError(
            f"Unknown theme {theme!r}, expected one of {sorted(themes)}"
        )
    palette = themes[theme]
    bands = palette["rows"]
    if len(bands) != GRID_ROWS:
        raise ValueError(
            f"Theme '{theme}' defines {len(bands)} row bands, expected {GRID_ROWS}"
        )
    return [palette[band] for band in bands]


def _check_options(block_size, char_spacing):
    if (
        isinstance(block_size, bool)
        or not isinstance(block_size, (int, float))
        or not math.isfinite(block_size)
        or block_size <= 0
    ):
        raise ValueError(f"block_size must be a positive finite number, got {block_size!r}")
    if isinstance(char_spacing, bool) or not isinstance(char_spacing, int) or char_spacing < 0:
        raise ValueError(f"char_spacing must be a non-negative integer, got {char_spacing!r}")


def layout_text(
    text,
    theme: str = DEFAULT_THEME,
    block_size: float = DEFAULT_BLOCK_SIZE,
    char_spacing: int = DEFAULT_CHAR_SPACING,
) -> BlockLayout:
    """
    Position one block per filled glyph cell.

    The cursor is tracked in whole block columns and advances by the glyph
    width plus `char_spacing` after every rendered character, trailing
    spacing included.
    """
    _check_options(block_size, char_spacing)
    fills = row_fills(theme)
    glyphs = load_glyph_table()

    blocks = []
    rendered = []
    cursor = 0
    for char in "" if text is None else str(text):
        glyph = glyphs.get(char)
        if glyph is None:
            continue
        rendered.append(char)
        for col, row in glyph.filled_cells():
            column = cursor + col
            blocks.append(Block(
                x=column * block_size,
                y=row * block_size,
                width=block_size,
                height=block_size,
                fill=fills[row],
                column=column,
                row=row,
            ))
        cursor += glyph.width + char_spacing

    return BlockLayout(
        blocks=tuple(blocks),
        width=cursor * block_size,
        height=GRID_ROWS * block_size,
        text="".join(rendered),
    )


def _optimized_shapes(layout: BlockLayout, block_size: float) -> list[str]:
    """One <path> per fill color holding the merged rectangles."""
    cells_by_fill: dict[str, list[tuple[int, int]]] = {}
    for block in layout.blocks:
        cells_by_fill.setdefault(block.fill, []).append((block.column, block.row))

    shapes = []
    for fill, cells in cells_by_fill.items():
        rectangles = [
            (col * block_size, row * block_size, width * block_size, height * block_size)
            for col, row, width, height in merge_cells(cells)
        ]
        shapes.append(f'<path d="{rectangles_to_path(rectangles)}" fill="{fill}"/>')
    return shapes


def _block_shapes(layout: BlockLayout) -> list[str]:
    return [
        f'<rect x="{format_number(b.x)}" y="{format_number(b.y)}" '
        f'width="{format_number(b.width)}" height="{format_number(b.height)}" fill="{b.fill}"/>'
        for b in layout.blocks
    ]


def blocky_text_to_svg(
    text,
    theme: str = DEFAULT_THEME,
    block_size: float = DEFAULT_BLOCK_SIZE,
    char_spacing: int = DEFAULT_CHAR_SPACING,
    optimize: bool = True,
) -> str:
    """Render text as a pixel-art SVG document."""
    layout = layout_text(text, theme=theme, block_size=block_size, char_spacing=char_spacing)
    if optimize:
        shapes = _optimized_shapes(layout, block_size)
    else:
        shapes = _block_shapes(layout)

    width = format_number(layout.width)
    height = format_number(layout.height)
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" role="img" aria-label="{escape_xml(layout.text)}">'
    ]
    lines.extend(f"  {shape}" for shape in shapes)
    lines.append("</svg>")
    return "\n".join(lines)
