"""
Glyph table for the OpenCodeLogo pixel font.

Glyphs are loaded from YAML glyph data. Each glyph is a 7-row bitmap at its
natural width; the blocky renderer draws that bitmap directly and the font
build centers it inside the fixed font grid (see Glyph.font_grid).
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import yaml

DEFAULT_GLYPH_DATA = Path(__file__).parent / "glyph_data" / "opencode_logo.yaml"

GRID_ROWS = 7
GRID_COLUMNS = 4


@dataclass(frozen=True)
class Glyph:
    char: str
    code_point: int
    bitmap: tuple[tuple[int, ...], ...]

    @property
    def width(self) -> int:
        return max((len(row) for row in self.bitmap), default=0)

    @property
    def height(self) -> int:
        return len(self.bitmap)

    def font_grid(self, columns: int = GRID_COLUMNS) -> tuple[tuple[int, ...], ...]:
        """Pad the bitmap to `columns` cells, centered horizontally."""
        left = (columns - self.width) // 2
        right = columns - self.width - left
        return tuple(
            (0,) * left + row + (0,) * right
            for row in self.bitmap
        )

    def filled_cells(self) -> list[tuple[int, int]]:
        """Return (col, row) for each filled cell, row-major."""
        return [
            (col_idx, row_idx)
            for row_idx, row in enumerate(self.bitmap)
            for col_idx, pixel in enumerate(row)
            if pixel
        ]


def parse_bitmap(bitmap, rows: int = GRID_ROWS) -> list[list[int]]:
    """
    Convert bitmap to a 2D array of 0s and 1s.
    Accepts string rows ("#" = on), int arrays, or a mapping of
    row index -> row where missing rows are left empty.
    """
    if not bitmap:
        return []

    if isinstance(bitmap, dict):
        parsed = parse_bitmap(list(bitmap.values()))
        width = max((len(row) for row in parsed), default=0)
        by_index = dict(zip(bitmap.keys(), parsed))
        for row_idx in by_index:
            if not isinstance(row_idx, int) or not 0 <= row_idx < rows:
                raise ValueError(f"Bitmap row index {row_idx!r} outside 0..{rows - 1}")
        return [by_index.get(row_idx, [0] * width) for row_idx in range(rows)]

    if isinstance(bitmap[0], str):
        return [
            [1 if c == '#' or c == '1' else 0 for c in row]
            for row in bitmap
        ]
    return [list(row) for row in bitmap]


def validate_glyph(char, bitmap: list[list[int]], grid_rows: int, grid_columns: int):
    """Raise ValueError if a parsed glyph bitmap does not fit the font grid."""
    if not isinstance(char, str) or len(char) != 1:
        raise ValueError(f"Glyph key {char!r} must be a single character")

    if len(bitmap) != grid_rows:
        raise ValueError(
            f"Glyph '{char}' has {len(bitmap)} rows, expected {grid_rows}"
        )

    row_widths = [len(row) for row in bitmap]
    if len(set(row_widths)) > 1:
        raise ValueError(
            f"Glyph '{char}' has inconsistent row widths: {row_widths}"
        )

    width = row_widths[0]
    if not 1 <= width <= grid_columns:
        raise ValueError(
            f"Glyph '{char}' has width {width}, expected 1 to {grid_columns}"
        )

    for row_idx, row in enumerate(bitmap):
        for pixel in row:
            if pixel not in (0, 1):
                raise ValueError(
                    f"Glyph '{char}' row {row_idx} has cell value {pixel!r}, expected 0 or 1"
                )


def load_glyph_data(path: Path | None = None) -> dict:
    """Load glyph definitions and metadata from a YAML file."""
    path = Path(path) if path is not None else DEFAULT_GLYPH_DATA
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not data or "glyphs" not in data:
        raise ValueError(f"Glyph data file {path} has no 'glyphs' section")
    data.setdefault("metadata", {})
    return data


def build_glyph_table(glyph_data: dict) -> dict[str, Glyph]:
    """Validate raw glyph definitions and freeze them into Glyph objects."""
    metadata = glyph_data.get("metadata", {})
    grid_rows = metadata.get("grid_rows", GRID_ROWS)
    grid_columns = metadata.get("grid_columns", GRID_COLUMNS)

    table = {}
    for char, glyph_def in glyph_data["glyphs"].items():
        bitmap = parse_bitmap((glyph_def or {}).get("bitmap", []), grid_rows)
        validate_glyph(char, bitmap, grid_rows, grid_columns)
        table[char] = Glyph(
            char=char,
            code_point=ord(char),
            bitmap=tuple(tuple(row) for row in bitmap),
        )
    return table


@lru_cache(maxsize=1)
def _default_glyph_table() -> dict[str, Glyph]:
    return build_glyph_table(load_glyph_data())


def load_glyph_table(path: Path | None = None) -> dict[str, Glyph]:
    """Return the validated glyph table, keyed by character in file order."""
    if path is None:
        return dict(_default_glyph_table())
    return build_glyph_table(load_glyph_data(path))


def supported_characters(path: Path | None = None) -> frozenset[str]:
    return frozenset(load_glyph_table(path))
