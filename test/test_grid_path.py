from opencode_logo_font.grid_path import (
    bitmap_to_rectangles,
    format_number,
    grid_to_svg_path,
    merge_cells,
    rectangle_to_path,
)


def _covered(spans):
    return {
        (col + dx, row + dy)
        for col, row, width, height in spans
        for dx in range(width)
        for dy in range(height)
    }


def test_single_cell_path():
    assert grid_to_svg_path([[1]], 100) == "M0,0 L100,0 L100,100 L0,100 Z"


def test_path_order_is_row_major():
    bitmap = [
        [0, 1],
        [1, 0],
    ]
    assert grid_to_svg_path(bitmap, 10) == (
        "M10,0 L20,0 L20,10 L10,10 Z "
        "M0,10 L10,10 L10,20 L0,20 Z"
    )


def test_empty_grid_gives_empty_path():
    assert grid_to_svg_path([[0, 0, 0, 0]] * 7, 100) == ""
    assert grid_to_svg_path([], 100) == ""


def test_bitmap_to_rectangles_scales_by_cell_size():
    rects = bitmap_to_rectangles([[1, 0, 1], [0, 1, 0]], 6)
    assert rects == [(0, 0, 6, 6), (12, 0, 6, 6), (6, 6, 6, 6)]


def test_format_number():
    assert format_number(6) == "6"
    assert format_number(6.0) == "6"
    assert format_number(7.5) == "7.5"
    assert format_number(1 / 3) == "0.333"
    assert format_number(-0.0001) == "0"


def test_rectangle_to_path_with_fractional_size():
    assert rectangle_to_path((0, 0, 2.5, 2.5)) == "M0,0 L2.5,0 L2.5,2.5 L0,2.5 Z"


def test_merge_cells_joins_horizontal_runs():
    assert merge_cells([(0, 0), (1, 0), (2, 0), (4, 0)]) == [(0, 0, 3, 1), (4, 0, 1, 1)]


def test_merge_cells_stacks_matching_runs():
    cells = [(0, 1), (1, 1), (0, 2), (1, 2), (0, 3), (1, 3)]
    assert merge_cells(cells) == [(0, 1, 2, 3)]


def test_merge_cells_does_not_stack_across_gap():
    cells = [(0, 0), (0, 2)]
    assert merge_cells(cells) == [(0, 0, 1, 1), (0, 2, 1, 1)]


def test_merge_cells_without_neighbours_is_unchanged():
    cells = [(0, 0), (2, 0), (1, 1), (3, 1)]
    assert merge_cells(cells) == [(0, 0, 1, 1), (2, 0, 1, 1), (1, 1, 1, 1), (3, 1, 1, 1)]


def test_merge_cells_preserves_covered_area():
    # letter A from the glyph table
    bitmap = [
        "....",
        "####",
        "...#",
        "####",
        "#..#",
        "####",
        "....",
    ]
    cells = [
        (col, row)
        for row, line in enumerate(bitmap)
        for col, c in enumerate(line)
        if c == "#"
    ]
    spans = merge_cells(cells)
    assert _covered(spans) == set(cells)
    assert len(spans) < len(cells)


def test_merge_cells_empty():
    assert merge_cells([]) == []
