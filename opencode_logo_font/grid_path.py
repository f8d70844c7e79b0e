"""
Turn glyph grids into rectangle path data.

Coordinates here are SVG coordinates: row 0 is the top of the grid and y
grows downward. The font build flips them when it draws outlines.
"""

Rectangle = tuple[float, float, float, float]


def format_number(value: float) -> str:
    """Format a coordinate without a trailing '.0' and with at most 3 decimals."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def bitmap_to_rectangles(bitmap, cell_size: float) -> list[Rectangle]:
    """
    Convert a 2D bitmap array to a list of rectangle coordinates.

    Returns list of (x, y, width, height) tuples for each "on" pixel,
    row-major then column-major.
    """
    rectangles = []
    for row_idx, row in enumerate(bitmap):
        y = row_idx * cell_size
        for col_idx, pixel in enumerate(row):
            if pixel:
                x = col_idx * cell_size
                rectangles.append((x, y, cell_size, cell_size))
    return rectangles


def rectangle_to_path(rectangle: Rectangle) -> str:
    x, y, w, h = rectangle
    x0, y0 = format_number(x), format_number(y)
    x1, y1 = format_number(x + w), format_number(y + h)
    return f"M{x0},{y0} L{x1},{y0} L{x1},{y1} L{x0},{y1} Z"


def rectangles_to_path(rectangles) -> str:
    return " ".join(rectangle_to_path(r) for r in rectangles)


def grid_to_svg_path(bitmap, cell_size: float) -> str:
    """One closed square sub-path per filled cell; empty grid gives ''."""
    return rectangles_to_path(bitmap_to_rectangles(bitmap, cell_size))


def merge_cells(cells) -> list[tuple[int, int, int, int]]:
    """
    Merge filled lattice cells into larger rectangles.

    Args:
        cells: iterable of (col, row) integer cell coordinates

    Returns list of (col, row, width, height) spans in cell units. Cells on
    the same row are first joined into horizontal runs; runs covering the
    same columns on consecutive rows are then stacked. The union of the
    returned spans is exactly the input cell set.
    """
    by_row: dict[int, list[int]] = {}
    for col, row in set(cells):
        by_row.setdefault(row, []).append(col)

    # (col, width) -> span still open for vertical growth
    open_spans: dict[tuple[int, int], list[int]] = {}
    spans = []

    for row in sorted(by_row):
        runs = []
        columns = sorted(by_row[row])
        start = prev = columns[0]
        for col in columns[1:]:
            if col != prev + 1:
                runs.append((start, prev - start + 1))
                start = col
            prev = col
        runs.append((start, prev - start + 1))

        next_open = {}
        for col, width in runs:
            span = open_spans.get((col, width))
            if span is not None and span[1] + span[3] == row:
                span[3] += 1
            else:
                span = [col, row, width, 1]
                spans.append(span)
            next_open[(col, width)] = span
        open_spans = next_open

    return [tuple(span) for span in sorted(spans, key=lambda s: (s[1], s[0]))]
