#!/usr/bin/env python3
"""
Build the OpenCodeLogo web fonts from grid glyph definitions.
Uses fonttools to turn an SVG font into TrueType, WOFF and WOFF2.

Usage:
    python -m opencode_logo_font.build_font [glyph_data.yaml] [output_dir]

    Both arguments are optional. The glyph data defaults to the bundled
    glyph_data/opencode_logo.yaml and the output directory to fonts/.

Pipeline:
    1. one standalone SVG per glyph, written to a temporary directory
    2. all glyph SVGs assembled into a single SVG font document
    3. SVG font -> TTF
    4. TTF -> WOFF and TTF -> WOFF2 (both from the same TTF bytes)
    5. output_dir/<FontName>.ttf, .woff, .woff2
    6. the temporary directory is removed whatever happened above

Outputs:
    output_dir/OpenCodeLogo.ttf
    output_dir/OpenCodeLogo.woff
    output_dir/OpenCodeLogo.woff2
"""

import shutil
import sys
import tempfile
import time
import xml.etree.ElementTree as ET
from io import BytesIO
from pathlib import Path

from fontTools import agl
from fontTools.fontBuilder import FontBuilder
from fontTools.misc.roundTools import otRound
from fontTools.misc.transform import Transform
from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.pens.transformPen import TransformPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.svgLib.path import parse_path
from fontTools.ttLib import TTFont, newTable

from .glyphs import DEFAULT_GLYPH_DATA, Glyph, build_glyph_table, load_glyph_data
from .grid_path import format_number, grid_to_svg_path

SVG_NS = "http://www.w3.org/2000/svg"

FONT_FORMATS = ("ttf", "woff", "woff2")


def glyph_name_for(code_point: int) -> str:
    """PostScript glyph name from the Adobe Glyph List, uniXXXX otherwise."""
    return agl.UV2AGL.get(code_point, f"uni{code_point:04X}")


def font_revision(version) -> float:
    """
    head.fontRevision for a metadata version string.

    Only MAJOR.MINOR fits the Fixed field, so a patch component is dropped:
    "1.0.1" gives 1.0.
    """
    major, _, rest = str(version).partition(".")
    minor = rest.split(".")[0] or "0"
    if not (major.isdigit() and minor.isdigit()):
        raise ValueError(f"Invalid font version {version!r}, expected MAJOR.MINOR[.PATCH]")
    return float(f"{major}.{minor}")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_all(element, name: str) -> list:
    return [el for el in element.iter() if _local_name(el.tag) == name]


def glyph_svg_document(glyph: Glyph, metadata: dict) -> str:
    """Standalone SVG for one glyph, sized to the full font grid."""
    cell_size = metadata["cell_size"]
    columns = metadata["grid_columns"]
    width = format_number(columns * cell_size)
    height = format_number(metadata["grid_rows"] * cell_size)
    svg_path = grid_to_svg_path(glyph.font_grid(columns), cell_size)

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="{SVG_NS}" width="{width}" height="{height}" viewBox="0 0 {width} {height}">\n'
        f'  <path d="{svg_path}" fill="#000000"/>\n'
        '</svg>\n'
    )


def write_glyph_svgs(
    glyphs: dict[str, Glyph],
    metadata: dict,
    temp_dir: Path,
) -> list[tuple[Glyph, Path]]:
    """Stage 1: write one SVG file per glyph, named by code point."""
    print("Generating SVG glyphs from grid data...")
    written = []
    for glyph in glyphs.values():
        path = temp_dir / f"u{glyph.code_point:04X}.svg"
        path.write_text(glyph_svg_document(glyph, metadata), encoding="utf-8")
        written.append((glyph, path))
    print(f"  Generated {len(written)} SVG glyphs in {temp_dir}")
    return written


def _read_glyph_svg(path: Path) -> tuple[str, float, float]:
    """Return (path data, width, height) of a single-glyph SVG file."""
    root = ET.parse(path).getroot()
    view_box = root.get("viewBox")
    if view_box:
        _, _, width, height = (float(v) for v in view_box.replace(",", " ").split())
    else:
        width, height = float(root.get("width")), float(root.get("height"))
    if width <= 0 or height <= 0:
        raise ValueError(f"Glyph SVG {path} has an empty canvas ({width} x {height})")
    path_data = " ".join(el.get("d", "") for el in _find_all(root, "path")).strip()
    return path_data, width, height


def build_svg_font(glyph_svgs: list[tuple[Glyph, Path]], metadata: dict) -> str:
    """
    Stage 2: assemble the glyph SVGs into one SVG font document.

    Each glyph is scaled so the SVG canvas height equals font_height, flipped
    to y-up, and shifted so the bottom of the canvas sits `descent` units
    below the baseline.
    """
    print("Creating SVG font...")
    font_name = metadata["font_name"]
    font_height = metadata["font_height"]
    descent = metadata["descent"]
    ascent = font_height - descent

    svg = ET.Element("svg", {"xmlns": SVG_NS})
    defs = ET.SubElement(svg, "defs")
    font = ET.SubElement(defs, "font", {"id": font_name})
    ET.SubElement(font, "font-face", {
        "font-family": font_name,
        "units-per-em": str(font_height),
        "ascent": str(ascent),
        "descent": str(-descent),
    })
    ET.SubElement(font, "missing-glyph", {"horiz-adv-x": "0"})

    seen = {}
    default_advance = None
    for glyph, svg_path in glyph_svgs:
        if glyph.code_point in seen:
            raise ValueError(
                f"Code point U+{glyph.code_point:04X} is mapped by both "
                f"{seen[glyph.code_point]!r} and {glyph.char!r}"
            )
        seen[glyph.code_point] = glyph.char

        path_data, width, height = _read_glyph_svg(svg_path)
        scale = font_height / height
        # Flipping y keeps the grid squares clockwise, as TrueType expects
        transform = Transform(scale, 0, 0, -scale, 0, ascent)

        pen = SVGPathPen(None, ntos=lambda v: str(otRound(v)))
        if path_data:
            parse_path(path_data, TransformPen(pen, transform))
        advance = otRound(width * scale)
        if default_advance is None:
            default_advance = advance

        ET.SubElement(font, "glyph", {
            "glyph-name": glyph_name_for(glyph.code_point),
            "unicode": chr(glyph.code_point),
            "horiz-adv-x": str(advance),
            "d": pen.getCommands(),
        })

    font.set("horiz-adv-x", str(default_advance or 0))
    print(f"  SVG font created with {len(seen)} glyphs")
    return '<?xml version="1.0" standalone="no"?>\n' + ET.tostring(svg, encoding="unicode")


def parse_svg_font(svg_font: str) -> tuple[dict, list[dict]]:
    """Read font-face metrics and glyph entries back out of an SVG font."""
    root = ET.fromstring(svg_font)
    fonts = _find_all(root, "font")
    if not fonts:
        raise ValueError("SVG font document has no <font> element")
    font_el = fonts[0]

    faces = _find_all(font_el, "font-face")
    if not faces:
        raise ValueError("SVG font document has no <font-face> element")
    face = faces[0]
    units_per_em = int(face.get("units-per-em", "1000"))
    face_info = {
        "family": face.get("font-family", font_el.get("id", "")),
        "units_per_em": units_per_em,
        "ascent": int(float(face.get("ascent", units_per_em * 0.8))),
        "descent": abs(int(float(face.get("descent", -units_per_em * 0.2)))),
        "default_advance": int(float(font_el.get("horiz-adv-x", units_per_em))),
    }

    glyph_entries = []
    for glyph_el in _find_all(font_el, "glyph"):
        unicode_val = glyph_el.get("unicode")
        if not unicode_val or len(unicode_val) != 1:
            raise ValueError(
                f"SVG font glyph {glyph_el.get('glyph-name')!r} has unicode "
                f"{unicode_val!r}, expected a single character"
            )
        code_point = ord(unicode_val)
        glyph_entries.append({
            "name": glyph_el.get("glyph-name") or glyph_name_for(code_point),
            "code_point": code_point,
            "advance": int(float(glyph_el.get("horiz-adv-x", face_info["default_advance"]))),
            "d": glyph_el.get("d", ""),
        })
    return face_info, glyph_entries


def svg_font_to_ttf(svg_font: str, metadata: dict) -> bytes:
    """Stage 3: transcode the SVG font into a TrueType font."""
    print("Converting SVG font to TTF...")
    face, glyph_entries = parse_svg_font(svg_font)
    units_per_em = face["units_per_em"]
    ascent = face["ascent"]
    descent = face["descent"]
    font_name = metadata.get("font_name", face["family"])
    version = str(metadata.get("version", "1.0"))
    revision = font_revision(version)

    glyph_order = [".notdef"]
    cmap = {}
    glyphs = {}
    metrics = {}

    # .notdef: hollow box, same advance as the regular glyphs
    notdef_width = face["default_advance"]
    top = ascent - 100
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, top))
    pen.lineTo((notdef_width - 50, top))
    pen.lineTo((notdef_width - 50, 0))
    pen.closePath()
    pen.moveTo((100, 50))
    pen.lineTo((notdef_width - 100, 50))
    pen.lineTo((notdef_width - 100, top - 50))
    pen.lineTo((100, top - 50))
    pen.closePath()
    glyphs[".notdef"] = pen.glyph()
    metrics[".notdef"] = (notdef_width, 50)

    for entry in glyph_entries:
        name = entry["name"]
        if name in glyphs:
            raise ValueError(f"Glyph name '{name}' appears twice in the SVG font")
        if entry["code_point"] in cmap:
            raise ValueError(f"Code point U+{entry['code_point']:04X} appears twice in the SVG font")

        pen = TTGlyphPen(None)
        if entry["d"]:
            parse_path(entry["d"], pen)
        glyph = pen.glyph()
        glyph.recalcBounds(None)

        glyph_order.append(name)
        cmap[entry["code_point"]] = name
        glyphs[name] = glyph
        lsb = glyph.xMin if glyph.numberOfContours else 0
        metrics[name] = (entry["advance"], lsb)

    fb = FontBuilder(units_per_em, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=ascent, descent=-descent)

    ps_name = font_name.replace(" ", "") + "-Regular"
    name_strings = {
        "familyName": {"en": font_name},
        "styleName": {"en": "Regular"},
        "uniqueFontIdentifier": f"FontBuilder:{font_name}.Regular",
        "fullName": {"en": f"{font_name} Regular"},
        "psName": ps_name,
        "version": f"Version {version}",
    }
    if "copyright" in metadata:
        name_strings["copyright"] = {"en": metadata["copyright"]}
    if "description" in metadata:
        name_strings["description"] = {"en": metadata["description"]}
    if "url" in metadata:
        name_strings["vendorURL"] = {"en": metadata["url"]}
    if "license" in metadata:
        name_strings["licenseDescription"] = {"en": metadata["license"]}
    fb.setupNameTable(name_strings)

    # Top of the second grid row is where the letters start
    row_height = units_per_em / metadata.get("grid_rows", 7)
    cap_height = otRound(ascent - row_height)
    fb.setupOS2(
        sTypoAscender=ascent,
        sTypoDescender=-descent,
        sTypoLineGap=0,
        usWinAscent=ascent,
        usWinDescent=descent,
        sxHeight=cap_height,
        sCapHeight=cap_height,
        fsType=0,  # Installable embedding - no restrictions
    )

    advances = {width for width, _ in metrics.values()}
    fb.setupPost(isFixedPitch=1 if len(advances) == 1 else 0)

    # Setup gasp table for pixel-crisp rendering
    gasp = newTable("gasp")
    gasp.gaspRange = {0xFFFF: 0x0001}  # Grid-fit only, no antialiasing
    fb.font["gasp"] = gasp

    fb.setupHead(unitsPerEm=units_per_em, fontRevision=revision)

    buf = BytesIO()
    fb.save(buf)
    ttf = buf.getvalue()
    print(f"  TTF generated ({len(glyph_order)} glyphs)")
    return ttf


def _reflavor(ttf: bytes, flavor: str) -> bytes:
    font = TTFont(BytesIO(ttf))
    font.flavor = flavor
    buf = BytesIO()
    font.save(buf)
    return buf.getvalue()


def _compression(ttf: bytes, packed: bytes) -> str:
    return f"{(len(ttf) - len(packed)) / len(ttf) * 100:.1f}%"


def ttf_to_woff(ttf: bytes) -> bytes:
    """Stage 4a: wrap the TTF in a WOFF (zlib) container."""
    print("Compressing to WOFF...")
    woff = _reflavor(ttf, "woff")
    print(f"  WOFF generated ({_compression(ttf, woff)} compression)")
    return woff


def ttf_to_woff2(ttf: bytes) -> bytes:
    """Stage 4b: wrap the TTF in a WOFF2 (brotli) container."""
    print("Compressing to WOFF2...")
    woff2 = _reflavor(ttf, "woff2")
    print(f"  WOFF2 generated ({_compression(ttf, woff2)} compression)")
    return woff2


def save_fonts(output_dir: Path, font_name: str, buffers: dict[str, bytes]) -> dict[str, Path]:
    """
    Stage 5: write every font buffer as output_dir/<font_name>.<ext>.

    Buffers are first written to hidden staging files beside their targets
    and only renamed onto the final names once every write has succeeded.
    A failed write removes the staging files and leaves any fonts from an
    earlier run untouched.
    """
    print("Saving font files...")
    output_dir.mkdir(parents=True, exist_ok=True)
    staged = {}
    try:
        for ext in FONT_FORMATS:
            staging = output_dir / f".{font_name}.{ext}.tmp"
            staged[ext] = staging
            staging.write_bytes(buffers[ext])
    except Exception:
        for staging in staged.values():
            staging.unlink(missing_ok=True)
        raise

    written = {}
    for ext, staging in staged.items():
        path = output_dir / f"{font_name}.{ext}"
        staging.replace(path)
        written[ext] = path

    for ext, path in written.items():
        print(f"  {ext.upper():<6} {len(buffers[ext]) / 1024:.2f} KB  {path}")
    return written


def cleanup(temp_dir: Path):
    """Stage 6: remove the per-glyph SVG files."""
    print("Cleaning up temporary files...")
    shutil.rmtree(temp_dir, ignore_errors=True)


def build_fonts(glyph_data: dict, output_dir: Path) -> dict[str, Path]:
    """
    Run the whole pipeline and return {extension: path} for the three fonts.

    Any failure aborts the run and propagates; the temporary glyph directory
    is removed on every exit path.
    """
    metadata = glyph_data["metadata"]
    font_name = metadata["font_name"]
    glyphs = build_glyph_table(glyph_data)
    if not glyphs:
        raise ValueError("Glyph data defines no glyphs")
    font_revision(metadata.get("version", "1.0"))

    temp_dir = Path(tempfile.mkdtemp(prefix=f"{font_name}-glyphs-"))
    try:
        glyph_svgs = write_glyph_svgs(glyphs, metadata, temp_dir)
        svg_font = build_svg_font(glyph_svgs, metadata)
        ttf = svg_font_to_ttf(svg_font, metadata)
        buffers = {
            "ttf": ttf,
            "woff": ttf_to_woff(ttf),
            "woff2": ttf_to_woff2(ttf),
        }
        paths = save_fonts(Path(output_dir), font_name, buffers)
    finally:
        cleanup(temp_dir)

    print(f"Fonts saved to: {output_dir}")
    print(f"  Glyphs: {len(glyphs)}")
    print(f"  Units per em: {metadata['font_height']}")
    print(f"  Cell size: {metadata['cell_size']} SVG units")
    return paths


def main():
    if len(sys.argv) > 1 and sys.argv[1] in ("-h", "--help"):
        print("Usage: python -m opencode_logo_font.build_font [glyph_data.yaml] [output_dir]")
        print("\nOutputs:")
        print("  output_dir/OpenCodeLogo.ttf")
        print("  output_dir/OpenCodeLogo.woff")
        print("  output_dir/OpenCodeLogo.woff2")
        print("\nExample:")
        print("  python -m opencode_logo_font.build_font glyph_data/opencode_logo.yaml fonts/")
        sys.exit(0)

    input_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_GLYPH_DATA
    output_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else Path("fonts")

    if not input_path.exists():
        print(f"Error: Input path not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    print("Starting font generation...\n")
    start = time.perf_counter()
    try:
        build_fonts(load_glyph_data(input_path), output_dir)
    except Exception as exc:
        print(f"Error: Font generation failed: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"\nFont generation complete in {time.perf_counter() - start:.2f}s")


if __name__ == "__main__":
    main()
