#!/usr/bin/env python3
"""
Validate the generated OpenCodeLogo font files.

Usage:
    python -m opencode_logo_font.validate_fonts [font_dir] [font_name]

Checks, for each of <font_name>.woff2, .woff and .ttf in font_dir:
    - the file exists and is not empty (fatal)
    - the file starts with the signature of its container format (fatal)
    - the file is under its size budget (warning only)
Once every file passes, all three are decoded with fonttools and must map
the same code points to the same glyphs (fatal).

Exits with status 1 when any fatal check fails.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from fontTools.ttLib import TTFont

KB = 1024

# Size budgets in bytes
MAX_SIZES = {
    "woff2": 50 * KB,
    "woff": 100 * KB,
    "ttf": 200 * KB,
}

SIGNATURES = {
    "woff2": (b"wOF2",),
    "woff": (b"wOFF",),
    "ttf": (b"\x00\x01\x00\x00", b"true"),
}

FORMAT_NAMES = {
    "woff2": "WOFF2",
    "woff": "WOFF (Web Open Font Format)",
    "ttf": "TrueType",
}


@dataclass
class ValidationReport:
    sizes: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    passed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def total_size(self) -> int:
        return sum(self.sizes.values())


def check_font_file(path: Path, ext: str, report: ValidationReport) -> bool:
    """Run the per-file checks, recording findings. Returns False on a fatal problem."""
    label = ext.upper()
    if not path.is_file():
        report.errors.append(f"{label} file missing: {path}")
        return False

    size = path.stat().st_size
    report.sizes[ext] = size
    if size == 0:
        report.errors.append(f"{label} file is empty: {path}")
        return False

    limit = MAX_SIZES[ext]
    if size > limit:
        report.warnings.append(
            f"{label} size ({size} bytes) exceeds limit ({limit} bytes)"
        )
    else:
        report.passed.append(f"{label}: {size} bytes (under {limit // KB}KB limit)")

    with open(path, "rb") as f:
        header = f.read(4)
    if header not in SIGNATURES[ext]:
        expected = " or ".join(sig.hex() for sig in SIGNATURES[ext])
        report.errors.append(
            f"{label} signature incorrect (expected {expected}, got {header.hex() or 'nothing'})"
        )
        return False
    report.passed.append(f"{label} format verified ({FORMAT_NAMES[ext]}, signature {header.hex()})")
    return True


def check_consistent_cmaps(paths: dict[str, Path], report: ValidationReport):
    """All formats must decode to the same code point -> glyph mapping."""
    cmaps = {}
    for ext, path in paths.items():
        try:
            font = TTFont(path)
            cmaps[ext] = font.getBestCmap()
            font.close()
        except Exception as exc:
            report.errors.append(f"{ext.upper()} could not be decoded: {exc}")
            return

    reference = cmaps["ttf"]
    if not reference:
        report.errors.append("TTF has no character map")
        return
    for ext, cmap in cmaps.items():
        if cmap != reference:
            missing = sorted(set(reference) - set(cmap))
            extra = sorted(set(cmap) - set(reference))
            report.errors.append(
                f"{ext.upper()} character map differs from TTF "
                f"(missing {[chr(c) for c in missing]}, extra {[chr(c) for c in extra]})"
            )
            return
    report.passed.append(f"All formats map the same {len(reference)} characters")


def validate_fonts(font_dir: Path, font_name: str = "OpenCodeLogo") -> ValidationReport:
    report = ValidationReport()
    paths = {ext: Path(font_dir) / f"{font_name}.{ext}" for ext in MAX_SIZES}

    structurally_ok = True
    for ext, path in paths.items():
        if not check_font_file(path, ext, report):
            structurally_ok = False

    if structurally_ok:
        check_consistent_cmaps(paths, report)
    return report


def main():
    font_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("fonts")
    font_name = sys.argv[2] if len(sys.argv) > 2 else "OpenCodeLogo"

    print(f"Validating generated fonts in {font_dir}/ ...\n")
    report = validate_fonts(font_dir, font_name)

    for line in report.passed:
        print(f"OK    {line}")
    for line in report.warnings:
        print(f"WARN  {line}")
    for line in report.errors:
        print(f"FAIL  {line}")

    print()
    if report.ok:
        print("All fonts validated successfully")
    else:
        print(f"Font validation failed with {len(report.errors)} error(s)")
    print(f"Total size: {report.total_size / KB:.1f} KB")

    sys.exit(0 if report.ok else 1)


if __name__ == "__main__":
    main()
