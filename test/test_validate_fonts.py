import shutil

import pytest

from opencode_logo_font import validate_fonts as vf
from opencode_logo_font.validate_fonts import validate_fonts


@pytest.fixture
def font_copy(tmp_path, font_dir):
    """A scratch copy of the built fonts that tests may damage."""
    target = tmp_path / "fonts"
    shutil.copytree(font_dir, target)
    return target


def test_generated_fonts_pass(font_dir):
    report = validate_fonts(font_dir)
    assert report.ok
    assert report.errors == []
    assert report.warnings == []
    assert set(report.sizes) == {"ttf", "woff", "woff2"}
    assert any("same 32 characters" in line for line in report.passed)


def test_missing_file_is_fatal(font_copy):
    (font_copy / "OpenCodeLogo.woff").unlink()
    report = validate_fonts(font_copy)
    assert not report.ok
    assert any("WOFF file missing" in e for e in report.errors)


def test_empty_file_is_fatal(font_copy):
    (font_copy / "OpenCodeLogo.ttf").write_bytes(b"")
    report = validate_fonts(font_copy)
    assert not report.ok
    assert any("TTF file is empty" in e for e in report.errors)


def test_wrong_signature_is_fatal(font_copy):
    woff = (font_copy / "OpenCodeLogo.woff").read_bytes()
    (font_copy / "OpenCodeLogo.woff2").write_bytes(woff)
    report = validate_fonts(font_copy)
    assert not report.ok
    assert any("WOFF2 signature incorrect" in e and "774f4632" in e for e in report.errors)


def test_oversize_is_only_a_warning(font_copy, monkeypatch):
    monkeypatch.setitem(vf.MAX_SIZES, "ttf", 10)
    report = validate_fonts(font_copy)
    assert report.ok
    assert any("TTF size" in w and "exceeds limit" in w for w in report.warnings)


def test_corrupt_body_is_fatal(font_copy):
    path = font_copy / "OpenCodeLogo.woff"
    path.write_bytes(b"wOFF" + b"\x00" * 40)
    report = validate_fonts(font_copy)
    assert not report.ok
    assert any(e.startswith("WOFF") for e in report.errors)


def test_mismatched_character_maps_are_fatal(font_copy, tmp_path, glyph_data):
    from opencode_logo_font.build_font import build_fonts

    smaller = {
        "metadata": glyph_data["metadata"],
        "glyphs": {k: v for k, v in glyph_data["glyphs"].items() if k != "Z"},
    }
    other = tmp_path / "other"
    build_fonts(smaller, other)
    shutil.copy(other / "OpenCodeLogo.woff2", font_copy / "OpenCodeLogo.woff2")

    report = validate_fonts(font_copy)
    assert not report.ok
    assert any("WOFF2 character map differs" in e and "'Z'" in e for e in report.errors)


def test_main_exit_codes(font_dir, font_copy, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["validate_fonts.py", str(font_dir)])
    with pytest.raises(SystemExit) as excinfo:
        vf.main()
    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "All fonts validated successfully" in out
    assert "Total size:" in out

    (font_copy / "OpenCodeLogo.ttf").unlink()
    monkeypatch.setattr("sys.argv", ["validate_fonts.py", str(font_copy)])
    with pytest.raises(SystemExit) as excinfo:
        vf.main()
    assert excinfo.value.code == 1
    assert "FAIL  TTF file missing" in capsys.readouterr().out
