import xml.etree.ElementTree as ET

from opencode_logo_font.convert_text import convert_text_to_svg, escape_xml

SVG = "{http://www.w3.org/2000/svg}"


def test_defaults():
    svg = convert_text_to_svg("HELLO")
    assert svg == (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 20">\n'
        '  <text x="0" y="14" font-family="OpenCodeLogo" font-size="48" fill="#000">HELLO</text>\n'
        '</svg>'
    )


def test_text_is_escaped():
    svg = convert_text_to_svg('<b>"Tom" & \'Jerry\'</b>')
    text = ET.fromstring(svg).find(f"{SVG}text")
    assert text.text == '<b>"Tom" & \'Jerry\'</b>'
    assert "&lt;b&gt;&quot;Tom&quot; &amp; &apos;Jerry&apos;&lt;/b&gt;" in svg


def test_options_become_attributes():
    svg = convert_text_to_svg(
        "HI",
        font_size=24,
        color="#fff",
        font_family="Mono",
        width=200,
        height=40,
        role="img",
        aria_label="Say hi",
    )
    root = ET.fromstring(svg)
    assert root.get("width") == "200"
    assert root.get("height") == "40"
    assert root.get("role") == "img"
    assert root.get("aria-label") == "Say hi"
    text = root.find(f"{SVG}text")
    assert text.get("font-family") == "Mono"
    assert text.get("font-size") == "24"
    assert text.get("fill") == "#fff"


def test_unset_options_are_omitted():
    svg = convert_text_to_svg("HI")
    for attr in ("width=", "height=", "role=", "aria-label="):
        assert attr not in svg


def test_without_namespace():
    svg = convert_text_to_svg("HI", include_namespace=False)
    assert svg.startswith("<svg  viewBox=")
    assert "xmlns" not in svg


def test_none_text():
    root = ET.fromstring(convert_text_to_svg(None))
    assert root.find(f"{SVG}text").text is None


def test_escape_xml():
    assert escape_xml(None) == ""
    assert escape_xml("a&b") == "a&amp;b"
    assert escape_xml(42) == "42"
    assert escape_xml("<>\"'") == "&lt;&gt;&quot;&apos;"
