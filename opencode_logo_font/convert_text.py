"""
Render text as an SVG <text> node that uses the OpenCodeLogo web font.

Nothing is rasterized here: the browser draws the glyphs, so consumers need
the font loaded (e.g. via @font-face) for the text to look blocky.
"""

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def escape_xml(value) -> str:
    if value is None:
        return ""
    return "".join(_XML_ESCAPES.get(c, c) for c in str(value))


def convert_text_to_svg(
    text,
    font_size: float = 48,
    color: str = "#000",
    font_family: str = "OpenCodeLogo",
    width: float | None = None,
    height: float | None = None,
    include_namespace: bool = True,
    role: str | None = None,
    aria_label: str | None = None,
) -> str:
    safe_text = "" if text is None else str(text)
    ns = 'xmlns="http://www.w3.org/2000/svg"' if include_namespace else ""
    w_attr = f' width="{escape_xml(width)}"' if width else ""
    h_attr = f' height="{escape_xml(height)}"' if height else ""
    role_attr = f' role="{escape_xml(role)}"' if role else ""
    aria_attr = f' aria-label="{escape_xml(aria_label)}"' if aria_label else ""

    return (
        f'<svg {ns}{w_attr}{h_attr} viewBox="0 0 100 20"{role_attr}{aria_attr}>\n'
        f'  <text x="0" y="14" font-family="{escape_xml(font_family)}" '
        f'font-size="{escape_xml(font_size)}" fill="{escape_xml(color)}">{escape_xml(safe_text)}</text>\n'
        f"</svg>"
    )
