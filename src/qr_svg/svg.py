"""SVG export helpers for QR modules."""

from __future__ import annotations

from typing import List, Sequence, Tuple

LIGHT_COLOR = "#fff"
DARK_COLOR = "#000"


def qr_matrix_to_svg(
    matrix: Sequence[Sequence[bool]],
    dark: bool = False,
    module_size: int = 8,
    border: int = 4,
) -> str:
    """Render ``matrix`` as an SVG document with one ``<rect>`` per dark module.

    ``border`` is the quiet zone in modules. With ``dark`` set the foreground
    and background colours are swapped so the symbol reads light-on-dark.
    """
    if module_size <= 0:
        raise ValueError("module_size must be positive")
    if border < 0:
        raise ValueError("border must not be negative")
    size = len(matrix)
    if size == 0:
        raise ValueError("matrix must not be empty")

    foreground, background = _colors(dark)
    margin = border * module_size
    canvas = size * module_size + 2 * margin

    parts: List[str] = [
        _svg_header(canvas),
        _rect(0, 0, canvas, background),
    ]
    for y, row in enumerate(matrix):
        for x, value in enumerate(row):
            if value:
                parts.append(
                    _rect(margin + x * module_size, margin + y * module_size, module_size, foreground)
                )
    parts.append("</svg>")
    return "".join(parts)


def _colors(dark: bool) -> Tuple[str, str]:
    if dark:
        return LIGHT_COLOR, DARK_COLOR
    return DARK_COLOR, LIGHT_COLOR


def _svg_header(canvas: int) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{canvas}" height="{canvas}" '
        f'viewBox="0 0 {canvas} {canvas}">'
    )


def _rect(x: int, y: int, side: int, fill: str) -> str:
    return f'<rect x="{x}" y="{y}" width="{side}" height="{side}" fill="{fill}"/>'
