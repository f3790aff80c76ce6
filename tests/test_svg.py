from __future__ import annotations

import re

import pytest

from qr_svg.generator import generate_qr, matrix_from_text
from qr_svg.svg import qr_matrix_to_svg

RECT = re.compile(r'<rect x="(\d+)" y="(\d+)" width="(\d+)" height="(\d+)" fill="([^"]+)"/>')


def _rects(svg_text: str):
    return [(int(x), int(y), int(w), int(h), fill) for x, y, w, h, fill in RECT.findall(svg_text)]


def test_small_matrix_markup() -> None:
    svg_text = qr_matrix_to_svg([[True, False], [False, True]], module_size=2, border=1)
    assert svg_text == (
        '<svg xmlns="http://www.w3.org/2000/svg" width="8" height="8" viewBox="0 0 8 8">'
        '<rect x="0" y="0" width="8" height="8" fill="#fff"/>'
        '<rect x="2" y="2" width="2" height="2" fill="#000"/>'
        '<rect x="4" y="4" width="2" height="2" fill="#000"/>'
        "</svg>"
    )


def test_document_is_square_with_default_margin() -> None:
    svg_text = generate_qr("A")
    assert 'width="232" height="232"' in svg_text
    assert 'viewBox="0 0 232 232"' in svg_text


def test_one_rect_per_dark_module() -> None:
    text = "https://example.com"
    matrix = matrix_from_text(text)
    rects = _rects(generate_qr(text))
    canvas = len(matrix) * 8 + 2 * 32
    background, modules = rects[0], rects[1:]
    assert background == (0, 0, canvas, canvas, "#fff")
    assert len(modules) == sum(sum(1 for cell in row if cell) for row in matrix)
    for x, y, w, h, fill in modules:
        assert (w, h, fill) == (8, 8, "#000")
        assert matrix[(y - 32) // 8][(x - 32) // 8]


def test_dark_mode_swaps_colors_only() -> None:
    text = "https://example.com"
    light = _rects(generate_qr(text))
    dark = _rects(generate_qr(text, dark=True))
    assert [r[:4] for r in light] == [r[:4] for r in dark]
    assert light[0][4] == "#fff" and dark[0][4] == "#000"
    assert {r[4] for r in light[1:]} == {"#000"}
    assert {r[4] for r in dark[1:]} == {"#fff"}


def test_module_size_scales_document() -> None:
    svg_text = generate_qr("A", module_size=3)
    assert 'width="87"' in svg_text


@pytest.mark.parametrize(
    "kwargs",
    [{"module_size": 0}, {"module_size": -2}, {"border": -1}],
)
def test_invalid_render_options(kwargs) -> None:
    with pytest.raises(ValueError):
        qr_matrix_to_svg([[True]], **kwargs)


def test_empty_matrix_rejected() -> None:
    with pytest.raises(ValueError):
        qr_matrix_to_svg([])
