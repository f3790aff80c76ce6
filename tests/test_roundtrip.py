from __future__ import annotations

import re

import pytest

from qr_svg.generator import generate_qr

cv2 = pytest.importorskip("cv2")
np = pytest.importorskip("numpy")
Image = pytest.importorskip("PIL.Image")
ImageDraw = pytest.importorskip("PIL.ImageDraw")

RECT = re.compile(r'<rect x="(\d+)" y="(\d+)" width="(\d+)" height="(\d+)" fill="([^"]+)"/>')
SIZE = re.compile(r'<svg [^>]*width="(\d+)" height="(\d+)"')


def _rasterize(svg_text: str):
    width, height = (int(v) for v in SIZE.search(svg_text).groups())
    image = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(image)
    for x, y, w, h, fill in RECT.findall(svg_text):
        if fill != "#000":
            continue
        left, top = int(x), int(y)
        draw.rectangle((left, top, left + int(w) - 1, top + int(h) - 1), fill=0)
    return np.array(image)


@pytest.mark.parametrize(
    "text",
    [
        "A",
        "Hello World",
        "https://example.com",
        "https://example.com/path?query=value&foo=bar",
        "The quick brown fox jumps over the lazy dog. 1234567890",
        "https://storage.googleapis.com/istories/stories/2024/07/17/kopii-amerikanskikh-bespilotnikov-dlya-rossii/index.html",
        "https://example.com/" + "a" * 114,
    ],
)
def test_scanner_decodes_symbol(text: str) -> None:
    decoded, _, _ = cv2.QRCodeDetector().detectAndDecode(_rasterize(generate_qr(text)))
    assert decoded == text
