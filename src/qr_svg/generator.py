"""QR data helpers."""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from . import qrcodegen
from .errors import InvalidInput
from .svg import qr_matrix_to_svg

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1F]')
_WHITESPACE = re.compile(r"\s+")
_MAX_FILENAME_STEM = 80


def normalize_text(text: object) -> str:
    """Return ``text`` trimmed, rejecting anything that cannot be encoded."""
    if text is None:
        raise InvalidInput("QR text cannot be None")
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInput("QR bytes are not valid UTF-8") from exc
    normalized = str(text).strip()
    if not normalized:
        raise InvalidInput("QR text cannot be empty")
    try:
        normalized.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInput("QR text is not valid Unicode") from exc
    return normalized


def encode_text(text: object, mask: Optional[int] = None) -> qrcodegen.QrCode:
    """Validate ``text`` and encode it into a symbol, optionally with a forced ``mask``."""
    return qrcodegen.QrCode.encode_text(normalize_text(text), mask)


def matrix_from_text(text: object) -> List[List[bool]]:
    """Encode ``text`` into a matrix of booleans representing the QR code."""
    return encode_text(text).get_matrix()


def generate_qr(text: object, dark: bool = False, module_size: int = 8) -> str:
    """Encode ``text`` and return the symbol as SVG markup."""
    return qr_matrix_to_svg(matrix_from_text(text), dark=dark, module_size=module_size)


def download_filename(title: Optional[str], now: Optional[datetime] = None, extension: str = "svg") -> str:
    """Build ``<sanitized title>_<YYYYMMDD_HHMM>.<extension>`` for a saved symbol."""
    stem = _UNSAFE_FILENAME_CHARS.sub("_", title or "")
    stem = _WHITESPACE.sub(" ", stem).strip()[:_MAX_FILENAME_STEM]
    if not stem:
        stem = "qr-code"
    if now is None:
        now = datetime.now()
    return f"{stem}_{now:%Y%m%d_%H%M}.{extension}"
